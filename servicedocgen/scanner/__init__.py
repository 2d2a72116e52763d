"""Discovery of REST service classes."""

from .service_scanner import ServiceLoadError, ServiceScanner

__all__ = [
    "ServiceLoadError",
    "ServiceScanner",
]
