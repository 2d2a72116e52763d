"""
Service Analysis Module

Builds the descriptor tree (services, operations, parameters, responses)
of REST service classes and attaches the component schemas.
"""

from .service_analyzer import ServiceAnalyzer, append_path, import_object

__all__ = [
    "ServiceAnalyzer",
    "append_path",
    "import_object",
]
