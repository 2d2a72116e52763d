"""
Document Generation Module

Renders HTML and OpenAPI reports from analyzed services with Jinja2.
"""

from .services_generator import ReportType, ServicesGenerator, value_schema

__all__ = [
    "ReportType",
    "ServicesGenerator",
    "value_schema",
]
