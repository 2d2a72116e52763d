"""
Services Generator - Renders documentation reports with Jinja2 templates.

Supports:
- HTML service documentation
- OpenAPI 3.0.3 JSON and YAML documents
- Custom template directories overriding the packaged templates
"""

import logging
from collections import OrderedDict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape
import yaml

from servicedocgen.descriptor.models import (
    OperationDescriptor,
    ParameterDescriptor,
    ResponseDescriptor,
    ServiceDescriptor,
    ServicesDescriptor,
)
from servicedocgen.projection.schema_projector import primitive_fragment, schema_ref

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

DEFAULT_MEDIA_TYPE = "application/json"

# Marker PyYAML appends after a plain top level scalar
DOCUMENT_END = "\n...\n"


class ReportType(str, Enum):
    """Generated report formats"""
    HTML = "html"
    OPENAPI_JSON = "openapi_json"
    OPENAPI_YAML = "openapi_yaml"

    @property
    def template_name(self) -> str:
        return {
            ReportType.HTML: "service_documentation.html.j2",
            ReportType.OPENAPI_JSON: "openapi.json.j2",
            ReportType.OPENAPI_YAML: "openapi.yaml.j2",
        }[self]

    @property
    def output_name(self) -> str:
        return {
            ReportType.HTML: "service-documentation.html",
            ReportType.OPENAPI_JSON: "openapi.json",
            ReportType.OPENAPI_YAML: "openapi.yaml",
        }[self]

    @classmethod
    def parse(cls, value: Union[str, "ReportType"]) -> "ReportType":
        """
        Parse a report type name (case insensitive)

        Raises:
            ValueError: If the name is not a known report type
        """
        if isinstance(value, ReportType):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown report type: {value} (expected one of {', '.join(r.value for r in cls)})"
            )


def yaml_scalar(value: Any) -> str:
    """
    Render a value as a single line YAML flow node

    Strings are always double quoted so line breaks and indicator
    characters are escaped, other values use the flow style.
    """
    is_text = isinstance(value, str)
    text = yaml.safe_dump(
        str(value) if is_text else value,
        default_flow_style=True,
        default_style='"' if is_text else None,
        allow_unicode=True,
        width=float("inf"),
    )
    if text.endswith(DOCUMENT_END):
        text = text[: -len(DOCUMENT_END)]
    return text.rstrip("\n")


def value_schema(element: Union[ParameterDescriptor, ResponseDescriptor]) -> Dict[str, Any]:
    """OpenAPI schema of a parameter or response value"""
    descriptor = element.type

    if descriptor.is_mapping:
        values: Dict[str, Any] = {}
        if descriptor.component_type is not None:
            if element.schema_name:
                values = schema_ref(element.schema_name)
            else:
                values = primitive_fragment(descriptor.component_type) or {}
        return {"type": "object", "additionalProperties": values}

    if element.schema_name:
        reference = schema_ref(element.schema_name)
        if descriptor.is_container:
            return {"type": "array", "items": reference}
        return reference

    fragment = primitive_fragment(descriptor)
    if fragment is not None:
        return fragment

    if descriptor.is_container:
        return {"type": "array", "items": primitive_fragment(descriptor.component_type) or {}}

    if element.javascript_type == "array":
        return {"type": "array", "items": {}}

    schema: Dict[str, Any] = {"type": element.javascript_type or "object"}
    if element.format:
        schema["format"] = element.format
    return schema


def unique_responses(operation: OperationDescriptor) -> List[Tuple[str, ResponseDescriptor]]:
    """Responses of an operation keyed by status code (first one wins)"""
    responses: "OrderedDict[str, ResponseDescriptor]" = OrderedDict()
    for response in operation.responses:
        responses.setdefault(response.status_code, response)
    return list(responses.items())


def group_paths(services: ServicesDescriptor) -> "OrderedDict[str, List[Tuple[ServiceDescriptor, OperationDescriptor]]]":
    """Operations of all services grouped by their full path"""
    paths: "OrderedDict[str, List[Tuple[ServiceDescriptor, OperationDescriptor]]]" = OrderedDict()
    for service in services.services:
        for operation in service.operations:
            paths.setdefault(operation.full_path or operation.path, []).append((service, operation))
    return paths


class ServicesGenerator:
    """Renders reports of a ServicesDescriptor"""

    def __init__(self, template_dir: Optional[Union[str, Path]] = None):
        """
        Initialize ServicesGenerator

        Args:
            template_dir: Optional directory with templates overriding the packaged ones
        """
        search_path = [str(TEMPLATE_DIR)]
        if template_dir:
            search_path.insert(0, str(template_dir))

        self.env = Environment(
            loader=FileSystemLoader(search_path),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=select_autoescape(
                enabled_extensions=("html", "html.j2"),
                default_for_string=False,
                default=False,
            ),
        )
        self.env.filters["yaml"] = yaml_scalar
        self.env.globals.update(
            value_schema=value_schema,
            responses=unique_responses,
            default_media_type=DEFAULT_MEDIA_TYPE,
        )

    def render(self, services: ServicesDescriptor, report_type: Union[str, ReportType]) -> str:
        """
        Render one report

        Args:
            services: Analyzed services
            report_type: Report to render

        Returns:
            Rendered document text
        """
        report_type = ReportType.parse(report_type)
        template = self.env.get_template(report_type.template_name)
        return template.render(services=services, paths=group_paths(services))

    def generate(
        self,
        services: ServicesDescriptor,
        output_dir: Union[str, Path],
        reports: Iterable[Union[str, ReportType]] = tuple(ReportType),
    ) -> List[Path]:
        """
        Render reports and write them to the output directory

        Returns:
            Paths of the written files
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        written = []
        for report in reports:
            report_type = ReportType.parse(report)
            output_file = output_dir / report_type.output_name
            output_file.write_text(self.render(services, report_type), encoding="utf-8")
            logger.info(f"Generated {report_type.value} report: {output_file}")
            written.append(output_file)
        return written
