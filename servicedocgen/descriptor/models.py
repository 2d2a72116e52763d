"""Descriptor models of documented services."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import re

from servicedocgen.introspection.type_descriptor import TypeDescriptor, qualified_name

HTTP_METHOD_GET = "get"
HTTP_METHOD_PUT = "put"
HTTP_METHOD_POST = "post"
HTTP_METHOD_DELETE = "delete"
HTTP_METHOD_OPTIONS = "options"
HTTP_METHOD_HEAD = "head"
HTTP_METHOD_PATCH = "patch"

LOCATION_QUERY = "query"
LOCATION_BODY = "body"
LOCATION_HEADER = "header"
LOCATION_PATH = "path"
LOCATION_FORM_DATA = "formData"
LOCATION_COOKIE = "cookie"

SCHEME_HTTP = "http"
SCHEME_HTTPS = "https"
SCHEME_WS = "ws"
SCHEME_WSS = "wss"

STATUS_CODE_SUCCESS = "200"
STATUS_CODE_NO_CONTENT = "204"
STATUS_CODE_INTERNAL_SERVER_ERROR = "500"

REASON_SUCCESS = "Success"
REASON_ERROR = "Error"

# Regex error names that match any exception
CATCH_ALL_PATTERNS = ("", ".", ".*")

DEFAULT_JSON_EXAMPLE = """{"message": "text",
  "code": "text",
  "uuid": "text",
  "errors": {
    "bean.property.path": [
       "Error message 1",
       "Error message 2"
    ],
    ...
  }
}"""

DEFAULT_XML_EXAMPLE = """<error code='text' uuid='text'>
  <message>text</message>
  <violations>
    <violation path='bean.property.path'>
      <message>Error message 1</message>
      <message>Error message 2</message>
    </violation>
    ...
  </violations>
</error>"""


class ErrorMatch(str, Enum):
    """How an error mapping selects exceptions"""
    REGEX = "regex"
    ASSIGNABLE = "assignable"
    ALWAYS = "always"


@dataclass
class ContactDescriptor:
    """Contact of the API owner."""

    name: str = ""
    url: str = ""
    email: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "url": self.url, "email": self.email}


@dataclass
class LicenseDescriptor:
    """License of the API."""

    name: str = ""
    url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "url": self.url}


@dataclass
class InfoDescriptor:
    """General information of the API."""

    title: str = ""
    version: str = ""
    description: str = ""
    terms_of_service: str = ""
    contact: ContactDescriptor = field(default_factory=ContactDescriptor)
    license: LicenseDescriptor = field(default_factory=LicenseDescriptor)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "version": self.version,
            "description": self.description,
            "terms_of_service": self.terms_of_service,
            "contact": self.contact.to_dict(),
            "license": self.license.to_dict(),
        }


@dataclass
class ErrorDescriptor:
    """
    Mapping of exceptions to an error response.

    `error_name` is a regular expression (searched in the qualified
    exception name) for REGEX, a qualified class name for ASSIGNABLE and
    ignored for ALWAYS.
    """

    error_name: str = ""
    match: ErrorMatch = ErrorMatch.REGEX
    status_code: str = STATUS_CODE_INTERNAL_SERVER_ERROR
    comment: str = ""
    json_example: str = DEFAULT_JSON_EXAMPLE
    xml_example: str = DEFAULT_XML_EXAMPLE
    error_class: Optional[type] = None

    def __post_init__(self):
        self.match = ErrorMatch(self.match)
        self.status_code = str(self.status_code)
        self._pattern: Optional[re.Pattern] = None

    @property
    def error_name_pattern(self) -> re.Pattern:
        if self._pattern is None:
            self._pattern = re.compile(self.error_name or ".*")
        return self._pattern

    @property
    def is_catch_all(self) -> bool:
        """True for a regex mapping that matches every exception name"""
        return self.match == ErrorMatch.REGEX and self.error_name in CATCH_ALL_PATTERNS

    def matches(self, exception_class: type) -> bool:
        """Check if the mapping applies to an exception class"""
        if self.match == ErrorMatch.REGEX:
            return self.error_name_pattern.search(qualified_name(exception_class)) is not None
        if self.match == ErrorMatch.ASSIGNABLE:
            return self.error_class is not None and issubclass(exception_class, self.error_class)
        # ALWAYS only applies to the generic response it adds itself
        return exception_class is BaseException

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_name": self.error_name,
            "match": self.match.value,
            "status_code": self.status_code,
            "comment": self.comment,
        }


@dataclass
class ParameterDescriptor:
    """Parameter of an operation."""

    name: str
    type: TypeDescriptor
    location: str = LOCATION_BODY
    required: bool = False
    description: str = ""
    default_value: Optional[str] = None
    javascript_type: str = ""
    format: Optional[str] = None
    example: Optional[str] = None
    schema_name: Optional[str] = None

    @property
    def is_array(self) -> bool:
        return self.javascript_type == "array"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.type_name,
            "location": self.location,
            "required": self.required,
            "description": self.description,
            "default_value": self.default_value,
            "javascript_type": self.javascript_type,
            "format": self.format,
            "example": self.example,
            "schema_name": self.schema_name,
        }


@dataclass
class ResponseDescriptor:
    """Success or error response of an operation."""

    status_code: str
    type: TypeDescriptor
    reason: str = REASON_SUCCESS
    description: str = ""
    javascript_type: str = ""
    format: Optional[str] = None
    example: Optional[str] = None
    schema_name: Optional[str] = None
    error: bool = False

    @property
    def is_array(self) -> bool:
        return self.javascript_type == "array"

    @property
    def has_content(self) -> bool:
        return self.javascript_type != "void" and self.example is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status_code": self.status_code,
            "type": self.type.type_name,
            "reason": self.reason,
            "description": self.description,
            "javascript_type": self.javascript_type,
            "format": self.format,
            "example": self.example,
            "schema_name": self.schema_name,
            "error": self.error,
        }


@dataclass
class OperationDescriptor:
    """A single REST operation (service method)."""

    name: str
    path: str
    full_path: str = ""
    http_method: str = ""
    id: str = ""
    summary: str = ""
    description: str = ""
    deprecated: bool = False
    consumes: List[str] = field(default_factory=list)
    produces: List[str] = field(default_factory=list)
    parameters: List[ParameterDescriptor] = field(default_factory=list)
    responses: List[ResponseDescriptor] = field(default_factory=list)

    @property
    def body_parameter(self) -> Optional[ParameterDescriptor]:
        for parameter in self.parameters:
            if parameter.location == LOCATION_BODY:
                return parameter
        return None

    @property
    def form_parameters(self) -> List[ParameterDescriptor]:
        return [p for p in self.parameters if p.location == LOCATION_FORM_DATA]

    @property
    def openapi_parameters(self) -> List[ParameterDescriptor]:
        """Parameters documented in the OpenAPI `parameters` list"""
        return [p for p in self.parameters if p.location not in (LOCATION_BODY, LOCATION_FORM_DATA)]

    @property
    def success_response(self) -> Optional[ResponseDescriptor]:
        for response in self.responses:
            if not response.error:
                return response
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "full_path": self.full_path,
            "http_method": self.http_method,
            "summary": self.summary,
            "description": self.description,
            "deprecated": self.deprecated,
            "consumes": self.consumes,
            "produces": self.produces,
            "parameters": [p.to_dict() for p in self.parameters],
            "responses": [r.to_dict() for r in self.responses],
        }


@dataclass
class ServiceDescriptor:
    """A documented service class."""

    name: str
    qualified_name: str = ""
    base_path: str = ""
    description: str = ""
    consumes: List[str] = field(default_factory=list)
    produces: List[str] = field(default_factory=list)
    operations: List[OperationDescriptor] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "qualified_name": self.qualified_name,
            "base_path": self.base_path,
            "description": self.description,
            "consumes": self.consumes,
            "produces": self.produces,
            "operations": [o.to_dict() for o in self.operations],
        }


@dataclass
class ServicesDescriptor:
    """All documented services with the global API settings."""

    info: InfoDescriptor = field(default_factory=InfoDescriptor)
    host: str = ""
    port: Optional[int] = None
    base_path: str = ""
    schemes: List[str] = field(default_factory=lambda: [SCHEME_HTTPS])
    consumes: List[str] = field(default_factory=list)
    produces: List[str] = field(default_factory=list)
    errors: List[ErrorDescriptor] = field(default_factory=list)
    services: List[ServiceDescriptor] = field(default_factory=list)
    schema_definition_json: str = ""
    schema_definition_yaml: str = ""

    @property
    def operations(self) -> List[OperationDescriptor]:
        return [o for s in self.services for o in s.operations]

    @property
    def server_urls(self) -> List[str]:
        """Server URLs for every scheme (relative base path without host)"""
        if not self.host:
            return [self.base_path or "/"]
        authority = self.host if self.port is None else f"{self.host}:{self.port}"
        return [f"{scheme}://{authority}{self.base_path}" for scheme in self.schemes]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "info": self.info.to_dict(),
            "host": self.host,
            "port": self.port,
            "base_path": self.base_path,
            "schemes": self.schemes,
            "consumes": self.consumes,
            "produces": self.produces,
            "errors": [e.to_dict() for e in self.errors],
            "services": [s.to_dict() for s in self.services],
        }
