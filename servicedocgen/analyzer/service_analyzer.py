"""
Service Analyzer - Builds the descriptor tree of REST service classes.

Supports:
- Service/operation metadata from the REST decorators
- Parameter locations from `typing.Annotated` markers
- Success responses (200, or 204 for `None` results)
- Error responses from docstring `Raises:` sections and error mappings
- Examples and component schemas from the projection engine
"""

import builtins
import importlib
import inspect
import logging
import re
import typing
from typing import Any, Callable, Dict, Iterable, List, Optional

from config import ServicesConfig
from servicedocgen.descriptor.models import (
    LOCATION_BODY,
    LOCATION_PATH,
    REASON_ERROR,
    REASON_SUCCESS,
    STATUS_CODE_INTERNAL_SERVER_ERROR,
    STATUS_CODE_NO_CONTENT,
    STATUS_CODE_SUCCESS,
    ContactDescriptor,
    ErrorDescriptor,
    ErrorMatch,
    InfoDescriptor,
    LicenseDescriptor,
    OperationDescriptor,
    ParameterDescriptor,
    ResponseDescriptor,
    ServiceDescriptor,
    ServicesDescriptor,
)
from servicedocgen.introspection.docstring import DocstringInfo, DocstringParser
from servicedocgen.introspection.type_descriptor import TypeDescriptor, TypeIntrospector
from servicedocgen.projection import ExampleProjector, OperationCollector, TypeClassifier, ValueKind
from servicedocgen.rest.annotations import (
    CONSUMES_ATTRIBUTE,
    DEPRECATED_ATTRIBUTE,
    HTTP_METHOD_ATTRIBUTE,
    PATH_ATTRIBUTE,
    PRODUCES_ATTRIBUTE,
    Context,
    DefaultValue,
    ParamMarker,
    Required,
    class_metadata,
    find_annotated_function,
    find_metadata,
    markers,
)

logger = logging.getLogger(__name__)

DESCRIPTION_VOID = "No content"

OPERATION_ID_PATTERN = re.compile(r"[/{}]")


def append_path(prefix: Optional[str], path: str) -> str:
    """Join a path prefix and a path with exactly one slash"""
    if not prefix:
        return path
    if prefix.endswith("/"):
        return prefix + path.lstrip("/")
    if path.startswith("/"):
        return prefix + path
    return f"{prefix}/{path}"


def import_object(name: str) -> Any:
    """
    Import an object by its dotted path (`package.module.Name`)

    Raises:
        ImportError: If the module cannot be imported
        AttributeError: If the module has no such attribute
    """
    if "." not in name:
        return getattr(builtins, name)
    module_name, _, attribute = name.rpartition(".")
    return getattr(importlib.import_module(module_name), attribute)


class ServiceAnalyzer:
    """Analyzes service classes into a ServicesDescriptor"""

    def __init__(
        self,
        config: Optional[ServicesConfig] = None,
        introspector: Optional[TypeIntrospector] = None,
        docstring_parser: Optional[DocstringParser] = None,
    ):
        """
        Initialize ServiceAnalyzer

        Args:
            config: Global API settings (defaults to an empty ServicesConfig)
            introspector: Type introspector (accessor mode by default)
            docstring_parser: Parser for docstrings
        """
        self.config = config or ServicesConfig()
        self.introspector = introspector or TypeIntrospector()
        self.docstrings = docstring_parser or DocstringParser()
        self.classifier = TypeClassifier(self.introspector)
        self.example_projector = ExampleProjector(self.introspector, self.classifier)
        self.collector = OperationCollector(self.introspector, self.classifier)

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    def analyze(self, service_classes: Iterable[type]) -> ServicesDescriptor:
        """
        Analyze service classes

        Args:
            service_classes: Classes decorated with @path

        Returns:
            ServicesDescriptor with services, operations and component schemas
        """
        descriptor = self.create_services_descriptor()

        for service_class in service_classes:
            service = self.create_service_descriptor(service_class, descriptor)
            descriptor.services.append(service)

        json_schemas, yaml_schemas = self.collector.build_schemas(descriptor)
        descriptor.schema_definition_json = json_schemas
        descriptor.schema_definition_yaml = yaml_schemas

        logger.info(
            f"Analyzed {len(descriptor.services)} services with "
            f"{len(descriptor.operations)} operations"
        )
        return descriptor

    def create_services_descriptor(self) -> ServicesDescriptor:
        """Create the global descriptor from the configuration"""
        config = self.config
        info = InfoDescriptor(
            title=config.title,
            version=config.version,
            description=config.description,
            terms_of_service=config.terms_of_service,
            contact=ContactDescriptor(config.contact_name, config.contact_url, config.contact_email),
            license=LicenseDescriptor(config.license_name, config.license_url),
        )
        errors = [self._create_error_descriptor(error) for error in config.errors]
        if not any(error.is_catch_all for error in errors):
            # Fallback after the configured mappings so every documented error gets an example
            errors.append(ErrorDescriptor())

        return ServicesDescriptor(
            info=info,
            host=config.host,
            port=config.port,
            base_path=config.base_path,
            schemes=list(config.schemes),
            consumes=list(config.consumes),
            produces=list(config.produces),
            errors=errors,
        )

    def _create_error_descriptor(self, data: Dict[str, Any]) -> ErrorDescriptor:
        allowed = ("error_name", "match", "status_code", "comment", "json_example", "xml_example")
        error = ErrorDescriptor(**{key: value for key, value in data.items() if key in allowed})
        if error.match == ErrorMatch.ASSIGNABLE:
            try:
                error.error_class = import_object(error.error_name)
            except (ImportError, AttributeError) as e:
                logger.warning(f"Could not resolve error class {error.error_name}: {e}")
        return error

    def create_service_descriptor(
        self,
        service_class: type,
        services: Optional[ServicesDescriptor] = None,
    ) -> ServiceDescriptor:
        """
        Analyze one service class

        Args:
            service_class: Service class
            services: Global descriptor providing the error mappings

        Returns:
            ServiceDescriptor with its operations sorted by (HTTP method, path)
        """
        logger.info(f"Analyzing {service_class.__name__}")
        services = services or self.create_services_descriptor()
        doc = self.docstrings.parse_object(service_class)

        service = ServiceDescriptor(
            name=service_class.__name__,
            qualified_name=f"{service_class.__module__}.{service_class.__qualname__}",
            base_path=class_metadata(service_class, PATH_ATTRIBUTE) or "",
            description=doc.description,
            consumes=list(class_metadata(service_class, CONSUMES_ATTRIBUTE) or []),
            produces=list(class_metadata(service_class, PRODUCES_ATTRIBUTE) or []),
        )

        for name, member in inspect.getmembers(service_class, callable):
            if name.startswith("_") or inspect.isclass(member):
                continue
            logger.debug(f"Analyzing method {service_class.__name__}.{name}")
            operation = self.create_operation_descriptor(service_class, name, member, service, services)
            if operation is not None:
                logger.debug(f"Method {name} has been detected as service operation")
                service.operations.append(operation)

        service.operations.sort(key=lambda o: (o.http_method, o.path))
        return service

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create_operation_descriptor(
        self,
        service_class: type,
        name: str,
        function: Callable,
        service: ServiceDescriptor,
        services: ServicesDescriptor,
    ) -> Optional[OperationDescriptor]:
        """
        Analyze one service method

        Returns:
            OperationDescriptor, None if the method is not a REST operation
        """
        path = find_metadata(service_class, name, PATH_ATTRIBUTE)
        if path is None:
            return None

        http_method = find_metadata(service_class, name, HTTP_METHOD_ATTRIBUTE)
        if not http_method:
            logger.warning(
                f"Service method {service_class.__name__}.{name} is missing an HTTP method decorator"
            )
            return None

        # Overrides without decorators inherit the signature of the annotated method
        annotated = find_annotated_function(service_class, name) or function
        doc = self.docstrings.parse_object(function)
        full_path = append_path(service.base_path, path)

        operation = OperationDescriptor(
            name=name,
            path=path,
            full_path=full_path,
            http_method=http_method,
            id=f"{http_method}_{OPERATION_ID_PATTERN.sub('_', full_path)}",
            summary=doc.summary,
            description=doc.description,
            deprecated=bool(
                find_metadata(service_class, name, DEPRECATED_ATTRIBUTE)
                or getattr(function, "__deprecated__", None)
            ),
            consumes=list(find_metadata(service_class, name, CONSUMES_ATTRIBUTE) or service.consumes),
            produces=list(find_metadata(service_class, name, PRODUCES_ATTRIBUTE) or service.produces),
        )

        hints = self._type_hints(annotated)
        signature = inspect.signature(annotated)
        for parameter in signature.parameters.values():
            if parameter.name in ("self", "cls"):
                continue
            if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
                continue
            descriptor = self.create_parameter_descriptor(
                parameter, hints.get(parameter.name, typing.Any), doc
            )
            if descriptor is not None:
                operation.parameters.append(descriptor)

        operation.responses.append(
            self.create_success_response(hints.get("return", typing.Any), doc)
        )
        for exception_name, description in doc.raises:
            exception_class = self._resolve_exception(exception_name, annotated)
            operation.responses.append(
                self.create_error_response(exception_class, description, operation, services)
            )
        for error in services.errors:
            if error.match == ErrorMatch.ALWAYS:
                operation.responses.append(
                    self.create_error_response(BaseException, error.comment, operation, services)
                )

        return operation

    def create_parameter_descriptor(
        self,
        parameter: inspect.Parameter,
        hint: Any,
        doc: DocstringInfo,
    ) -> Optional[ParameterDescriptor]:
        """
        Describe one method parameter

        Returns:
            ParameterDescriptor, None for framework injected (Context) parameters
        """
        metadata: List[Any] = []
        if typing.get_origin(hint) is typing.Annotated:
            metadata = list(hint.__metadata__)

        if markers(metadata, Context):
            return None

        name = parameter.name
        location = LOCATION_BODY
        for marker in markers(metadata, ParamMarker):
            location = marker.location
            name = marker.name or parameter.name

        default_value = None
        for marker in markers(metadata, DefaultValue):
            default_value = marker.value
        if default_value is None and parameter.default not in (inspect.Parameter.empty, None):
            default_value = str(parameter.default)

        required = bool(markers(metadata, Required)) or location == LOCATION_PATH

        descriptor = self.introspector.describe(hint)
        kind = self.classifier.classify(descriptor, False)
        schema_type = self.collector.schema_type(descriptor)

        return ParameterDescriptor(
            name=name,
            type=descriptor,
            location=location,
            required=required,
            description=doc.params.get(parameter.name, ""),
            default_value=default_value,
            javascript_type=kind.type_name,
            format=kind.format,
            example=self.example_projector.render_example(descriptor, False),
            schema_name=schema_type.simple_name if schema_type else None,
        )

    def create_success_response(self, hint: Any, doc: DocstringInfo) -> ResponseDescriptor:
        """Describe the success response of an operation"""
        descriptor = self.introspector.describe(hint)
        kind = self.classifier.classify(descriptor, True)
        description = doc.returns

        if kind is ValueKind.VOID:
            status_code = STATUS_CODE_NO_CONTENT
            description = description or DESCRIPTION_VOID
            schema_type = None
        else:
            status_code = STATUS_CODE_SUCCESS
            schema_type = self.collector.schema_type(descriptor)

        return ResponseDescriptor(
            status_code=status_code,
            type=descriptor,
            reason=REASON_SUCCESS,
            description=description,
            javascript_type=kind.type_name,
            format=kind.format,
            example=self.example_projector.render_example(descriptor, True),
            schema_name=schema_type.simple_name if schema_type else None,
        )

    def create_error_response(
        self,
        exception_class: type,
        description: str,
        operation: OperationDescriptor,
        services: ServicesDescriptor,
    ) -> ResponseDescriptor:
        """Describe an error response, using the first matching error mapping"""
        descriptor = TypeDescriptor.of_class(exception_class)
        kind = self.classifier.classify(descriptor, True)
        status_code = STATUS_CODE_INTERNAL_SERVER_ERROR
        example = None

        for error in services.errors:
            if error.matches(exception_class):
                status_code = error.status_code
                is_xml = any("xml" in media_type for media_type in operation.produces)
                example = error.xml_example if is_xml else error.json_example
                description = description or error.comment
                break

        if example is None:
            example = self.example_projector.render_example(descriptor, True)

        return ResponseDescriptor(
            status_code=status_code,
            type=descriptor,
            reason=REASON_ERROR,
            description=description,
            javascript_type=kind.type_name,
            format=kind.format,
            example=example,
            error=True,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _type_hints(function: Callable) -> Dict[str, Any]:
        try:
            return typing.get_type_hints(function, include_extras=True)
        except Exception as e:
            logger.warning(f"Could not resolve type hints of {function.__qualname__}: {e}")
            return dict(getattr(function, "__annotations__", {}))

    @staticmethod
    def _resolve_exception(name: str, function: Callable) -> type:
        """Resolve an exception name from a docstring in the scope of the function"""
        namespace = getattr(inspect.unwrap(function), "__globals__", {})
        head, _, rest = name.partition(".")
        candidate = namespace.get(head, getattr(builtins, head, None))
        for attribute in filter(None, rest.split(".")):
            candidate = getattr(candidate, attribute, None)

        if candidate is None and "." in name:
            try:
                candidate = import_object(name)
            except (ImportError, AttributeError):
                candidate = None

        if isinstance(candidate, type) and issubclass(candidate, BaseException):
            return candidate

        logger.warning(f"Could not resolve exception {name}, documenting it as Exception")
        return Exception
