"""
Operation Collector - Gathers the schema types of analyzed operations.

Every parameter type and every non-void success response type contributes
its composite type (one container level unwrapped, so `List[Foo]` adds
`Foo`). The distinct types are rendered once per schema flavor.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from ..descriptor.models import OperationDescriptor, ServicesDescriptor
from ..introspection.type_descriptor import TypeDescriptor, TypeIntrospector
from .classifier import TypeClassifier
from .schema_projector import SchemaProjector
from .schema_registry import SchemaRegistry
from .schema_writer import SchemaFormat, SchemaWriter
from .value_kind import ValueKind

logger = logging.getLogger(__name__)


class OperationCollector:
    """Collects distinct composite types of operations and renders their schemas"""

    def __init__(
        self,
        introspector: Optional[TypeIntrospector] = None,
        classifier: Optional[TypeClassifier] = None,
        projector: Optional[SchemaProjector] = None,
    ):
        self.introspector = introspector or TypeIntrospector()
        self.classifier = classifier or TypeClassifier(self.introspector)
        self.projector = projector or SchemaProjector(self.introspector)

    def schema_type(self, descriptor: TypeDescriptor) -> Optional[TypeDescriptor]:
        """
        Composite type a value documents its schema with

        Args:
            descriptor: Parameter or response type

        Returns:
            The type (or its component for containers) if it is a composite,
            None for primitives, mappings and `object`
        """
        if descriptor.is_container:
            descriptor = descriptor.component_type
        if descriptor.is_mapping or descriptor.assignment_class is object:
            return None
        if self.classifier.classify(descriptor) is not ValueKind.OBJECT:
            return None
        return descriptor

    def collect(self, operations: Iterable[OperationDescriptor]) -> List[TypeDescriptor]:
        """
        Distinct schema types of the given operations, in discovery order

        Args:
            operations: Analyzed operations

        Returns:
            List of composite TypeDescriptors
        """
        collected: List[TypeDescriptor] = []
        for operation in operations:
            candidates = [p.type for p in operation.parameters]
            candidates += [
                r.type for r in operation.responses
                if not r.error and r.javascript_type != ValueKind.VOID.type_name
            ]
            for candidate in candidates:
                schema_type = self.schema_type(candidate)
                if schema_type is not None and schema_type not in collected:
                    collected.append(schema_type)
        return collected

    def render(self, types: Iterable[TypeDescriptor], schema_format: SchemaFormat) -> str:
        """Render the schemas of the given types with a fresh registry"""
        writer = SchemaWriter.create(schema_format)
        registry = SchemaRegistry()
        for descriptor in types:
            self.projector.render_schema(descriptor, writer, registry)
        logger.info(f"Rendered {writer.block_count} {schema_format.value} component schemas")
        return writer.getvalue()

    def build_schemas(self, services: ServicesDescriptor) -> Tuple[str, str]:
        """
        Build the component schema blobs of all services

        Returns:
            Tuple of (JSON blob, YAML blob)
        """
        types = self.collect(services.operations)
        return self.render(types, SchemaFormat.JSON), self.render(types, SchemaFormat.YAML)
