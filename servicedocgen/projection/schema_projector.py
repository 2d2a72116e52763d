"""
Schema Projector - Renders OpenAPI component schemas for composite types.

Supports:
- Inline fragments for primitive-like properties
- Arrays of primitives or of `$ref`s for container properties
- `$ref` indirection for nested composites
- De-duplication by simple class name (cycle safe)
- JSON and YAML flavors sharing one traversal
"""

import collections.abc
import datetime
import decimal
import logging
import uuid
from typing import Any, Dict, List, Optional

from ..introspection.datatype import SimpleDatatype
from ..introspection.type_descriptor import TypeDescriptor, TypeIntrospector
from .schema_registry import SchemaRegistry
from .schema_writer import SchemaWriter

logger = logging.getLogger(__name__)

REF_PREFIX = "#/components/schemas/"

# Canonical class -> (OpenAPI type, format)
PRIMITIVE_TYPES: Dict[type, tuple] = {
    bool: ("boolean", None),
    int: ("integer", None),
    float: ("number", None),
    decimal.Decimal: ("number", None),
    str: ("string", None),
    bytes: ("string", "byte"),
    datetime.datetime: ("string", "date-time"),
    datetime.date: ("string", "date"),
    datetime.time: ("string", None),
    uuid.UUID: ("string", "uuid"),
    type: ("string", None),
    object: ("object", None),
}


def primitive_fragment(descriptor: TypeDescriptor) -> Optional[Dict[str, Any]]:
    """
    Inline schema fragment of a primitive-like type

    Returns:
        Fragment such as {"type": "integer"}, None if the type is not primitive-like
    """
    if descriptor.is_enum:
        return {"type": "string"}
    cls = descriptor.assignment_class
    for klass in cls.__mro__:
        if klass is object and cls is not object:
            break
        if klass in PRIMITIVE_TYPES:
            type_name, type_format = PRIMITIVE_TYPES[klass]
            fragment = {"type": type_name}
            if type_format:
                fragment["format"] = type_format
            return fragment
    return None


def schema_ref(name: str) -> Dict[str, Any]:
    return {"$ref": REF_PREFIX + name}


class SchemaProjector:
    """Renders component schemas into a SchemaWriter"""

    def __init__(self, introspector: Optional[TypeIntrospector] = None):
        self.introspector = introspector or TypeIntrospector()

    def render_schema(self, descriptor: TypeDescriptor, writer: SchemaWriter, registry: SchemaRegistry) -> None:
        """
        Render the schema of a type and of every type it references

        Args:
            descriptor: Composite type to render
            writer: Writer accumulating the schema text
            registry: Run-scoped registry (one per writer)
        """
        name = descriptor.simple_name
        if registry.is_rendered(name):
            return

        # Mark first so self references resolve to a $ref instead of recursing
        registry.mark_rendered(name)

        queued: List[TypeDescriptor] = []
        properties: Dict[str, Dict[str, Any]] = {}
        for prop in self.introspector.properties(descriptor):
            properties[prop.name] = self._property_schema(prop.type, registry, queued)

        writer.write_schema(name, properties)
        logger.debug(f"Rendered {writer.schema_format.value} schema {name} ({len(properties)} properties)")

        for queued_type in queued:
            if registry.take(queued_type.simple_name) is not None:
                self.render_schema(queued_type, writer, registry)

    def _property_schema(
        self,
        descriptor: TypeDescriptor,
        registry: SchemaRegistry,
        queued: List[TypeDescriptor],
    ) -> Dict[str, Any]:
        fragment = primitive_fragment(descriptor)
        if fragment is not None:
            return fragment

        if descriptor.is_container:
            items = self._property_schema(descriptor.component_type, registry, queued)
            return {"type": "array", "items": items}

        cls = descriptor.assignment_class
        if issubclass(cls, SimpleDatatype):
            return self._property_schema(self.introspector.datatype_value(descriptor), registry, queued)
        if descriptor.is_mapping:
            return {"type": "object"}
        if issubclass(cls, collections.abc.Collection):
            return {"type": "array", "items": {}}

        return self._reference(descriptor, registry, queued)

    @staticmethod
    def _reference(
        descriptor: TypeDescriptor,
        registry: SchemaRegistry,
        queued: List[TypeDescriptor],
    ) -> Dict[str, Any]:
        if registry.enqueue(descriptor):
            queued.append(descriptor)
        return schema_ref(descriptor.simple_name)
