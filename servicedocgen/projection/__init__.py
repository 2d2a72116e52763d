"""
Projection Module - Type to schema/example projection

Projects runtime type information onto documentation artifacts.
Supports:
- Classification of types into value kinds
- Example payloads with cycle detection
- OpenAPI component schemas (JSON and YAML) with $ref de-duplication
- Collection of the schema types of analyzed operations
"""

from .value_kind import ValueKind
from .classifier import TypeClassifier
from .example_projector import ExampleProjector
from .schema_registry import SchemaRegistry
from .schema_writer import SchemaFormat, SchemaWriter, JsonSchemaWriter, YamlSchemaWriter
from .schema_projector import SchemaProjector
from .operation_collector import OperationCollector

__all__ = [
    "ValueKind",
    "TypeClassifier",
    "ExampleProjector",
    "SchemaRegistry",
    "SchemaFormat",
    "SchemaWriter",
    "JsonSchemaWriter",
    "YamlSchemaWriter",
    "SchemaProjector",
    "OperationCollector",
]
