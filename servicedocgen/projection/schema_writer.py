"""
Schema Writers - accumulate component schema blocks as text.

Two flavors:
- JSON: `"Name": {...}` entries joined by commas, indented by six spaces
- YAML: `Name:` block mappings indented by four spaces

Both are fragments meant to be spliced under `components.schemas` of an
OpenAPI document.
"""

import json
import textwrap
from enum import Enum
from typing import Any, Dict, List

import yaml


class SchemaFormat(str, Enum):
    """Textual flavor of rendered schemas"""
    JSON = "json"
    YAML = "yaml"


class SchemaWriter:
    """Base writer collecting rendered schema blocks"""

    schema_format: SchemaFormat
    indentation: str = ""

    def __init__(self):
        self._blocks: List[str] = []

    @staticmethod
    def create(schema_format: SchemaFormat) -> "SchemaWriter":
        """Writer for the given format"""
        if schema_format == SchemaFormat.JSON:
            return JsonSchemaWriter()
        if schema_format == SchemaFormat.YAML:
            return YamlSchemaWriter()
        raise ValueError(f"Unsupported schema format: {schema_format}")

    def write_schema(self, name: str, properties: Dict[str, Dict[str, Any]]) -> None:
        """Append the schema block of one type"""
        schema = {"type": "object", "properties": properties}
        self._blocks.append(self._format_block(name, schema))

    @property
    def block_count(self) -> int:
        return len(self._blocks)

    def getvalue(self) -> str:
        raise NotImplementedError

    def _format_block(self, name: str, schema: Dict[str, Any]) -> str:
        raise NotImplementedError


class JsonSchemaWriter(SchemaWriter):
    """JSON flavor"""

    schema_format = SchemaFormat.JSON
    indentation = " " * 6

    def _format_block(self, name: str, schema: Dict[str, Any]) -> str:
        text = f"{json.dumps(name)}: {json.dumps(schema, indent=2)}"
        return textwrap.indent(text, self.indentation)

    def getvalue(self) -> str:
        return ",\n".join(self._blocks)


class YamlSchemaWriter(SchemaWriter):
    """YAML flavor"""

    schema_format = SchemaFormat.YAML
    indentation = " " * 4

    def _format_block(self, name: str, schema: Dict[str, Any]) -> str:
        text = yaml.safe_dump({name: schema}, default_flow_style=False, sort_keys=False)
        return textwrap.indent(text, self.indentation)

    def getvalue(self) -> str:
        return "".join(self._blocks)
