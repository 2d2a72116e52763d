"""
Unit tests for the Projection Module

Tests:
- TypeClassifier: Value kinds of types
- ExampleProjector: Example payloads with cycle detection
- SchemaRegistry: Rendered/pending bookkeeping
- SchemaProjector: JSON and YAML component schemas
- OperationCollector: Schema types of analyzed operations
"""

import json
import textwrap
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, FrozenSet, List, Optional, Set, Tuple, Type

import pytest
import yaml

from servicedocgen.introspection import SimpleDatatype, TypeIntrospector
from servicedocgen.projection import (
    ExampleProjector,
    OperationCollector,
    SchemaFormat,
    SchemaProjector,
    SchemaRegistry,
    SchemaWriter,
    TypeClassifier,
    ValueKind,
)
from servicedocgen.projection.schema_projector import primitive_fragment

from example_services import Account, Color, Demo, DemoTo, Empty, Mapped, Money, Node, Order, OrderLine


class Level4(SimpleDatatype[int]):
    pass


class Level3(SimpleDatatype[Level4]):
    pass


class Level2(SimpleDatatype[Level3]):
    pass


class Level1(SimpleDatatype[Level2]):
    pass


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def introspector():
    return TypeIntrospector()


@pytest.fixture
def classifier(introspector):
    return TypeClassifier(introspector)


@pytest.fixture
def projector(introspector, classifier):
    return ExampleProjector(introspector, classifier)


@pytest.fixture
def schema_projector(introspector):
    return SchemaProjector(introspector)


@pytest.fixture
def render_schemas(introspector, schema_projector):
    """Render the schemas of some types as parsed JSON"""
    def render(*hints):
        writer = SchemaWriter.create(SchemaFormat.JSON)
        registry = SchemaRegistry()
        for hint in hints:
            schema_projector.render_schema(introspector.describe(hint), writer, registry)
        return json.loads("{" + writer.getvalue() + "}")
    return render


# ============================================================================
# TEST: TypeClassifier
# ============================================================================


class TestTypeClassifier:
    """Tests for TypeClassifier"""

    @pytest.mark.parametrize(
        "hint,expected",
        [
            (int, ValueKind.INTEGER),
            (float, ValueKind.NUMBER),
            (Decimal, ValueKind.NUMBER),
            (complex, ValueKind.NUMBER),
            (bool, ValueKind.BOOLEAN),
            (str, ValueKind.STRING),
            (bytes, ValueKind.STRING),
            (List[int], ValueKind.ARRAY),
            (Set[str], ValueKind.ARRAY),
            (FrozenSet[Demo], ValueKind.ARRAY),
            (Tuple[int, ...], ValueKind.ARRAY),
            (Dict[str, int], ValueKind.OBJECT),
            (Color, ValueKind.STRING),
            (datetime, ValueKind.DATE),
            (date, ValueKind.DATE),
            (time, ValueKind.DATE),
            (Type[Demo], ValueKind.TYPE_REF),
            (Demo, ValueKind.OBJECT),
            (Any, ValueKind.OBJECT),
        ],
    )
    def test_classify(self, introspector, classifier, hint, expected):
        """Test value kinds of common types"""
        assert classifier.classify(introspector.describe(hint)) is expected

    def test_none_is_void_only_for_results(self, introspector, classifier):
        """Test NoneType is VOID for return values"""
        descriptor = introspector.describe(None)

        assert classifier.classify(descriptor, True) is ValueKind.VOID
        assert classifier.classify(descriptor, False) is ValueKind.OBJECT

    def test_datatype_uses_value_kind(self, introspector, classifier):
        """Test SimpleDatatype classification by its wrapped value"""
        assert classifier.classify(introspector.describe(Money)) is ValueKind.NUMBER
        assert classifier.classify(introspector.describe(Level2)) is ValueKind.INTEGER

    def test_datatype_nesting_is_capped(self, introspector, classifier):
        """Test deeply nested datatypes end up as OBJECT"""
        assert classifier.classify(introspector.describe(Level1)) is ValueKind.OBJECT

    def test_kind_properties(self):
        """Test type names, formats and example literals"""
        assert ValueKind.DATE.type_name == "string"
        assert ValueKind.DATE.format == "date-time"
        assert ValueKind.INTEGER.format is None
        assert ValueKind.VOID.example is None
        assert ValueKind.VOID.is_void
        assert ValueKind.STRING.example == '"text"'


# ============================================================================
# TEST: ExampleProjector
# ============================================================================


class TestExampleProjector:
    """Tests for ExampleProjector"""

    def example(self, projector, introspector, hint, use_retrieval_class=False):
        return projector.render_example(introspector.describe(hint), use_retrieval_class)

    def test_primitives(self, projector, introspector):
        """Test example literals of primitive kinds"""
        assert self.example(projector, introspector, int) == "1"
        assert self.example(projector, introspector, str) == '"text"'
        assert self.example(projector, introspector, bool) == "true"
        assert self.example(projector, introspector, Money) == "1.0"
        assert self.example(projector, introspector, datetime) == '"2001-12-31T23:59:59.999Z"'

    def test_void_result(self, projector, introspector):
        """Test void results have no example"""
        assert self.example(projector, introspector, None, True) is None

    def test_self_reference(self, projector, introspector):
        """Test a revisited class renders as placeholder"""
        assert self.example(projector, introspector, Demo) == (
            "{\n"
            '  "id" = 1,\n'
            '  "parent" = {...},\n'
            '  "version" = 1\n'
            "}"
        )

    def test_generic_bean(self, projector, introspector):
        """Test type arguments flow into property examples"""
        assert self.example(projector, introspector, DemoTo[str]) == (
            "{\n"
            '  "id" = 1,\n'
            '  "modification_counter" = 1,\n'
            '  "parent" = {...},\n'
            '  "revision" = 1.0,\n'
            '  "type" = "text"\n'
            "}"
        )

    def test_mutual_recursion(self, projector, introspector):
        """Test nested composites are indented and expanded once"""
        assert self.example(projector, introspector, Node) == (
            "{\n"
            '  "children" = [{...}],\n'
            '  "name" = "text",\n'
            '  "owner" = {\n'
            '    "main" = {...},\n'
            '    "nodes" = [{...}]\n'
            "  }\n"
            "}"
        )

    def test_list_of_beans(self, projector, introspector):
        """Test arrays wrap the element example"""
        assert self.example(projector, introspector, List[Demo]) == (
            "[{\n"
            '  "id" = 1,\n'
            '  "parent" = {...},\n'
            '  "version" = 1\n'
            "}]"
        )

    def test_untyped_list(self, projector, introspector):
        """Test arrays without element type"""
        assert self.example(projector, introspector, list) == "[...]"

    def test_mapping(self, projector, introspector):
        """Test mapping examples"""
        assert self.example(projector, introspector, Dict[str, int]) == '{\n  "<key>" = 1\n  , ...\n}'

    def test_untyped_mapping(self, projector, introspector):
        """Test mappings without value type"""
        assert self.example(projector, introspector, dict) == '{\n  "<key>" = ...\n}'

    def test_empty_bean(self, projector, introspector):
        """Test classes without properties"""
        assert self.example(projector, introspector, Empty) == "{\n\n}"

    def test_object(self, projector, introspector):
        """Test opaque values"""
        assert self.example(projector, introspector, Any) == "{...}"

    def test_raising_descriptor(self, projector, introspector):
        """Test classes with lazy descriptors still get an example of their properties"""
        assert self.example(projector, introspector, Mapped) == (
            "{\n"
            '  "label" = "text",\n'
            '  "name" = "text"\n'
            "}"
        )

    def test_accessor_properties(self, projector, introspector):
        """Test @property getters and datatypes in examples"""
        assert self.example(projector, introspector, Account) == (
            "{\n"
            '  "balance" = 1.0,\n'
            '  "number" = "text",\n'
            '  "untyped" = {...}\n'
            "}"
        )

    def test_examples_are_independent(self, projector, introspector):
        """Test every rendering starts with a fresh visited set"""
        first = self.example(projector, introspector, Demo)
        second = self.example(projector, introspector, Demo)

        assert first == second


# ============================================================================
# TEST: SchemaRegistry
# ============================================================================


class TestSchemaRegistry:
    """Tests for SchemaRegistry"""

    def test_enqueue_once(self, introspector):
        """Test a name is queued at most once"""
        registry = SchemaRegistry()
        descriptor = introspector.describe(Demo)

        assert registry.enqueue(descriptor) is True
        assert registry.enqueue(descriptor) is False
        assert registry.pending_names() == ["Demo"]

    def test_rendered_is_never_queued(self, introspector):
        """Test rendered names are not queued again"""
        registry = SchemaRegistry()
        registry.mark_rendered("Demo")

        assert registry.enqueue(introspector.describe(Demo)) is False
        assert registry.is_rendered("Demo")
        assert not registry.is_pending("Demo")

    def test_mark_rendered_clears_pending(self, introspector):
        """Test rendering a queued type removes it from the queue"""
        registry = SchemaRegistry()
        registry.enqueue(introspector.describe(Demo))
        registry.mark_rendered("Demo")

        assert registry.pending_names() == []
        assert registry.take("Demo") is None

    def test_take(self, introspector):
        """Test taking a queued type"""
        registry = SchemaRegistry()
        descriptor = introspector.describe(Order)
        registry.enqueue(descriptor)

        assert registry.take("Order") is descriptor
        assert registry.take("Order") is None


# ============================================================================
# TEST: SchemaProjector
# ============================================================================


class TestSchemaProjector:
    """Tests for SchemaProjector"""

    def test_primitive_fragments(self, introspector):
        """Test inline fragments of primitive-like types"""
        assert primitive_fragment(introspector.describe(int)) == {"type": "integer"}
        assert primitive_fragment(introspector.describe(bool)) == {"type": "boolean"}
        assert primitive_fragment(introspector.describe(datetime)) == {"type": "string", "format": "date-time"}
        assert primitive_fragment(introspector.describe(Color)) == {"type": "string"}
        assert primitive_fragment(introspector.describe(Any)) == {"type": "object"}
        assert primitive_fragment(introspector.describe(Demo)) is None

    def test_self_reference(self, render_schemas):
        """Test a self reference becomes a $ref to the schema itself"""
        schemas = render_schemas(Demo)

        assert schemas == {
            "Demo": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "parent": {"$ref": "#/components/schemas/Demo"},
                    "version": {"type": "integer"},
                },
            }
        }

    def test_raising_descriptor(self, render_schemas):
        """Test lazy descriptors do not break schema rendering"""
        assert render_schemas(Mapped) == {
            "Mapped": {
                "type": "object",
                "properties": {
                    "label": {"type": "string"},
                    "name": {"type": "string"},
                },
            }
        }

    def test_nested_types_rendered_once(self, render_schemas):
        """Test referenced types are rendered after the referencing type"""
        schemas = render_schemas(Node)

        assert list(schemas) == ["Node", "Owner"]
        assert schemas["Node"]["properties"]["children"] == {
            "type": "array",
            "items": {"$ref": "#/components/schemas/Node"},
        }
        assert schemas["Owner"]["properties"]["main"] == {"$ref": "#/components/schemas/Node"}

    def test_containers_and_primitives(self, render_schemas):
        """Test arrays of primitives and of references"""
        schemas = render_schemas(Order)
        properties = schemas["Order"]["properties"]

        assert list(schemas) == ["Order", "OrderLine"]
        assert properties["color"] == {"type": "string"}
        assert properties["tags"] == {"type": "array", "items": {"type": "string"}}
        assert properties["lines"] == {"type": "array", "items": {"$ref": "#/components/schemas/OrderLine"}}
        assert properties["attributes"] == {"type": "array", "items": {"type": "integer"}}
        assert properties["total"] == {"type": "number"}

    def test_datatype_inlined(self, render_schemas):
        """Test datatypes are documented by their value type"""
        properties = render_schemas(Account)["Account"]["properties"]

        assert properties == {
            "balance": {"type": "number"},
            "number": {"type": "string"},
            "untyped": {"type": "object"},
        }

    def test_same_name_rendered_once(self, render_schemas):
        """Test schemas are keyed by simple name"""
        schemas = render_schemas(DemoTo[str], DemoTo[int])

        assert list(schemas) == ["DemoTo"]
        assert schemas["DemoTo"]["properties"]["type"] == {"type": "string"}

    def test_yaml_flavor(self, introspector, schema_projector):
        """Test YAML schemas parse to the same structure as JSON"""
        json_writer = SchemaWriter.create(SchemaFormat.JSON)
        yaml_writer = SchemaWriter.create(SchemaFormat.YAML)
        schema_projector.render_schema(introspector.describe(Node), json_writer, SchemaRegistry())
        schema_projector.render_schema(introspector.describe(Node), yaml_writer, SchemaRegistry())

        yaml_text = yaml_writer.getvalue()

        assert yaml_text.startswith("    Node:\n")
        assert yaml.safe_load(textwrap.dedent(yaml_text)) == json.loads("{" + json_writer.getvalue() + "}")
        assert yaml_writer.block_count == 2

    def test_json_indentation(self, introspector, schema_projector):
        """Test JSON blocks are indented for splicing into components.schemas"""
        writer = SchemaWriter.create(SchemaFormat.JSON)
        schema_projector.render_schema(introspector.describe(OrderLine), writer, SchemaRegistry())

        assert writer.getvalue().startswith('      "OrderLine": {')

    def test_unknown_format(self):
        """Test unsupported formats are rejected"""
        with pytest.raises(ValueError):
            SchemaWriter.create("xml")


# ============================================================================
# TEST: OperationCollector
# ============================================================================


class TestOperationCollector:
    """Tests for OperationCollector"""

    @pytest.fixture
    def collector(self, introspector, classifier):
        return OperationCollector(introspector, classifier)

    def test_schema_type(self, collector, introspector):
        """Test which types document their schema"""
        assert collector.schema_type(introspector.describe(Demo)).assignment_class is Demo
        assert collector.schema_type(introspector.describe(List[Demo])).assignment_class is Demo
        assert collector.schema_type(introspector.describe(Dict[str, Demo])).assignment_class is Demo
        assert collector.schema_type(introspector.describe(int)) is None
        assert collector.schema_type(introspector.describe(List[str])) is None
        assert collector.schema_type(introspector.describe(Optional[Money])) is None
        assert collector.schema_type(introspector.describe(dict)) is None
        assert collector.schema_type(introspector.describe(Any)) is None

    def test_render_empty(self, collector):
        """Test no types give an empty blob"""
        assert collector.render([], SchemaFormat.JSON) == ""
        assert collector.render([], SchemaFormat.YAML) == ""


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
