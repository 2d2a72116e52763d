"""
Example Projector - Renders pseudo-JSON example payloads for types.

Example for a self-referencing bean:

    {
      "id" = 1,
      "parent" = {...},
      "version" = 1
    }

Every composite class is expanded at most once per rendered example; a
revisited class (or `object`) is rendered as the `{...}` placeholder.
"""

import logging
from typing import List, Optional, Set

from ..introspection.type_descriptor import TypeDescriptor, TypeIntrospector
from .classifier import TypeClassifier
from .value_kind import ValueKind

logger = logging.getLogger(__name__)

INDENT = "  "
MAP_KEY = '"<key>" = '


class ExampleProjector:
    """Builds example payloads from type descriptors"""

    def __init__(
        self,
        introspector: Optional[TypeIntrospector] = None,
        classifier: Optional[TypeClassifier] = None,
    ):
        self.introspector = introspector or TypeIntrospector()
        self.classifier = classifier or TypeClassifier(self.introspector)

    def render_example(self, descriptor: TypeDescriptor, use_retrieval_class: bool = False) -> Optional[str]:
        """
        Render an example value for a type

        Args:
            descriptor: Type of the value
            use_retrieval_class: True for results (return values), False for arguments

        Returns:
            Example string, or None for void results
        """
        kind = self.classifier.classify(descriptor, use_retrieval_class)
        if kind is ValueKind.VOID:
            return None

        buffer: List[str] = []
        self._render(descriptor, kind, "", buffer, set(), use_retrieval_class)
        return "".join(buffer)

    def _render_type(
        self,
        descriptor: TypeDescriptor,
        indent: str,
        buffer: List[str],
        visited: Set[type],
        use_retrieval_class: bool,
    ) -> None:
        kind = self.classifier.classify(descriptor, use_retrieval_class)
        self._render(descriptor, kind, indent, buffer, visited, use_retrieval_class)

    def _render(
        self,
        descriptor: TypeDescriptor,
        kind: ValueKind,
        indent: str,
        buffer: List[str],
        visited: Set[type],
        use_retrieval_class: bool,
    ) -> None:
        if kind is ValueKind.ARRAY and descriptor.component_type is not None:
            buffer.append("[")
            self._render_type(descriptor.component_type, indent, buffer, visited, use_retrieval_class)
            buffer.append("]")
            return

        if kind is ValueKind.OBJECT:
            cls = descriptor.get_class(use_retrieval_class)
            if cls is not object and cls not in visited:
                visited.add(cls)
                child_indent = indent + INDENT
                body: List[str] = []
                if descriptor.is_mapping:
                    self._render_mapping(descriptor, child_indent, body, visited, use_retrieval_class)
                else:
                    self._render_properties(descriptor, child_indent, body, visited, use_retrieval_class)
                buffer.append("{\n")
                if body:
                    buffer.append(child_indent)
                    buffer.extend(body)
                buffer.append("\n")
                buffer.append(indent)
                buffer.append("}")
                return

        if kind.example is not None:
            buffer.append(kind.example)

    def _render_properties(
        self,
        descriptor: TypeDescriptor,
        child_indent: str,
        buffer: List[str],
        visited: Set[type],
        use_retrieval_class: bool,
    ) -> None:
        repeating = False
        for prop in self.introspector.properties(descriptor):
            if prop.name == "class":
                continue
            if repeating:
                buffer.append(",\n")
                buffer.append(child_indent)
            repeating = True
            buffer.append(f'"{prop.name}" = ')
            self._render_type(prop.type, child_indent, buffer, visited, use_retrieval_class)

    def _render_mapping(
        self,
        descriptor: TypeDescriptor,
        child_indent: str,
        buffer: List[str],
        visited: Set[type],
        use_retrieval_class: bool,
    ) -> None:
        buffer.append(MAP_KEY)
        if descriptor.component_type is None:
            buffer.append("...")
            return
        self._render_type(descriptor.component_type, child_indent, buffer, visited, use_retrieval_class)
        buffer.append("\n")
        buffer.append(child_indent)
        buffer.append(", ...")
