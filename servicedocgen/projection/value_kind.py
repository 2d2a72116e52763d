"""
Value kinds - the coarse JavaScript-like category of a type.

Each kind carries the OpenAPI type name and an example literal that is used
as placeholder when no detailed example is rendered.
"""

from enum import Enum
from typing import Optional


class ValueKind(Enum):
    """Category of a documented value"""
    NUMBER = ("number", "1.0")
    INTEGER = ("integer", "1")
    BOOLEAN = ("boolean", "true")
    ARRAY = ("array", "[...]")
    STRING = ("string", '"text"')
    DATE = ("string", '"2001-12-31T23:59:59.999Z"')
    TYPE_REF = ("string", '"package.Class"')
    VOID = ("void", None)
    OBJECT = ("object", "{...}")

    def __init__(self, type_name: str, example: Optional[str]):
        self.type_name = type_name
        self.example = example

    @property
    def format(self) -> Optional[str]:
        """OpenAPI format of the kind (date-time for DATE)"""
        if self is ValueKind.DATE:
            return "date-time"
        return None

    @property
    def is_void(self) -> bool:
        return self is ValueKind.VOID
