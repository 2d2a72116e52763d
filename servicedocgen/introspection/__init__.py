"""
Type Introspection Module

Runtime type information and documentation of service code.
Supports:
- Normalized type descriptors for typing hints (generics, Optional, Annotated)
- Property enumeration (field or accessor mode)
- Datatype markers for single value types
- Google style docstring parsing
"""

from .datatype import Datatype, SimpleDatatype
from .docstring import DocstringInfo, DocstringParser
from .type_descriptor import PropertyDescriptor, TypeDescriptor, TypeIntrospector

__all__ = [
    "Datatype",
    "SimpleDatatype",
    "DocstringInfo",
    "DocstringParser",
    "PropertyDescriptor",
    "TypeDescriptor",
    "TypeIntrospector",
]
