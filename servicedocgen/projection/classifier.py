"""
Type Classifier - Maps a type descriptor to its ValueKind.

First match wins:
- numbers (decimal-valued -> NUMBER, integral -> INTEGER)
- collections (not mappings, not strings) -> ARRAY
- bool -> BOOLEAN
- NoneType -> VOID (results only)
- str/bytes -> STRING
- SimpleDatatype -> kind of the wrapped value
- Enum -> STRING
- date/time types -> DATE
- class objects -> TYPE_REF
- everything else -> OBJECT
"""

import collections.abc
import datetime
import decimal
import enum
import fractions
import logging
import numbers
from typing import Dict, Optional

from ..introspection.datatype import SimpleDatatype
from ..introspection.type_descriptor import (
    NoneType,
    TypeDescriptor,
    TypeIntrospector,
    qualified_name,
)
from .value_kind import ValueKind

logger = logging.getLogger(__name__)

# Decimal-valued flag per concrete numeric type
NUMERIC_TYPES: Dict[type, bool] = {
    int: False,
    float: True,
    complex: True,
    decimal.Decimal: True,
    fractions.Fraction: True,
}

DATE_TYPES = (datetime.date, datetime.datetime, datetime.time)

# Third-party date/time classes, matched by name so none of them is required
DATE_TYPE_NAMES = {
    "pendulum.datetime.DateTime",
    "pendulum.date.Date",
    "pendulum.time.Time",
    "arrow.arrow.Arrow",
    "pandas._libs.tslibs.timestamps.Timestamp",
    "numpy.datetime64",
}

STRING_TYPES = (str, bytes, bytearray)

MAX_DATATYPE_DEPTH = 2


class TypeClassifier:
    """Classifies types into ValueKinds"""

    def __init__(self, introspector: Optional[TypeIntrospector] = None):
        self.introspector = introspector or TypeIntrospector()

    def classify(self, descriptor: TypeDescriptor, use_retrieval_class: bool = False) -> ValueKind:
        """
        Classify a type

        Args:
            descriptor: Type to classify
            use_retrieval_class: True to inspect the retrieval class (results),
                False for the assignment class (arguments)

        Returns:
            ValueKind of the type, OBJECT if it cannot be classified
        """
        try:
            return self._classify(descriptor, use_retrieval_class, 0)
        except Exception as e:
            logger.warning(f"Could not classify {descriptor.type_name}: {e}")
            return ValueKind.OBJECT

    def _classify(self, descriptor: TypeDescriptor, use_retrieval_class: bool, depth: int) -> ValueKind:
        cls = descriptor.get_class(use_retrieval_class)

        if issubclass(cls, numbers.Number) and not issubclass(cls, bool):
            return self._classify_number(cls)

        if (
            issubclass(cls, collections.abc.Collection)
            and not issubclass(cls, collections.abc.Mapping)
            and not issubclass(cls, STRING_TYPES)
        ):
            return ValueKind.ARRAY

        if issubclass(cls, bool):
            return ValueKind.BOOLEAN

        if cls is NoneType and use_retrieval_class:
            return ValueKind.VOID

        if issubclass(cls, STRING_TYPES):
            return ValueKind.STRING

        if issubclass(cls, SimpleDatatype):
            if depth > MAX_DATATYPE_DEPTH:
                return ValueKind.OBJECT
            value_type = self.introspector.datatype_value(descriptor)
            return self._classify(value_type, False, depth + 1)

        if issubclass(cls, enum.Enum):
            return ValueKind.STRING

        if self._is_date(cls):
            return ValueKind.DATE

        if issubclass(cls, type):
            return ValueKind.TYPE_REF

        return ValueKind.OBJECT

    @staticmethod
    def _classify_number(cls: type) -> ValueKind:
        for klass in cls.__mro__:
            if klass in NUMERIC_TYPES:
                return ValueKind.NUMBER if NUMERIC_TYPES[klass] else ValueKind.INTEGER
        if issubclass(cls, numbers.Integral):
            return ValueKind.INTEGER
        return ValueKind.NUMBER

    @staticmethod
    def _is_date(cls: type) -> bool:
        if issubclass(cls, DATE_TYPES):
            return True
        return any(qualified_name(klass) in DATE_TYPE_NAMES for klass in cls.__mro__)
