"""
Datatype markers - value objects that serialize as a single value

A Datatype is documented like a plain value, not like a bean. A
SimpleDatatype wraps exactly one value of type V, e.g.:

```python
class Money(SimpleDatatype[Decimal]):
    ...
```

is documented as a number.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

V = TypeVar("V")


class Datatype:
    """Marker base class for value types"""


@dataclass(frozen=True)
class SimpleDatatype(Datatype, Generic[V]):
    """Datatype holding a single value of type V"""
    value: V

    def __str__(self) -> str:
        return str(self.value)
