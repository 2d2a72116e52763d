"""
Type Introspection - Normalizes Python type hints into type descriptors.

Supports:
- Builtin and typing generics (List[X], list[X], Dict[K, V], Tuple[X, ...])
- Optional/Annotated/ClassVar/Final/NewType/Literal unwrapping
- User generic classes with TypeVar bindings (also through base classes)
- Property enumeration in field or accessor mode
- Graceful fallback to `object` for anything that cannot be resolved
"""

import collections.abc
import dataclasses
import enum
import inspect
import logging
import re
import types
import typing
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .datatype import V as DATATYPE_VALUE

logger = logging.getLogger(__name__)

NoneType = type(None)

UNION_TYPES = (typing.Union, types.UnionType)

UNWRAPPED_ORIGINS = (typing.Annotated, typing.ClassVar, typing.Final)

# "tests.example_services.DemoTo[str]" -> "DemoTo[str]"
MODULE_PREFIX_PATTERN = re.compile(r"\b(?:[A-Za-z_]\w*\.)+(?=[A-Za-z_]\w*)")


def qualified_name(cls: type) -> str:
    """Fully qualified class name, without the builtins module"""
    module = getattr(cls, "__module__", "builtins")
    name = getattr(cls, "__qualname__", getattr(cls, "__name__", repr(cls)))
    if module == "builtins":
        return name
    return f"{module}.{name}"


@dataclass(frozen=True)
class TypeDescriptor:
    """
    Immutable snapshot of the shape of a type hint

    A descriptor with a component type is a container (sequence, set, tuple
    or mapping - for mappings the component is the value type). Without one
    it is a leaf value or a composite.
    """
    retrieval_class: type
    assignment_class: type
    component_type: Optional["TypeDescriptor"] = None
    type_arguments: Tuple[Tuple[Any, Any], ...] = ()
    type_name: str = ""

    @property
    def is_container(self) -> bool:
        return self.component_type is not None

    @property
    def simple_name(self) -> str:
        return self.assignment_class.__name__

    @property
    def qualified_name(self) -> str:
        return qualified_name(self.assignment_class)

    @property
    def bindings(self) -> Dict[Any, Any]:
        return dict(self.type_arguments)

    @property
    def is_enum(self) -> bool:
        return issubclass(self.assignment_class, enum.Enum)

    @property
    def is_mapping(self) -> bool:
        return issubclass(self.assignment_class, collections.abc.Mapping)

    def get_class(self, use_retrieval_class: bool = False) -> type:
        """Class to inspect: retrieval class for results, assignment class for arguments"""
        if use_retrieval_class:
            return self.retrieval_class
        return self.assignment_class

    @classmethod
    def of_class(cls, clazz: type) -> "TypeDescriptor":
        """Descriptor of a plain, non-generic class"""
        return cls(clazz, clazz, type_name=clazz.__name__)


@dataclass(frozen=True)
class PropertyDescriptor:
    """A readable property of a composite type"""
    name: str
    type: TypeDescriptor


class TypeIntrospector:
    """
    Reflective type/member provider

    Never raises for a type it is given: anything that cannot be resolved
    is logged and described as `object`.
    """

    STRING_TYPES = (str, bytes, bytearray)

    def __init__(self, introspect_fields: bool = False):
        """
        Initialize TypeIntrospector

        Args:
            introspect_fields: True to enumerate all annotated attributes
                (private ones included), False for public attributes and
                properties only
        """
        self.introspect_fields = introspect_fields
        self._hints_cache: Dict[type, Dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # Type descriptors
    # ------------------------------------------------------------------

    def describe(self, hint: Any, bindings: Optional[Dict[Any, Any]] = None) -> TypeDescriptor:
        """
        Describe a type hint

        Args:
            hint: Type hint (class, typing construct, TypeVar, ...)
            bindings: TypeVar bindings of the enclosing generic type

        Returns:
            TypeDescriptor for the hint
        """
        try:
            return self._describe(hint, bindings or {})
        except Exception as e:
            logger.warning(f"Could not introspect type {hint!r}: {e}")
            return self._unknown(hint)

    def _describe(self, hint: Any, bindings: Dict[Any, Any]) -> TypeDescriptor:
        if hint is None or hint is NoneType:
            return TypeDescriptor(NoneType, NoneType, type_name="None")

        if hint is Any or hint is object:
            return TypeDescriptor(object, object, type_name="object")

        if isinstance(hint, typing.TypeVar):
            if hint in bindings:
                return self._describe(bindings[hint], {})
            if hint.__bound__ is not None:
                return self._describe(hint.__bound__, {})
            return self._unknown(hint)

        if isinstance(hint, (str, typing.ForwardRef)):
            logger.warning(f"Unresolved forward reference: {hint!r}")
            return self._unknown(hint)

        # typing.NewType
        supertype = getattr(hint, "__supertype__", None)
        if supertype is not None:
            return self._describe(supertype, bindings)

        origin = typing.get_origin(hint)
        args = typing.get_args(hint)

        if origin in UNWRAPPED_ORIGINS:
            return self._describe(args[0], bindings) if args else self._unknown(hint)

        if origin in UNION_TYPES:
            members = [arg for arg in args if arg is not NoneType]
            if len(members) == 1:
                return self._describe(members[0], bindings)
            return self._unknown(hint)

        if origin is typing.Literal:
            return self._describe(type(args[0]), {}) if args else self._unknown(hint)

        if origin is type:
            return TypeDescriptor(type, type, type_name=self._format(hint))

        if isinstance(origin, type):
            return self._describe_class(origin, args, bindings, hint)

        if isinstance(hint, type):
            return self._describe_class(hint, (), bindings, hint)

        return self._unknown(hint)

    def _describe_class(
        self,
        cls: type,
        args: Tuple[Any, ...],
        bindings: Dict[Any, Any],
        hint: Any,
    ) -> TypeDescriptor:
        """Describe a class with optional generic arguments"""
        args = tuple(self._substitute(arg, bindings) for arg in args)
        type_name = self._format(self._substitute(hint, bindings))

        component_type = None
        type_arguments: Tuple[Tuple[Any, Any], ...] = ()

        if issubclass(cls, collections.abc.Mapping):
            container_args = self._container_arguments(cls, args)
            if len(container_args) == 2:
                component_type = self._describe(container_args[1], {})

        elif self._is_collection(cls):
            item = self._item_hint(cls, self._container_arguments(cls, args))
            if item is not None:
                component_type = self._describe(item, {})

        else:
            parameters = getattr(cls, "__parameters__", ())
            if parameters and args:
                type_arguments = tuple(zip(parameters, args))

        return TypeDescriptor(
            retrieval_class=cls,
            assignment_class=cls,
            component_type=component_type,
            type_arguments=type_arguments,
            type_name=type_name,
        )

    def _is_collection(self, cls: type) -> bool:
        return (
            issubclass(cls, collections.abc.Collection)
            and not issubclass(cls, self.STRING_TYPES)
            and not issubclass(cls, collections.abc.Mapping)
        )

    @staticmethod
    def _container_arguments(cls: type, args: Tuple[Any, ...]) -> Tuple[Any, ...]:
        """Generic arguments of a container, also inherited ones (class Ids(List[int]))"""
        if args:
            return args
        for base in getattr(cls, "__orig_bases__", ()):
            base_origin = typing.get_origin(base)
            if isinstance(base_origin, type) and issubclass(base_origin, collections.abc.Iterable):
                return typing.get_args(base)
        return ()

    @staticmethod
    def _item_hint(cls: type, args: Tuple[Any, ...]) -> Any:
        """Element type hint of a collection, None if not homogeneous or unknown"""
        if not args:
            return None
        if issubclass(cls, tuple):
            if len(args) == 2 and args[1] is Ellipsis:
                return args[0]
            if all(arg == args[0] for arg in args):
                return args[0]
            return None
        return args[0]

    def _substitute(self, hint: Any, bindings: Dict[Any, Any]) -> Any:
        """Replace TypeVars bound in the enclosing context"""
        if not bindings:
            return hint
        if isinstance(hint, typing.TypeVar):
            return bindings.get(hint, hint)
        parameters = getattr(hint, "__parameters__", None)
        if parameters and not isinstance(hint, type):
            try:
                return hint[tuple(bindings.get(p, p) for p in parameters)]
            except TypeError as e:
                logger.debug(f"Could not substitute type arguments of {hint!r}: {e}")
        return hint

    def _unknown(self, hint: Any) -> TypeDescriptor:
        try:
            type_name = self._format(hint)
        except Exception:
            type_name = "object"
        return TypeDescriptor(object, object, type_name=type_name)

    @staticmethod
    def _format(hint: Any) -> str:
        if hint is None or hint is NoneType:
            return "None"
        if isinstance(hint, type):
            return hint.__name__
        if isinstance(hint, typing.TypeVar):
            return hint.__name__
        return MODULE_PREFIX_PATTERN.sub("", repr(hint))

    # ------------------------------------------------------------------
    # Generic bindings
    # ------------------------------------------------------------------

    def generic_bindings(self, descriptor: TypeDescriptor) -> Dict[Any, Any]:
        """TypeVar bindings of a descriptor, including those fixed by base classes"""
        return self._resolve_bindings(descriptor.assignment_class, descriptor.bindings)

    def _resolve_bindings(self, cls: type, bindings: Dict[Any, Any]) -> Dict[Any, Any]:
        resolved = dict(bindings)
        for base in getattr(cls, "__orig_bases__", ()):
            base_origin = typing.get_origin(base)
            if not isinstance(base_origin, type) or base_origin in (typing.Generic, typing.Protocol):
                continue
            parameters = getattr(base_origin, "__parameters__", ())
            if not parameters:
                continue
            base_args = [self._substitute(arg, resolved) for arg in typing.get_args(base)]
            inherited = self._resolve_bindings(base_origin, dict(zip(parameters, base_args)))
            for type_var, value in inherited.items():
                resolved.setdefault(type_var, value)
        return resolved

    def datatype_value(self, descriptor: TypeDescriptor) -> TypeDescriptor:
        """Descriptor of the value wrapped by a SimpleDatatype"""
        bindings = self.generic_bindings(descriptor)
        return self.describe(bindings.get(DATATYPE_VALUE, Any))

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def properties(self, descriptor: TypeDescriptor) -> List[PropertyDescriptor]:
        """
        Enumerate the properties of a composite type

        Args:
            descriptor: Descriptor of the composite type

        Returns:
            PropertyDescriptors sorted by name (empty if nothing can be introspected)
        """
        cls = descriptor.assignment_class
        if cls is object:
            return []

        bindings = self.generic_bindings(descriptor)
        members: Dict[str, Any] = {}

        for name, hint in self._type_hints(cls).items():
            if hint is typing.ClassVar or typing.get_origin(hint) is typing.ClassVar:
                continue
            if isinstance(hint, dataclasses.InitVar):
                continue
            if not self.introspect_fields and name.startswith("_"):
                continue
            members[name] = hint

        if self.introspect_fields:
            if dataclasses.is_dataclass(cls):
                field_names = {f.name for f in dataclasses.fields(cls)}
                members = {name: hint for name, hint in members.items() if name in field_names}
        else:
            try:
                self._collect_getters(cls, members)
            except Exception as e:
                logger.warning(f"Could not enumerate getters of {cls.__qualname__}: {e}")

        properties = [
            PropertyDescriptor(name, self.describe(hint, bindings))
            for name, hint in members.items()
        ]
        return sorted(properties, key=lambda p: p.name)

    def _type_hints(self, cls: type) -> Dict[str, Any]:
        """Resolved type hints of a class (cached), raw annotations as fallback"""
        if cls in self._hints_cache:
            return self._hints_cache[cls]

        try:
            hints = typing.get_type_hints(cls)
        except Exception as e:
            logger.warning(f"Could not resolve type hints of {cls.__name__}: {e}")
            hints = {}
            for klass in reversed(cls.__mro__):
                try:
                    hints.update(inspect.get_annotations(klass))
                except Exception as nested:
                    logger.debug(f"No annotations for {klass.__name__}: {nested}")

        self._hints_cache[cls] = hints
        return hints

    def _collect_getters(self, cls: type, members: Dict[str, Any]) -> None:
        """Add the public @property getters of cls, read statically from the class dictionaries"""
        seen = set()
        for klass in inspect.getmro(cls):
            for name, member in vars(klass).items():
                # The most derived definition shadows the bases
                if name in seen:
                    continue
                seen.add(name)
                if not isinstance(member, property):
                    continue
                if name.startswith("_") or name in members:
                    continue
                members[name] = self._return_hint(member.fget)

    @staticmethod
    def _return_hint(function: Any) -> Any:
        if function is None:
            return Any
        try:
            return typing.get_type_hints(function).get("return", Any)
        except Exception as e:
            logger.warning(f"Could not resolve return type of {function!r}: {e}")
            return Any
