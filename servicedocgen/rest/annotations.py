"""
REST metadata - decorators and parameter markers for service classes.

The decorators only attach attributes, they never change behavior:

```python
@path("/demo")
@produces(APPLICATION_JSON)
class DemoRestService:

    @get
    @path("/{id}")
    def find(self, id: Annotated[int, PathParam("id")]) -> Demo:
        ...
```
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

APPLICATION_JSON = "application/json"
APPLICATION_XML = "application/xml"
TEXT_PLAIN = "text/plain"
TEXT_HTML = "text/html"
APPLICATION_FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART_FORM_DATA = "multipart/form-data"
APPLICATION_OCTET_STREAM = "application/octet-stream"

PATH_ATTRIBUTE = "__rest_path__"
HTTP_METHOD_ATTRIBUTE = "__rest_http_method__"
CONSUMES_ATTRIBUTE = "__rest_consumes__"
PRODUCES_ATTRIBUTE = "__rest_produces__"
DEPRECATED_ATTRIBUTE = "__rest_deprecated__"


def path(value: str) -> Callable:
    """Attach a URL path (template) to a service class or method"""
    def decorator(target):
        setattr(target, PATH_ATTRIBUTE, value)
        return target
    return decorator


def consumes(*media_types: str) -> Callable:
    """Attach the accepted request media types"""
    def decorator(target):
        setattr(target, CONSUMES_ATTRIBUTE, list(media_types))
        return target
    return decorator


def produces(*media_types: str) -> Callable:
    """Attach the produced response media types"""
    def decorator(target):
        setattr(target, PRODUCES_ATTRIBUTE, list(media_types))
        return target
    return decorator


def _http_method(name: str) -> Callable:
    def decorator(function):
        setattr(function, HTTP_METHOD_ATTRIBUTE, name)
        return function
    decorator.__name__ = name
    decorator.__doc__ = f"Mark a method as handling HTTP {name.upper()}"
    return decorator


get = _http_method("get")
put = _http_method("put")
post = _http_method("post")
delete = _http_method("delete")
options = _http_method("options")
head = _http_method("head")
patch = _http_method("patch")


def deprecated(target):
    """Mark a service method as deprecated"""
    setattr(target, DEPRECATED_ATTRIBUTE, True)
    return target


# ============================================================================
# Parameter markers (used with typing.Annotated)
# ============================================================================

@dataclass(frozen=True)
class ParamMarker:
    """Base class of parameter location markers"""
    name: Optional[str] = None
    location: str = ""


@dataclass(frozen=True)
class PathParam(ParamMarker):
    location: str = "path"


@dataclass(frozen=True)
class QueryParam(ParamMarker):
    location: str = "query"


@dataclass(frozen=True)
class HeaderParam(ParamMarker):
    location: str = "header"


@dataclass(frozen=True)
class FormParam(ParamMarker):
    location: str = "formData"


@dataclass(frozen=True)
class CookieParam(ParamMarker):
    location: str = "cookie"


@dataclass(frozen=True)
class DefaultValue:
    """Default value of a parameter, as documented text"""
    value: str


@dataclass(frozen=True)
class Required:
    """Marks a parameter as required"""


@dataclass(frozen=True)
class Context:
    """Parameter injected by the framework, not part of the API"""


# ============================================================================
# Metadata lookup
# ============================================================================

def find_annotated_function(owner: type, method_name: str, attribute: str = PATH_ATTRIBUTE) -> Optional[Callable]:
    """
    Find the function carrying a routing attribute, also among same-named methods of base classes

    Args:
        owner: Service class
        method_name: Name of the method
        attribute: Metadata attribute name

    Returns:
        The first function along the MRO with the attribute, or None
    """
    for klass in inspect.getmro(owner):
        member = klass.__dict__.get(method_name)
        if member is None:
            continue
        function = getattr(member, "__func__", member)
        if hasattr(function, attribute):
            return function
    return None


def find_metadata(owner: type, method_name: str, attribute: str) -> Any:
    """Routing attribute of a method (inherited from same-named base methods), None if absent"""
    function = find_annotated_function(owner, method_name, attribute)
    return getattr(function, attribute) if function is not None else None


def class_metadata(cls: type, attribute: str) -> Any:
    """Routing attribute of a class (inherited from base classes)"""
    return getattr(cls, attribute, None)


def markers(metadata: Iterable[Any], marker_type: type) -> List[Any]:
    """Markers of the given type among Annotated metadata"""
    return [m for m in metadata if isinstance(m, marker_type) or m is marker_type]
