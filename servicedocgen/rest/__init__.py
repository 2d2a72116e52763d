"""
REST Metadata Module

Routing decorators and `typing.Annotated` parameter markers describing
service classes for documentation.
"""

from .annotations import (
    APPLICATION_FORM_URLENCODED,
    APPLICATION_JSON,
    APPLICATION_OCTET_STREAM,
    APPLICATION_XML,
    MULTIPART_FORM_DATA,
    TEXT_HTML,
    TEXT_PLAIN,
    Context,
    CookieParam,
    DefaultValue,
    FormParam,
    HeaderParam,
    ParamMarker,
    PathParam,
    QueryParam,
    Required,
    consumes,
    delete,
    deprecated,
    get,
    head,
    options,
    patch,
    path,
    post,
    produces,
    put,
)

__all__ = [
    "APPLICATION_FORM_URLENCODED",
    "APPLICATION_JSON",
    "APPLICATION_OCTET_STREAM",
    "APPLICATION_XML",
    "MULTIPART_FORM_DATA",
    "TEXT_HTML",
    "TEXT_PLAIN",
    "Context",
    "CookieParam",
    "DefaultValue",
    "FormParam",
    "HeaderParam",
    "ParamMarker",
    "PathParam",
    "QueryParam",
    "Required",
    "consumes",
    "delete",
    "deprecated",
    "get",
    "head",
    "options",
    "patch",
    "path",
    "post",
    "produces",
    "put",
]
