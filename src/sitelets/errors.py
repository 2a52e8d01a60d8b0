"""Sitelets exception hierarchy.

Shared across the pattern compiler, schema reflector, route table and
the ASGI boundary so every module raises and catches the same types.

Registration-time errors (``ConfigurationError`` and subclasses) are
fatal: a sitelet with an invalid route table must not be installed.
Request-time conversion failures never surface as exceptions; only a
total non-match raises ``NoRouteMatchedError``.
"""

from dataclasses import dataclass


class SiteletError(Exception):
    """Base for all sitelets-specific errors."""


class ConfigurationError(SiteletError):
    """Raised when route registration is invalid.

    Raised eagerly by ``SiteletBuilder.register()`` so a broken route
    table is caught at startup, never at request time.
    """


class InvalidPatternError(ConfigurationError):
    """A URL template could not be compiled.

    Malformed braces, empty segments, invalid or duplicate variable names.
    """

    def __init__(self, template: str, reason: str) -> None:
        self.template = template
        self.reason = reason
        super().__init__(f"Invalid route pattern {template!r}: {reason}")


class SchemaMismatchError(ConfigurationError):
    """A structured type and its patterns do not line up.

    Raised for unsupported field types, variables that name no field,
    path-bound fields a pattern leaves unbound, and similar mismatches.
    """


class LinkError(SiteletError):
    """A link could not be generated for an instance."""


@dataclass(frozen=True, slots=True)
class HTTPError(SiteletError):
    """An error that maps directly to an HTTP status code.

    Raised by the route table or by handlers. The ASGI boundary catches
    these and turns them into a response with the matching status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — nothing answers the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class NoRouteMatchedError(NotFound):
    """No registered route accepted the request.

    Every candidate either had a different method, a different shape,
    failed a type conversion or lacked a required query parameter.
    """

    def __init__(self, method: str, path: str) -> None:
        super().__init__(f"No route matches {method} {path!r}")
        # HTTPError is a frozen dataclass; extra attributes bypass its __setattr__
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "path", path)
