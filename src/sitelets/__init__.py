"""Sitelets — typed endpoint routing with link generation.

Routes are declared against structured request types. A URL that
matches is parsed into an instance of the type; an instance can be
turned back into its URL.

Basic usage::

    from dataclasses import dataclass

    from sitelets import SiteletBuilder, endpoint

    @endpoint("/person/{name}/{age}")
    @dataclass(frozen=True, slots=True)
    class Person:
        name: str
        age: int

    sitelet = (
        SiteletBuilder()
        .with_path("/hello", lambda ctx: "Hello World")
        .with_endpoint(Person, lambda ctx, p: f"{p.name} is {p.age}")
        .install()
    )

    sitelet.dispatch("GET", "/person/alice/30")   # "alice is 30"
    sitelet.build_link(Person("alice", 30))       # "/person/alice/30"

An installed ``Sitelet`` is also an ASGI application.
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "ConfigurationError",
    "Context",
    "DescribesFields",
    "FieldSchema",
    "HTTPError",
    "InvalidPatternError",
    "LinkError",
    "NoRouteMatchedError",
    "NotFound",
    "Redirect",
    "Response",
    "SchemaMismatchError",
    "Sitelet",
    "SiteletBuilder",
    "SiteletConfig",
    "SiteletError",
    "endpoint",
    "query",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import sitelets`` fast while providing a clean top-level API.
    """
    if name in ("Sitelet", "SiteletBuilder"):
        from sitelets import sitelet as _sitelet

        return getattr(_sitelet, name)

    if name == "SiteletConfig":
        from sitelets.config import SiteletConfig

        return SiteletConfig

    if name == "Context":
        from sitelets.context import Context

        return Context

    if name in ("endpoint", "query", "DescribesFields", "FieldSchema"):
        from sitelets import declare as _declare

        return getattr(_declare, name)

    if name in ("Response", "Redirect"):
        from sitelets.http import response as _resp

        return getattr(_resp, name)

    if name in (
        "SiteletError",
        "ConfigurationError",
        "InvalidPatternError",
        "SchemaMismatchError",
        "LinkError",
        "HTTPError",
        "NotFound",
        "NoRouteMatchedError",
    ):
        from sitelets import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
