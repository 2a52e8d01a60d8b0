"""Sitelet import resolution — ``"module:attribute"`` strings to sitelets.

Shared by ``sitelets routes`` and ``sitelets dispatch``.
"""

import importlib

from sitelets.sitelet import Sitelet, SiteletBuilder


def resolve_sitelet(import_string: str) -> Sitelet:
    """Resolve an import string to an installed ``Sitelet``.

    Accepts ``"module:attribute"`` format. When the attribute portion
    is omitted, defaults to ``"sitelet"``.

    A ``SiteletBuilder`` is installed; any other callable is treated as
    a factory and called with no arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a sitelet.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "sitelet"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if isinstance(obj, SiteletBuilder):
        obj = obj.install()
    elif callable(obj) and not isinstance(obj, Sitelet):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc
        if isinstance(obj, SiteletBuilder):
            obj = obj.install()

    if not isinstance(obj, Sitelet):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a Sitelet"
        raise TypeError(msg)

    return obj
