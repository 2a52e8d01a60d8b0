"""Sitelet configuration.

SiteletConfig is a frozen dataclass — immutable after creation, shared
read-only by every dispatch once the sitelet is installed.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SiteletConfig:
    """Sitelet configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = SiteletConfig(debug=True, case_sensitive=False)
    """

    # Error pages show exception details
    debug: bool = False

    # Matching
    case_sensitive: bool = True  # Literal segments compare exactly
    # Percent-decode path segments before matching. When off, generated
    # links (always percent-encoded) match with their escapes left in.
    decode_segments: bool = True

    # Query string
    # "?q=" yields q="" rather than dropping q. When off, a link carrying an
    # empty str query value parses back with that field at its default.
    keep_blank_query_values: bool = True

    # Default content type for ``str`` handler results at the ASGI boundary
    content_type: str = "text/html; charset=utf-8"
