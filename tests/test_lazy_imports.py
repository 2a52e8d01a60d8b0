"""Tests for sitelets.__init__ — lazy imports cover all public names."""

import pytest

import sitelets


@pytest.mark.parametrize("name", sitelets.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(sitelets, name)
    assert obj is not None, f"sitelets.{name} resolved to None"


def test_endpoint_is_the_decorator() -> None:
    from sitelets.declare import endpoint

    assert sitelets.endpoint is endpoint


def test_unknown_name_raises_attribute_error() -> None:
    """Accessing an unregistered name raises AttributeError."""
    with pytest.raises(AttributeError, match="no attribute"):
        sitelets.__getattr__("ThisDoesNotExist")
