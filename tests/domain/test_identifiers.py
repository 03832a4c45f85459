"""Tests for the global id codec."""

import pytest

from shopcatalog.domain.exceptions import InvalidIdentifierError, UnsupportedIdentifierError
from shopcatalog.domain.identifiers import (
    ResourceKind,
    ensure_resource_id,
    is_global_id,
    to_global,
    to_local,
)


class TestToGlobal:
    """Tests for to_global."""

    def test_wraps_numeric_string(self) -> None:
        """Numeric strings are wrapped in the kind's namespace."""
        assert to_global("42", ResourceKind.PRODUCT) == "gid://shopify/Product/42"

    def test_wraps_integer(self) -> None:
        """Integers are accepted."""
        assert to_global(7, ResourceKind.LOCATION) == "gid://shopify/Location/7"

    def test_trims_whitespace(self) -> None:
        """Surrounding whitespace is ignored."""
        assert to_global("  42 ", ResourceKind.PRODUCT) == "gid://shopify/Product/42"

    def test_passes_through_global_id(self) -> None:
        """A valid global id of the same kind is returned unchanged."""
        gid = "gid://shopify/Location/99"
        assert to_global(gid, ResourceKind.LOCATION) == gid

    def test_rejects_global_id_of_other_kind(self) -> None:
        """A global id of another kind is invalid."""
        with pytest.raises(InvalidIdentifierError) as exc_info:
            to_global("gid://shopify/Product/1", ResourceKind.LOCATION)
        assert exc_info.value.details["kind"] == "Location"

    @pytest.mark.parametrize(
        "value",
        ["", "abc", "12a", "-5", "1.5", "gid://shopify/Product/abc", "gid://shopify/Product/"],
    )
    def test_rejects_malformed_values(self, value: str) -> None:
        """Non-numeric values and malformed global ids are invalid."""
        with pytest.raises(InvalidIdentifierError):
            to_global(value, ResourceKind.PRODUCT)

    def test_rejects_non_ascii_digits(self) -> None:
        """Unicode digits are not ids."""
        with pytest.raises(InvalidIdentifierError):
            to_global("٤٢", ResourceKind.PRODUCT)

    def test_rejects_bool(self) -> None:
        """Booleans are not ids even though they are ints."""
        with pytest.raises(InvalidIdentifierError):
            to_global(True, ResourceKind.PRODUCT)


class TestToLocal:
    """Tests for to_local."""

    def test_strips_prefix(self) -> None:
        """The suffix of a global id is returned."""
        assert to_local("gid://shopify/Product/42") == "42"

    def test_returns_non_global_unchanged(self) -> None:
        """Already-local ids are returned unchanged."""
        assert to_local("42") == "42"
        assert to_local("wool-socks") == "wool-socks"

    def test_kind_mismatch_returns_unchanged(self) -> None:
        """A global id of another kind is not stripped."""
        gid = "gid://shopify/Location/3"
        assert to_local(gid, ResourceKind.PRODUCT) == gid

    def test_numeric_round_trip(self) -> None:
        """Numeric ids survive to_global then to_local."""
        for value in ("1", "42", "8123456789012"):
            assert to_local(to_global(value, ResourceKind.PRODUCT)) == value

    def test_global_round_trip_yields_suffix(self) -> None:
        """A global id input maps to its numeric suffix."""
        gid = "gid://shopify/ProductVariant/55"
        assert to_local(to_global(gid, ResourceKind.PRODUCT_VARIANT)) == "55"


class TestEnsureResourceId:
    """Tests for ensure_resource_id."""

    def test_accepts_numeric(self) -> None:
        """Numeric ids are converted to global ids."""
        assert ensure_resource_id("42", ResourceKind.PRODUCT) == "gid://shopify/Product/42"

    def test_accepts_global_id(self) -> None:
        """Global ids of the right kind are accepted."""
        gid = "gid://shopify/Product/42"
        assert ensure_resource_id(gid, ResourceKind.PRODUCT) == gid

    @pytest.mark.parametrize("value", ["wool-socks", "gid://shopify/Collection/1", "42x"])
    def test_rejects_other_forms(self, value: str) -> None:
        """Handles and foreign global ids are unsupported."""
        with pytest.raises(UnsupportedIdentifierError) as exc_info:
            ensure_resource_id(value, ResourceKind.PRODUCT)
        assert exc_info.value.error_code == "UNSUPPORTED_IDENTIFIER"


class TestResourceKind:
    """Tests for ResourceKind helpers."""

    def test_is_global_id(self) -> None:
        """Only strict global ids of the kind match."""
        assert is_global_id("gid://shopify/Product/1", ResourceKind.PRODUCT)
        assert not is_global_id("gid://shopify/Product/1?x=1", ResourceKind.PRODUCT)

    def test_file_kinds(self) -> None:
        """File content types map to their resource kinds."""
        assert ResourceKind.for_file("IMAGE") is ResourceKind.MEDIA_IMAGE
        assert ResourceKind.for_file("VIDEO") is ResourceKind.VIDEO
        assert ResourceKind.for_file("UNKNOWN") is ResourceKind.GENERIC_FILE
