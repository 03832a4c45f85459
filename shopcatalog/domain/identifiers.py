"""Identifier codec.

Converts between backend global ids (``gid://shopify/Product/42``) and the
local ids (``42``) exposed to callers.
"""

import re
from enum import Enum

from shopcatalog.domain.exceptions import InvalidIdentifierError, UnsupportedIdentifierError

GID_NAMESPACE = "gid://shopify"

_GID_PATTERN = re.compile(r"^gid://shopify/(?P<kind>[A-Za-z0-9]+)/(?P<value>[^/?]+)")


class ResourceKind(str, Enum):
    """Backend resource kinds addressed by global ids."""

    PRODUCT = "Product"
    PRODUCT_VARIANT = "ProductVariant"
    LOCATION = "Location"
    COLLECTION = "Collection"
    MEDIA_IMAGE = "MediaImage"
    VIDEO = "Video"
    EXTERNAL_VIDEO = "ExternalVideo"
    MODEL_3D = "Model3d"
    GENERIC_FILE = "GenericFile"
    PRODUCT_SET_OPERATION = "ProductSetOperation"

    @classmethod
    def for_file(cls, content_type: str) -> "ResourceKind":
        """Resource kind holding a file of the given content type."""
        return _FILE_KINDS.get(content_type, cls.GENERIC_FILE)


_FILE_KINDS: dict[str, ResourceKind] = {
    "IMAGE": ResourceKind.MEDIA_IMAGE,
    "VIDEO": ResourceKind.VIDEO,
    "EXTERNAL_VIDEO": ResourceKind.EXTERNAL_VIDEO,
    "MODEL_3D": ResourceKind.MODEL_3D,
    "FILE": ResourceKind.GENERIC_FILE,
}


def _strict_pattern(kind: ResourceKind) -> re.Pattern[str]:
    return re.compile(rf"^{re.escape(GID_NAMESPACE)}/{kind.value}/\d+$", re.ASCII)


def is_global_id(value: str, kind: ResourceKind) -> bool:
    """Check that value is a global id of kind with a numeric suffix."""
    return bool(_strict_pattern(kind).match(value))


def to_global(value: str | int, kind: ResourceKind) -> str:
    """Convert a numeric id or global id into a validated global id.

    Args:
        value: Number, numeric string, or global id.
        kind: Expected resource kind.

    Returns:
        Global id of the form ``gid://shopify/<Kind>/<digits>``.

    Raises:
        InvalidIdentifierError: If value is neither numeric nor a global
            id of the expected kind.
    """
    if isinstance(value, bool):
        raise InvalidIdentifierError(value, kind.value)
    raw = str(value).strip()
    if raw.startswith(f"{GID_NAMESPACE}/"):
        candidate = raw
    elif raw.isascii() and raw.isdigit():
        candidate = f"{GID_NAMESPACE}/{kind.value}/{raw}"
    else:
        raise InvalidIdentifierError(value, kind.value)

    if not is_global_id(candidate, kind):
        raise InvalidIdentifierError(value, kind.value)
    return candidate


def to_local(gid: str, kind: ResourceKind | None = None) -> str:
    """Strip the namespace and kind from a global id.

    Values that do not look like global ids (already-local ids) are
    returned unchanged, as are global ids of a different kind when one
    is given.
    """
    match = _GID_PATTERN.match(gid)
    if match is None:
        return gid
    if kind is not None and match.group("kind") != kind.value:
        return gid
    return match.group("value")


def ensure_resource_id(raw: str, kind: ResourceKind) -> str:
    """Accept a bare numeric id or a full global id, nothing else.

    Handles and other human-readable slugs are refused rather than
    looked up.

    Raises:
        UnsupportedIdentifierError: For any other identifier form.
    """
    value = str(raw).strip()
    if value.isascii() and value.isdigit():
        return f"{GID_NAMESPACE}/{kind.value}/{value}"
    if is_global_id(value, kind):
        return value
    raise UnsupportedIdentifierError(value, kind.value)
