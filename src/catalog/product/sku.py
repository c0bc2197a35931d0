"""SKU generation for products and variants.

Format: ``PREFIX-ID-COLOR-SIZE``, e.g. ``HE-3F2A9C1E~0B4D~4E6A~9C1F~2D7B8E5A1C3F-BLACK-XL``.

* PREFIX: known short code for the root category name, otherwise the whole
  encoded root name; ``XX`` when the category is unknown.
* ID: the whole encoded product id.
* COLOR / SIZE: the encoded value; ``UNNAMED`` when missing.

Segments are encoded after normalization (trimmed, single-spaced, case-folded):
ASCII letters and digits are upper-cased, a space becomes ``_``, a ``-`` becomes
``~`` and every other character is percent-encoded from its UTF-8 bytes. A value
that would spell one of the reserved codes gets its first character
percent-encoded. The encoding can be decoded again, so two different inputs
never share a SKU, and ``-`` only ever separates segments.

The generator never touches the database: callers resolve the root category name
fresh on every product edit and call ``generate_sku`` again.
"""

import re
import string

UNNAMED = "UNNAMED"
UNKNOWN_CATEGORY_PREFIX = "XX"

# Keys are normalized (trimmed, case-folded, single-spaced) category names.
CATEGORY_PREFIXES = {
    "home electrics": "HE",
}

_RESERVED_PREFIXES = frozenset(CATEGORY_PREFIXES.values()) | {UNKNOWN_CATEGORY_PREFIX}
_RESERVED_ATTRIBUTES = frozenset({UNNAMED})

_LITERAL = frozenset(string.ascii_lowercase + string.digits)
_SUBSTITUTES = {" ": "_", "-": "~"}

_WHITESPACE = re.compile(r"\s+")


def _normalize(value: str | None) -> str:
    if value is None:
        return ""
    return _WHITESPACE.sub(" ", value.strip()).casefold()


def _percent(text: str) -> str:
    return "".join(f"%{byte:02X}" for byte in text.encode("utf-8"))


def _encode(value: str, reserved: frozenset = frozenset()) -> str:
    encoded = "".join(
        ch.upper() if ch in _LITERAL else _SUBSTITUTES.get(ch) or _percent(ch)
        for ch in value
    )
    if encoded in reserved:
        encoded = _percent(value[0]) + encoded[1:]
    return encoded


def category_prefix(category_name: str | None) -> str:
    name = _normalize(category_name)
    if not name:
        return UNKNOWN_CATEGORY_PREFIX
    if name in CATEGORY_PREFIXES:
        return CATEGORY_PREFIXES[name]
    return _encode(name, _RESERVED_PREFIXES)


def _attribute_part(value: str | None) -> str:
    normalized = _normalize(value)
    if not normalized:
        return UNNAMED
    return _encode(normalized, _RESERVED_ATTRIBUTES)


def generate_sku(
    category_name: str | None,
    product_id: str,
    color: str | None = None,
    size: str | None = None,
) -> str:
    """Derive the SKU for a product (or one of its variants)."""
    return "-".join(
        [
            category_prefix(category_name),
            _encode(_normalize(product_id)),
            _attribute_part(color),
            _attribute_part(size),
        ]
    )
