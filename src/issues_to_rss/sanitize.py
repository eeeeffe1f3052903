"""Removal of characters that are not allowed in an XML 1.0 document."""

from typing import Optional


class SanitizationError(Exception):
    """Raised when a character encodes to an unexpected number of UTF-16 code units."""


def is_xml_char(code_unit: int) -> bool:
    """Check whether a single UTF-16 code unit is a legal XML 1.0 character."""
    return (
        code_unit in (0x9, 0xA, 0xD)
        or 0x20 <= code_unit <= 0xD7FF
        or 0xE000 <= code_unit <= 0xFFFD
    )


def is_xml_surrogate_pair(high: int, low: int) -> bool:
    """Check whether two UTF-16 code units form a valid surrogate pair."""
    return 0xD800 <= high <= 0xDBFF and 0xDC00 <= low <= 0xDFFF


def _utf16_code_units(char: str) -> list:
    # surrogatepass keeps lone surrogates so they can be rejected below.
    encoded = char.encode("utf-16-le", "surrogatepass")
    return [int.from_bytes(encoded[i:i + 2], "little") for i in range(0, len(encoded), 2)]


def sanitize_string(value: Optional[str]) -> str:
    """
    Return `value` without the characters that are illegal in XML 1.0.

    Illegal characters are dropped, never replaced or escaped. `None` gives an empty string.
    """
    if value is None:
        return ""

    kept = []
    for char in value:
        code_units = _utf16_code_units(char)
        if len(code_units) == 1:
            if not is_xml_char(code_units[0]):
                continue
        elif len(code_units) == 2:
            if not is_xml_surrogate_pair(code_units[0], code_units[1]):
                continue
        else:
            raise SanitizationError(f"Unexpected UTF-16 length {len(code_units)} for {char!r}")
        kept.append(char)

    return "".join(kept)
