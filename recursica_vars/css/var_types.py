"""Classification and validation of generated CSS variable names."""

import re

from ..errors import InvalidCssVarValueError

_RAW_COLOR = re.compile(r"^#?[0-9a-f]{6}$", re.IGNORECASE)


def is_token_var(name: str) -> bool:
    return name.startswith("--recursica-tokens-") or name.startswith("--tokens-")


def is_brand_var(name: str) -> bool:
    return name.startswith("--recursica-brand-") or name.startswith("--brand-")


def is_raw_color(value: str) -> bool:
    text = value.strip()
    return bool(_RAW_COLOR.match(text)) or text.lower().startswith("rgb")


def validate_css_var_value(name: str, value: str) -> tuple[bool, str | None]:
    """Check that brand variables hold a ``var()`` reference.

    Returns:
        ``(valid, error_message)``.
    """
    if is_brand_var(name) and not str(value).strip().startswith("var("):
        return False, (
            f"Brand CSS variable {name} must use a token reference "
            f"(var(--recursica-tokens-...)), got: {value}"
        )
    return True, None


def enforce_brand_var_value(name: str, value: str) -> str:
    """Return ``value`` unchanged or raise for an illegal brand value.

    Raises:
        InvalidCssVarValueError: If a brand variable is given anything but a
            ``var()`` reference.
    """
    valid, _ = validate_css_var_value(name, value)
    if not valid:
        raise InvalidCssVarValueError(name, value)
    return value
