"""Parsing of brace references and their CSS variable names.

A brace reference is a string such as ``{tokens.color.gray.500}`` or
``{brand.themes.light.palettes.neutral.500.color.tone}``. Older themes also
carry ``var(--...)`` strings pointing at generated variables; those are
mapped back to the same descriptors so builders treat both alike.
"""

import re
from collections.abc import Sequence
from typing import Any

from .models import MODES, ReferenceDescriptor, ReferenceKind

TOKEN_PREFIXES = ("tokens", "token")
BRAND_PREFIXES = ("brand", "theme")

_LEGACY_PALETTE_VAR = re.compile(
    r"^var\(\s*--(?:recursica-)?brand-(?:themes-)?(light|dark)-palettes?-(?!core-)"
    r"([a-z0-9-]+?)-(\d{3,4}|default|primary)-(tone|on-tone)\s*(?:,[^)]*)?\)$",
    re.IGNORECASE,
)
_SHORT_PALETTE_VAR = re.compile(
    r"^var\(\s*--palette-([a-z0-9-]+?)-(\d{3,4}|default|primary)-(tone|on-tone)\s*(?:,[^)]*)?\)$",
    re.IGNORECASE,
)
_CORE_VAR = re.compile(
    r"^var\(\s*--(?:recursica-)?brand-(?:themes-)?(light|dark)-palettes?-core-"
    r"(black|white|alert|warning|success|interactive)"
    r"(?:-(?:(default|hover)-)?(tone|on-tone))?\s*(?:,[^)]*)?\)$",
    re.IGNORECASE,
)
_TOKEN_COLOR_VAR = re.compile(
    r"^var\(\s*--(?:recursica-)?tokens-(colors?)-([a-z0-9-]+)-(\d{3,4})\s*(?:,[^)]*)?\)$",
    re.IGNORECASE,
)
_TOKEN_SCALAR_VAR = re.compile(
    r"^var\(\s*--(?:recursica-)?tokens-(sizes?|opacity|opacities)-([a-z0-9-]+)\s*(?:,[^)]*)?\)$",
    re.IGNORECASE,
)

_LAYER_PROPERTY = re.compile(r"^layers?\.(?:layer-)?(\d+)\.property\.(.+)$", re.IGNORECASE)
_LAYER_ELEMENT = re.compile(r"^layers?\.(?:layer-)?(\d+)\.elements?\.(.+)$", re.IGNORECASE)
_CORE_STATE = re.compile(
    r"^palettes?\.core(?:-colors?)?\.([a-z0-9-]+)\.([a-z0-9-]+)\.(tone|on-tone)$",
    re.IGNORECASE,
)
_CORE_TONE = re.compile(
    r"^palettes?\.core(?:-colors?)?\.([a-z0-9-]+)\.(tone|on-tone)$", re.IGNORECASE
)
_CORE = re.compile(
    r"^palettes?\.core(?:-colors?)?\.(alert|warning|success|interactive|black|white)$",
    re.IGNORECASE,
)
_PALETTE_COLOR = re.compile(
    r"^palettes?\.([a-z0-9-]+)\.([a-z0-9-]+)\.color\.(tone|on-tone)$", re.IGNORECASE
)
_PALETTE_LEVEL = re.compile(
    r"^palettes?\.([a-z0-9-]+)\.(\d+|default|primary)\.(tone|on-tone)$", re.IGNORECASE
)
_PALETTE_BARE_LEVEL = re.compile(r"^palettes?\.([a-z0-9-]+)\.(\d{3,4})$", re.IGNORECASE)
_PALETTE_DEFAULT = re.compile(r"^palettes?\.([a-z0-9-]+)\.(default|primary)$", re.IGNORECASE)
_PALETTE_SHORT_CORE = re.compile(
    r"^palettes?\.(alert|warning|success|black|white)$", re.IGNORECASE
)
_ELEVATION_KEY = re.compile(r"^elevations?\.(elevation-\d+)$", re.IGNORECASE)
_ELEVATION_PROP = re.compile(r"^elevations?\.elevation-(\d+)\.(.+)$", re.IGNORECASE)
_STATE = re.compile(r"^states?\.(.+)$", re.IGNORECASE)
_TEXT_EMPHASIS = re.compile(r"^text-emphasis\.(low|high)$", re.IGNORECASE)


def unwrap_value(value: Any) -> Any:
    """Unwrap ``$value`` then ``value`` wrappers from a token-style node."""
    if isinstance(value, dict):
        if "$value" in value:
            return value["$value"]
        if "value" in value:
            return value["value"]
    return value


def extract_brace_content(value: Any) -> str | None:
    """Return the normalized inner text of a ``{...}`` reference, or None.

    Whitespace around dots is removed, remaining runs of whitespace become
    dots, and repeated dots collapse, so ``{ tokens . color  gray.500 }``
    reads as ``tokens.color.gray.500``.
    """
    value = unwrap_value(value)
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not (trimmed.startswith("{") and trimmed.endswith("}")):
        return None
    return _normalize_dotted(trimmed[1:-1]) or None


def _normalize_dotted(inner: str) -> str:
    inner = re.sub(r"\s*\.\s*", ".", inner.strip())
    inner = re.sub(r"\s+", ".", inner)
    inner = re.sub(r"\.+", ".", inner)
    return inner.strip(".")


def is_brace_reference(value: Any) -> bool:
    return extract_brace_content(value) is not None


def parse_reference(value: Any) -> ReferenceDescriptor | None:
    """Parse a reference string into a descriptor.

    Accepts brace references, unbraced dotted references and the legacy
    ``var(--...)`` palette, core and token forms. Returns None for anything
    that is not a reference; callers treat that as "use verbatim".
    """
    value = unwrap_value(value)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    if text.lower().startswith("var("):
        return _parse_legacy_var(text)

    if text.startswith("{") and text.endswith("}"):
        inner = _normalize_dotted(text[1:-1])
    else:
        if any(ch.isspace() for ch in text):
            return None
        inner = _normalize_dotted(text)
    if not inner:
        return None

    parts = [p for p in inner.split(".") if p]
    head = parts[0].lower()

    if head in TOKEN_PREFIXES:
        if len(parts) < 2:
            return None
        return ReferenceDescriptor(kind=ReferenceKind.TOKEN, path=tuple(parts[1:]))

    if head in BRAND_PREFIXES:
        rest = parts[1:]
        mode = None
        if len(rest) >= 2 and rest[0].lower() == "themes" and rest[1].lower() in MODES:
            mode = rest[1].lower()
            rest = rest[2:]
        elif rest and rest[0].lower() in MODES:
            mode = rest[0].lower()
            rest = rest[1:]
        if not rest:
            return None
        return ReferenceDescriptor(kind=ReferenceKind.BRAND, path=tuple(rest), mode=mode)

    return None


def _parse_legacy_var(text: str) -> ReferenceDescriptor | None:
    match = _LEGACY_PALETTE_VAR.match(text)
    if match:
        mode, key, level, kind = match.groups()
        return _palette_descriptor(key, level, kind, mode.lower())

    match = _SHORT_PALETTE_VAR.match(text)
    if match:
        key, level, kind = match.groups()
        return _palette_descriptor(key, level, kind, None)

    match = _CORE_VAR.match(text)
    if match:
        mode, color, state, kind = match.groups()
        path = ["palettes", "core-colors", color.lower()]
        if state:
            path.append(state.lower())
        if kind:
            path.append(kind.lower())
        return ReferenceDescriptor(kind=ReferenceKind.BRAND, path=tuple(path), mode=mode.lower())

    match = _TOKEN_COLOR_VAR.match(text)
    if match:
        category, family, level = match.groups()
        return ReferenceDescriptor(
            kind=ReferenceKind.TOKEN, path=(category.lower(), family, level)
        )

    match = _TOKEN_SCALAR_VAR.match(text)
    if match:
        category, name = match.groups()
        return ReferenceDescriptor(kind=ReferenceKind.TOKEN, path=(category.lower(), name))

    return None


def _palette_descriptor(
    key: str, level: str, kind: str, mode: str | None
) -> ReferenceDescriptor:
    if level.lower() == "primary":
        level = "default"
    return ReferenceDescriptor(
        kind=ReferenceKind.BRAND,
        path=("palettes", key, level, "color", kind.lower()),
        mode=mode,
    )


def token_css_var_name(path: Sequence[str] | str) -> str:
    """``color/gray/500`` or ``['color', 'gray', '500']`` to its variable name."""
    if isinstance(path, str):
        path = [p for p in re.split(r"[/.]", path) if p]
    return "--recursica-tokens-" + "-".join(path)


def palette_var_name(mode: str, palette: str, level: str, kind: str = "tone") -> str:
    if level == "default":
        level = "primary"
    return f"--recursica-brand-themes-{mode}-palettes-{palette}-{level}-{kind}"


def core_var_name(mode: str, color: str, suffix: str | None = None) -> str:
    name = f"--recursica-brand-themes-{mode}-palettes-core-{color}"
    return f"{name}-{suffix}" if suffix else name


def reference_to_css_var(value: Any, mode: str = "light") -> str | None:
    """Map a reference to the ``var()`` of the variable it is emitted as.

    Args:
        value: A reference string or an already parsed descriptor.
        mode: Mode used when a brand reference carries none.

    Returns:
        A ``var(--recursica-...)`` string, or None when the reference has no
        generated variable.
    """
    descriptor = value if isinstance(value, ReferenceDescriptor) else parse_reference(value)
    if descriptor is None:
        return None

    if descriptor.kind == ReferenceKind.TOKEN:
        return f"var({token_css_var_name(descriptor.path)})"

    mode = descriptor.mode or mode
    parts = list(descriptor.path)
    first = parts[0].lower()

    if first in ("dimensions", "dimension"):
        return f"var(--recursica-brand-dimensions-{'-'.join(parts[1:])})"
    if first == "typography":
        return f"var(--recursica-brand-typography-{'-'.join(parts[1:])})"

    joined = ".".join(parts)

    match = _LAYER_PROPERTY.match(joined)
    if match:
        number, prop = match.groups()
        prop = prop.replace(".", "-")
        return f"var(--recursica-brand-themes-{mode}-layer-layer-{number}-property-{prop})"

    match = _LAYER_ELEMENT.match(joined)
    if match:
        number, element = match.groups()
        element = element.replace(".", "-")
        if element == "interactive":
            element = "interactive-color"
        return (
            f"var(--recursica-brand-themes-{mode}-layer-layer-{number}"
            f"-property-element-{element})"
        )

    match = _CORE_STATE.match(joined)
    if match:
        color, state, kind = match.groups()
        return f"var({core_var_name(mode, color, f'{state}-{kind}')})"

    match = _CORE_TONE.match(joined)
    if match:
        color, kind = match.groups()
        return f"var({core_var_name(mode, color, kind)})"

    match = _CORE.match(joined)
    if match:
        return f"var({core_var_name(mode, match.group(1).lower())})"

    for pattern in (_PALETTE_COLOR, _PALETTE_LEVEL):
        match = pattern.match(joined)
        if match:
            key, level, kind = match.groups()
            return f"var({palette_var_name(mode, key, level, kind.lower())})"

    match = _PALETTE_BARE_LEVEL.match(joined)
    if match:
        key, level = match.groups()
        return f"var({palette_var_name(mode, key, level)})"

    match = _PALETTE_DEFAULT.match(joined)
    if match:
        return f"var({palette_var_name(mode, match.group(1), 'primary')})"

    match = _PALETTE_SHORT_CORE.match(joined)
    if match:
        return f"var({core_var_name(mode, match.group(1).lower())})"

    match = _ELEVATION_KEY.match(joined)
    if match:
        return f"var(--recursica-brand-themes-{mode}-elevations-{match.group(1)})"

    match = _ELEVATION_PROP.match(joined)
    if match:
        number, prop = match.groups()
        prop = prop.replace(".", "-")
        return f"var(--recursica-brand-themes-{mode}-elevations-elevation-{number}-{prop})"

    match = _STATE.match(joined)
    if match:
        return f"var(--recursica-brand-themes-{mode}-state-{match.group(1).replace('.', '-')})"

    match = _TEXT_EMPHASIS.match(joined)
    if match:
        return f"var(--recursica-brand-themes-{mode}-text-emphasis-{match.group(1).lower()})"

    return None


def palette_tone_target(
    value: Any, mode: str = "light"
) -> tuple[str, str, str, str] | None:
    """Identify a palette tone reference.

    Returns:
        ``(mode, palette, level, kind)`` when ``value`` points at a palette
        level's tone or on-tone (``default`` reported as ``primary``), else None.
    """
    descriptor = parse_reference(value)
    if descriptor is None or descriptor.kind != ReferenceKind.BRAND:
        return None
    parts = list(descriptor.path)
    if not parts or parts[0].lower() not in ("palettes", "palette"):
        return None
    if len(parts) < 3 or parts[1].lower() in ("core", "core-colors"):
        return None

    key, level = parts[1], parts[2]
    if level.lower() not in ("default", "primary") and not level.isdigit():
        return None
    tail = [p.lower() for p in parts[3:]]
    if tail in ([], ["tone"], ["color"], ["color", "tone"]):
        kind = "tone"
    elif tail in (["on-tone"], ["color", "on-tone"]):
        kind = "on-tone"
    else:
        return None
    if level.lower() in ("default", "primary"):
        level = "primary"
    return descriptor.mode or mode, key, level, kind
