"""Typography variables for the fixed text-style slots.

Each slot property is resolved in order: the user's per-slot choice, the
brand's own typography spec, then a scale default. Whatever wins is emitted
as a ``var(--recursica-tokens-font-...)`` reference so token edits carry
through to the brand variables.
"""

from dataclasses import dataclass, field
from typing import Any

from ..css.token_refs import extract_var_name, var_ref
from ..models import ReferenceKind
from ..references import parse_reference, reference_to_css_var, unwrap_value
from ..schema import as_theme_view
from ..token_index import TokenIndex, to_number
from ..vars_logging import LogCategory, get_category_logger
from .tokens import FAMILY_KINDS, FONT_VAR_KINDS, build_token_vars, font_var_name
from .values import ensure_index

logger = get_category_logger(LogCategory.TYPOGRAPHY)

TYPOGRAPHY_PREFIX = "--recursica-brand-typography-"

TEXT_SLOTS = (
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "subtitle-1",
    "subtitle-2",
    "body-1",
    "body-2",
    "caption",
    "overline",
)

# slot -> key used in the brand typography section and in variable names
SLOT_BRAND_KEYS = {
    "subtitle-1": "subtitle",
    "subtitle-2": "subtitle-small",
    "body-1": "body",
    "body-2": "body-small",
}


@dataclass(frozen=True)
class TypographyProperty:
    """One resolvable property of a text style."""

    suffix: str
    spec_keys: tuple[str, ...]
    choice_key: str
    kinds: tuple[str, ...]
    default_key: str
    default_literal: str | None


PROPERTIES = (
    TypographyProperty("font-family", ("fontFamily",), "family", ("typeface", "family"), "primary", None),
    TypographyProperty("font-size", ("fontSize",), "size", ("size",), "md", "16px"),
    TypographyProperty("font-weight", ("fontWeight", "weight"), "weight", ("weight",), "regular", "400"),
    TypographyProperty(
        "font-letter-spacing", ("letterSpacing",), "spacing", ("letter-spacing",), "default", "0"
    ),
    TypographyProperty(
        "line-height", ("lineHeight",), "lineHeight", ("line-height",), "default", "normal"
    ),
    TypographyProperty("font-style", ("fontStyle",), "style", ("style",), "normal", "normal"),
    TypographyProperty("text-transform", ("textTransform",), "transform", ("case",), "none", "none"),
    TypographyProperty(
        "text-decoration", ("textDecoration",), "decoration", ("decoration",), "none", "none"
    ),
)


@dataclass
class TypographyResult:
    vars: dict[str, str] = field(default_factory=dict)
    families_to_load: list[str] = field(default_factory=list)


def slot_var_name(slot: str, suffix: str) -> str:
    return f"{TYPOGRAPHY_PREFIX}{SLOT_BRAND_KEYS.get(slot, slot)}-{suffix}"


def _literal_text(value: Any) -> str | None:
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict) and "value" in value:
        return f"{value['value']}{value.get('unit') or ''}"
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def _same_value(token_value: Any, literal: Any) -> bool:
    left, right = _literal_text(token_value), _literal_text(literal)
    if left is None or right is None:
        return False
    left_number, right_number = to_number(left), to_number(right)
    if left_number is not None and right_number is not None:
        return left_number == right_number
    return left.strip("\"'").casefold() == right.strip("\"'").casefold()


def find_font_token_by_value(value: Any, kinds: tuple[str, ...], index: TokenIndex) -> str | None:
    """``var()`` of the first font token in ``kinds`` whose value equals ``value``."""
    for kind in kinds:
        stored, entries = index.font_entries(kind)
        for key, token_value in entries.items():
            if _same_value(token_value, value):
                return var_ref(font_var_name(stored or kind, key))
    return None


def _font_token_var(kinds: tuple[str, ...], key: str, index: TokenIndex) -> str | None:
    for kind in kinds:
        if index.get(f"font/{kind}/{key}") is not None:
            return var_ref(font_var_name(kind, key))
    return None


def _reference_var(value: Any) -> str | None:
    """Token var for a brace, ``var()`` or collection-style token reference."""
    if isinstance(value, dict) and value.get("collection") == "Tokens":
        name = str(value.get("name") or "")
        parts = [p for p in name.replace("token.", "", 1).split("/") if p]
        if len(parts) == 3 and parts[0] == "font":
            return var_ref(font_var_name(parts[1], parts[2]))
        return None

    raw = unwrap_value(value)
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if text.lower().startswith("var("):
        return text if extract_var_name(text) else None

    descriptor = parse_reference(text) if text.startswith("{") else None
    if descriptor is None:
        return None
    if descriptor.kind == ReferenceKind.TOKEN:
        path = descriptor.path
        if len(path) == 3 and path[0] == "font":
            return var_ref(font_var_name(path[1], path[2]))
    return reference_to_css_var(descriptor)


def _resolve_choice(prop: TypographyProperty, choice: Any, index: TokenIndex) -> str | None:
    if not isinstance(choice, str) or not choice.strip():
        return None
    choice = choice.strip()
    return (
        _reference_var(choice)
        or _font_token_var(prop.kinds, choice, index)
        or find_font_token_by_value(choice, prop.kinds, index)
    )


def _resolve_spec(prop: TypographyProperty, spec: dict[str, Any], index: TokenIndex) -> str | None:
    raw = next((spec[key] for key in prop.spec_keys if spec.get(key) is not None), None)
    if raw is None:
        return None
    return _reference_var(raw) or find_font_token_by_value(unwrap_value(raw), prop.kinds, index)


def _resolve_default(prop: TypographyProperty, index: TokenIndex) -> str:
    found = _font_token_var(prop.kinds, prop.default_key, index)
    if found:
        return found
    return var_ref(font_var_name(prop.kinds[0], prop.default_key), prop.default_literal)


def resolve_slot_property(
    prop: TypographyProperty,
    spec: dict[str, Any],
    choice: dict[str, Any],
    index: TokenIndex,
) -> str:
    """Choice, then brand spec, then scale default; always a ``var()``."""
    chosen = choice.get(prop.choice_key)
    value = _resolve_choice(prop, chosen, index)
    if value:
        return value
    if chosen is not None:
        logger.debug(f"No font token for {prop.choice_key} choice {chosen!r}")

    value = _resolve_spec(prop, spec, index)
    if value:
        return value
    if any(spec.get(key) is not None for key in prop.spec_keys):
        logger.debug(f"No font token matches {prop.suffix} {spec.get(prop.spec_keys[0])!r}")
    return _resolve_default(prop, index)


def _family_literal(family_var: str, index: TokenIndex) -> str | None:
    name = extract_var_name(family_var)
    if not name or not name.startswith("--recursica-tokens-font-"):
        return None
    tail = name[len("--recursica-tokens-font-"):]
    for kind in sorted(FONT_VAR_KINDS, key=len, reverse=True):
        if kind in FAMILY_KINDS and tail.startswith(f"{kind}-"):
            literal = _literal_text(index.get(f"font/{kind}/{tail[len(kind) + 1:]}"))
            if literal:
                return literal.split(",")[0].strip().strip("\"'")
    return None


def build_typography_vars(
    tokens: Any,
    theme: Any,
    overrides: dict[str, Any] | None = None,
    choices: dict[str, dict[str, Any]] | None = None,
) -> TypographyResult:
    """Build font token variables and the per-slot typography variables.

    Args:
        tokens: Token source or index.
        theme: Theme source or view.
        overrides: Token path overrides applied before resolution.
        choices: Per-slot user choices, e.g. ``{"h1": {"size": "2xl"}}``.

    Returns:
        The variables plus the distinct font families the output uses.
    """
    index = ensure_index(tokens, overrides)
    view = as_theme_view(theme)
    typography = view.typography()
    choices = choices or {}

    vars = {
        name: value
        for name, value in build_token_vars(index).items()
        if name.startswith("--recursica-tokens-font-")
    }
    families: set[str] = set()

    for slot in TEXT_SLOTS:
        brand_key = SLOT_BRAND_KEYS.get(slot, slot)
        spec = unwrap_value(typography.get(brand_key))
        spec = spec if isinstance(spec, dict) else {}
        choice = choices.get(slot) or choices.get(brand_key) or {}

        for prop in PROPERTIES:
            value = resolve_slot_property(prop, spec, choice, index)
            vars[slot_var_name(slot, prop.suffix)] = value
            if prop.suffix == "font-family":
                literal = _family_literal(value, index)
                if literal:
                    families.add(literal)

    logger.debug(
        f"Built {len(vars)} typography variables",
        extra={"var_count": len(vars), "operation": "typography"},
    )
    return TypographyResult(vars=vars, families_to_load=sorted(families))
