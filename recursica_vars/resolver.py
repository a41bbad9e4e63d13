"""Brace reference resolution.

Follows token and theme references down to a terminal value. Every call is
bounded by a depth limit so cyclic chains end in a miss instead of
unbounded recursion.
"""

from collections.abc import Callable
from typing import Any

from .config import DEFAULT_CONFIG
from .models import LookupStatus, ReferenceKind, Resolution
from .references import parse_reference
from .token_index import TokenIndex
from .vars_logging import LogCategory, get_category_logger

logger = get_category_logger(LogCategory.RESOLVER)

ThemeAccessor = Callable[[str], Any]

TOKEN_DEPTH_LIMIT = DEFAULT_CONFIG.token_depth_limit


def resolve_reference(
    ref: Any,
    index: TokenIndex,
    theme_accessor: ThemeAccessor | None = None,
    depth: int = 0,
    max_depth: int = TOKEN_DEPTH_LIMIT,
) -> Resolution:
    """Resolve a reference or literal to a terminal value.

    Args:
        ref: A brace reference, literal string, number or token-style node.
        index: Token index used for ``tokens.`` references.
        theme_accessor: Callback receiving the dotted path after a
            ``brand.``/``theme.`` prefix. Brand references stay literal
            when omitted.
        depth: Current recursion depth.
        max_depth: Depth beyond which resolution stops.

    Returns:
        A ``Resolution``; misses carry a ``LookupStatus`` instead of raising.
    """
    trail: list[str] = []
    return _resolve(ref, index, theme_accessor, depth, max_depth, trail)


def _resolve(
    ref: Any,
    index: TokenIndex,
    theme_accessor: ThemeAccessor | None,
    depth: int,
    max_depth: int,
    trail: list[str],
) -> Resolution:
    if depth > max_depth:
        logger.debug(f"Depth limit {max_depth} exceeded via {' -> '.join(trail)}")
        return Resolution.miss(LookupStatus.DEPTH_EXCEEDED, _first(trail), depth, trail)
    if ref is None:
        return Resolution.miss(LookupStatus.EMPTY, _first(trail), depth, trail)
    if isinstance(ref, (bool, int, float)):
        return Resolution(
            value=ref, status=_terminal(trail), reference=_first(trail), depth=depth, trail=trail
        )
    if isinstance(ref, dict):
        if "$value" in ref:
            inner = ref["$value"]
        elif "value" in ref:
            inner = ref["value"]
        else:
            return Resolution.miss(LookupStatus.MISSING, _first(trail), depth, trail)
        return _resolve(inner, index, theme_accessor, depth + 1, max_depth, trail)

    text = str(ref).strip()
    if not text:
        return Resolution.miss(LookupStatus.EMPTY, _first(trail), depth, trail)

    descriptor = parse_reference(text) if not text.lower().startswith("var(") else None
    if descriptor is None:
        return Resolution(
            value=text, status=_terminal(trail), reference=_first(trail), depth=depth, trail=trail
        )

    if descriptor.kind == ReferenceKind.TOKEN:
        trail.append(text)
        target = index.get(descriptor.slash_path)
        if target is None:
            logger.debug(f"Token reference {text} not found")
            return Resolution.miss(LookupStatus.MISSING, _first(trail), depth, trail)
        return _resolve(target, index, theme_accessor, depth + 1, max_depth, trail)

    if theme_accessor is None:
        return Resolution(
            value=text, status=_terminal(trail), reference=_first(trail), depth=depth, trail=trail
        )
    trail.append(text)
    target = theme_accessor(_brand_path(text))
    if target is None:
        logger.debug(f"Theme reference {text} not found")
        return Resolution.miss(LookupStatus.MISSING, _first(trail), depth, trail)
    return _resolve(target, index, theme_accessor, depth + 1, max_depth, trail)


def _first(trail: list[str]) -> str | None:
    return trail[0] if trail else None


def _terminal(trail: list[str]) -> LookupStatus:
    return LookupStatus.RESOLVED if trail else LookupStatus.NOT_A_REFERENCE


def _brand_path(text: str) -> str:
    inner = text[1:-1] if text.startswith("{") and text.endswith("}") else text
    inner = inner.strip()
    head, _, rest = inner.partition(".")
    return rest.strip() if head.lower() in ("brand", "theme") else inner


def resolve_brace_ref(
    ref: Any,
    index: TokenIndex,
    theme_accessor: ThemeAccessor | None = None,
    depth: int = 0,
    max_depth: int = TOKEN_DEPTH_LIMIT,
) -> Any:
    """Resolve to a terminal value, or None on any miss."""
    return resolve_reference(ref, index, theme_accessor, depth, max_depth).value_or(None)
