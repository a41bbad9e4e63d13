"""In-memory live CSS variable surface.

Stands in for the style target the generated variables are applied to.
Writes are validated (brand variables must reference another variable),
immediately visible, and announced with a ``cssVarsUpdated`` event.
"""

from typing import Any

from ..color import normalize_hex
from ..config import DEFAULT_CONFIG
from ..errors import InvalidCssVarValueError
from ..token_index import TokenIndex
from ..vars_logging import LogCategory, get_category_logger
from .events import CSS_VARS_UPDATED, EventBus
from .token_refs import (
    extract_var_fallback,
    extract_var_name,
    hex_to_token_var,
    token_path_to_css_var,
)
from .var_types import is_brand_var, validate_css_var_value
from .varmap import CssVarMap, to_css

logger = get_category_logger(LogCategory.CSS)


class CssVarSurface:
    """Mutable store of applied CSS variables.

    Args:
        initial: Variables already applied.
        events: Bus receiving ``cssVarsUpdated`` notifications.
        tokens: Token index used to auto-fix raw hex brand values.
        strict: Raise instead of rejecting invalid brand values.
    """

    def __init__(
        self,
        initial: CssVarMap | None = None,
        *,
        events: EventBus | None = None,
        tokens: TokenIndex | None = None,
        strict: bool = False,
    ):
        self._vars: CssVarMap = dict(initial or {})
        self.events = events or EventBus()
        self.tokens = tokens
        self.strict = strict

    def __contains__(self, name: str) -> bool:
        return name in self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def get(self, name: str, default: str | None = None) -> str | None:
        value = self._vars.get(name)
        if value is None or not value.strip():
            return default
        return value.strip()

    def read_resolved(
        self, name: str, max_depth: int = DEFAULT_CONFIG.color_depth_limit
    ) -> str | None:
        """Follow ``var()`` chains to a terminal value.

        An unset variable falls back to the CSS fallback of the expression
        that referenced it, when there is one.
        """
        value = self.get(name)
        for _ in range(max_depth):
            inner = extract_var_name(value)
            if inner is None:
                return value
            fallback = extract_var_fallback(value)
            next_value = self.get(inner)
            value = next_value if next_value is not None else fallback
            if value is None:
                return None
        logger.debug(f"Gave up resolving {name} after {max_depth} hops")
        return None

    def _fix_brand_value(self, value: str) -> str | None:
        if normalize_hex(value) is not None and self.tokens is not None:
            fixed = hex_to_token_var(value, self.tokens)
            if fixed:
                return fixed
        if "/" in value:
            return token_path_to_css_var(value)
        return None

    def _validated(self, name: str, value: Any, keep_invalid: bool = False) -> str | None:
        if value is None:
            logger.error(f"CSS variable {name} cannot be set to None")
            return None
        text = str(value).strip()
        if not is_brand_var(name):
            return text
        valid, error = validate_css_var_value(name, text)
        if valid:
            return text
        fixed = self._fix_brand_value(text)
        if fixed:
            logger.warning(
                f"Auto-fixed brand CSS variable {name}: {text} -> {fixed}",
                extra={"var_name": name, "operation": "set"},
            )
            return fixed
        if keep_invalid:
            logger.debug(f"Keeping literal brand CSS variable {name}: {error}")
            return text
        if self.strict:
            raise InvalidCssVarValueError(name, text)
        logger.error(f"Cannot update brand CSS variable {name}: {error}")
        return None

    def set(
        self, name: str, value: Any, *, notify: bool = True, keep_invalid: bool = False
    ) -> bool:
        """Set one variable.

        Unfixable brand values are rejected unless ``keep_invalid`` is set, in
        which case they are written as-is.

        Returns:
            True when the value (or its auto-fixed form) was written.

        Raises:
            InvalidCssVarValueError: In strict mode, for an unfixable brand value.
        """
        text = self._validated(name, value, keep_invalid)
        if text is None:
            return False
        self._vars[name] = text
        if notify:
            self.events.emit(CSS_VARS_UPDATED, {"cssVars": [name]})
        return True

    def apply(self, vars: CssVarMap) -> int:
        """Set many variables with a single change notification.

        Built maps legitimately carry raw px values in brand variables, so
        literal brand values are kept here.

        Returns:
            Number of variables written.
        """
        written = [
            name
            for name, value in vars.items()
            if self.set(name, value, notify=False, keep_invalid=True)
        ]
        if written:
            self.events.emit(CSS_VARS_UPDATED, {"cssVars": written})
        logger.debug(
            f"Applied {len(written)} of {len(vars)} CSS variables",
            extra={"var_count": len(written), "operation": "apply"},
        )
        return len(written)

    def remove(self, name: str) -> None:
        self._vars.pop(name, None)
        if name.startswith("--recursica-"):
            self._vars.pop(name.replace("--recursica-", "--", 1), None)
        self.events.emit(CSS_VARS_UPDATED, {"cssVars": [name]})

    def snapshot(self) -> CssVarMap:
        return dict(self._vars)

    def to_css(self, selector: str = ":root") -> str:
        return to_css(self._vars, selector)
