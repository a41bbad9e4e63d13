"""Helpers over a CSS variable map (name to value)."""

from ..vars_logging import LogCategory, get_category_logger
from .token_refs import extract_var_name

logger = get_category_logger(LogCategory.CSS)

CssVarMap = dict[str, str]


def merge(*maps: CssVarMap, overwrite: bool = True) -> CssVarMap:
    """Merge maps left to right; later maps win unless ``overwrite`` is False."""
    result: CssVarMap = {}
    for var_map in maps:
        for name, value in var_map.items():
            if overwrite or name not in result:
                result[name] = value
    return result


def find_cycles(vars: CssVarMap) -> set[str]:
    """Names whose ``var()`` chain loops back on itself within the map."""
    cyclic: set[str] = set()
    for start in vars:
        seen = [start]
        current = extract_var_name(vars[start])
        while current is not None and current in vars:
            if current in seen:
                cyclic.update(seen[seen.index(current):])
                break
            seen.append(current)
            current = extract_var_name(vars[current])
    return cyclic


def drop_cyclic(vars: CssVarMap) -> CssVarMap:
    """Copy of ``vars`` without entries that take part in a reference cycle."""
    cyclic = find_cycles(vars)
    if cyclic:
        logger.warning(f"Dropping {len(cyclic)} cyclic CSS variables: {sorted(cyclic)}")
    return {name: value for name, value in vars.items() if name not in cyclic}


def to_css(vars: CssVarMap, selector: str = ":root") -> str:
    """Render a map as a CSS rule."""
    lines = [f"{selector} {{"]
    lines.extend(f"  {name}: {value};" for name, value in sorted(vars.items()))
    lines.append("}")
    return "\n".join(lines) + "\n"
