"""Typed values shared by the parser, resolver and builders."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

MODES = ("light", "dark")


class ReferenceKind(Enum):
    """What a brace reference points into."""

    TOKEN = "token"
    BRAND = "brand"


class LookupStatus(Enum):
    """Outcome of resolving a value."""

    RESOLVED = "resolved"  # Terminal value found
    NOT_A_REFERENCE = "not_a_reference"  # Literal returned verbatim
    MISSING = "missing"  # Reference target absent
    DEPTH_EXCEEDED = "depth_exceeded"  # Cycle or overly long chain
    EMPTY = "empty"  # None or whitespace-only input


@dataclass(frozen=True)
class ReferenceDescriptor:
    """A parsed brace reference.

    Attributes:
        kind: Token or brand reference.
        path: Dotted path segments after the kind prefix.
        mode: Explicit light/dark mode for brand references, if given.
    """

    kind: ReferenceKind
    path: tuple[str, ...]
    mode: str | None = None

    @property
    def slash_path(self) -> str:
        return "/".join(self.path)

    @property
    def is_token(self) -> bool:
        return self.kind == ReferenceKind.TOKEN

    def with_mode(self, mode: str) -> ReferenceDescriptor:
        """Return a copy carrying ``mode`` when no explicit mode is set."""
        if self.mode or self.kind != ReferenceKind.BRAND:
            return self
        return ReferenceDescriptor(kind=self.kind, path=self.path, mode=mode)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"kind": self.kind.value, "path": list(self.path)}
        if self.mode:
            result["mode"] = self.mode
        return result


@dataclass
class Resolution:
    """Result of resolving a reference or literal.

    A miss is never an exception: callers inspect ``status`` and choose their
    own default with ``value_or``.
    """

    value: Any = None
    status: LookupStatus = LookupStatus.RESOLVED
    reference: str | None = None
    depth: int = 0
    trail: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status in (LookupStatus.RESOLVED, LookupStatus.NOT_A_REFERENCE)

    @property
    def is_miss(self) -> bool:
        return not self.ok

    def value_or(self, default: Any) -> Any:
        """Return the resolved value, or ``default`` on a miss."""
        return self.value if self.ok else default

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "status": self.status.value,
            "reference": self.reference,
            "depth": self.depth,
            "trail": list(self.trail),
        }

    @classmethod
    def miss(
        cls,
        status: LookupStatus,
        reference: str | None = None,
        depth: int = 0,
        trail: list[str] | None = None,
    ) -> Resolution:
        return cls(
            value=None,
            status=status,
            reference=reference,
            depth=depth,
            trail=list(trail or []),
        )


@dataclass(frozen=True)
class ColorTokenRef:
    """A position on a color scale, e.g. ``gray`` at ``500``."""

    family: str
    level: str

    @classmethod
    def from_any(cls, value: Any) -> ColorTokenRef | None:
        """Coerce a mapping, 2-tuple or instance into a ``ColorTokenRef``."""
        if value is None:
            return None
        if isinstance(value, ColorTokenRef):
            return value
        if isinstance(value, Mapping):
            family = value.get("family")
            level = value.get("level")
        elif isinstance(value, (tuple, list)) and len(value) == 2:
            family, level = value
        else:
            return None
        if family is None or level is None:
            return None
        return cls(family=str(family), level=str(level))

    def to_dict(self) -> dict[str, str]:
        return {"family": self.family, "level": self.level}
