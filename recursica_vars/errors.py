"""Errors raised at the edges of the resolver.

Builders and the resolver never raise for data-shape problems; these errors
are raised only when loading sources and config, on strict CSS writes, and
when a theme patch is abandoned. The CLI renders them with ``format`` and
exits with ``exit_code``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import click


class ErrorCategory(Enum):
    """Where an error came from."""

    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    SOURCE = "source"
    RUNTIME = "runtime"


class RecursicaError(Exception):
    """Base error carrying a suggestion and the values it concerns.

    Subclasses set ``category``, ``exit_code`` and ``default_suggestion``;
    instances pass the message, an optional suggestion override and any
    details as keywords. Details that are None are left out.
    """

    category = ErrorCategory.RUNTIME
    exit_code = 1
    default_suggestion: str | None = None

    def __init__(self, message: str, suggestion: str | None = None, **details: Any):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion or self.default_suggestion
        self.details = {key: value for key, value in details.items() if value is not None}

    def format(self, use_color: bool = True) -> str:
        """Render the message, suggestion and details, one per line."""
        lines = [f"{click.style('Error:', fg='bright_red')} {self.message}"]
        if self.suggestion:
            lines.append(f"{click.style('Suggestion:', fg='bright_cyan')} {self.suggestion}")
        lines.extend(click.style(f"  {key}: {value}", dim=True) for key, value in self.details.items())
        text = "\n".join(lines)
        return text if use_color else click.unstyle(text)

    def __str__(self) -> str:
        return self.format(use_color=False)


class InvalidCssVarValueError(RecursicaError):
    """A brand CSS variable was given a value that is not a var() reference."""

    category = ErrorCategory.VALIDATION
    exit_code = 2
    default_suggestion = "Use var(--recursica-tokens-...) or another brand variable"

    def __init__(self, var_name: str, value: str):
        super().__init__(
            f"Brand CSS variable {var_name} must reference a token, got: {value}",
            var_name=var_name,
            value=value,
        )


class SourceLoadError(RecursicaError):
    """A token or theme JSON source could not be read."""

    category = ErrorCategory.SOURCE
    default_suggestion = "Verify the file exists and contains a JSON object"

    def __init__(self, path: str, original_error: str | None = None):
        message = f"Cannot load JSON source: {path}"
        if original_error:
            message = f"{message}: {original_error}"
        super().__init__(message, path=path)


class ConfigurationError(RecursicaError):
    """Invalid resolver configuration file or environment setting."""

    category = ErrorCategory.CONFIGURATION
    default_suggestion = "Check your configuration file syntax and value ranges"

    def __init__(self, message: str, config_file: str | None = None, suggestion: str | None = None):
        super().__init__(message, suggestion, config_file=config_file)


class ThemePatchError(RecursicaError):
    """A mutating theme patch could not be completed and was abandoned."""

    default_suggestion = "The theme and CSS surface were left unchanged"

    def __init__(self, operation: str, original_error: str):
        super().__init__(f"{operation} abandoned: {original_error}", operation=operation)
