"""
Shared fixtures for the recursica_vars test suite.

Provides:
- A small but complete token source (colors, scale families, sizes,
  opacities, fonts)
- A brand theme with palettes, core colors, layers, dimensions and
  typography
- Isolation of the package logger between tests
"""

import copy
import json
import logging
from pathlib import Path

import pytest

from recursica_vars.token_index import build_token_index
from recursica_vars.vars_logging import LOGGER_NAME

GRAY = {
    "000": "#ffffff",
    "050": "#f7f7f7",
    "100": "#e6e6e6",
    "200": "#cccccc",
    "300": "#b3b3b3",
    "400": "#999999",
    "500": "#808080",
    "600": "#666666",
    "700": "#4d4d4d",
    "800": "#333333",
    "900": "#1a1a1a",
    "1000": "#000000",
}

TOKENS = {
    "tokens": {
        "color": {
            "gray": {level: {"$type": "color", "$value": hex_value} for level, hex_value in GRAY.items()},
            "blue": {
                "100": {"$value": "#dbeafe"},
                "300": {"$value": "#93c5fd"},
                "500": {"$value": "#3b82f6"},
                "700": {"$value": "#1d4ed8"},
                "900": {"$value": "#1e3a8a"},
            },
            "red": {
                "500": {"$value": "#ef4444"},
                "700": {"$value": "#b91c1c"},
            },
        },
        "colors": {
            "scale-01": {
                "alias": "green",
                "500": {"$value": "#22c55e"},
                "700": {"$value": "#15803d"},
            },
        },
        "size": {
            "none": {"$value": 0},
            "sm": {"$value": 8},
            "md": {"$value": 16},
            "lg": {"$value": 24},
        },
        "opacity": {
            "solid": {"$value": 1},
            "smoky": {"$value": 0.6},
            "ghost": {"$value": 0.38},
        },
        "font": {
            "typefaces": {
                "primary": {"$value": ["Open Sans", "sans-serif"]},
                "secondary": {"$value": "Inter"},
            },
            "sizes": {
                "md": {"$value": 16},
                "lg": {"$value": 20},
                "2xl": {"$value": 32},
            },
            "weights": {
                "regular": {"$value": 400},
                "bold": {"$value": 700},
            },
            "letter-spacings": {
                "default": {"$value": 0},
                "wide": {"$value": 0.05},
            },
            "line-heights": {
                "default": {"$value": 1.5},
                "tight": {"$value": 1.2},
            },
        },
    }
}

THEME = {
    "brand": {
        "themes": {
            "light": {
                "palettes": {
                    "neutral": {
                        "default": {"$value": "{brand.palettes.neutral.700}"},
                        "100": {
                            "color": {
                                "tone": {"$value": "{tokens.color.gray.100}"},
                                "on-tone": {"$value": "{brand.palettes.core-colors.black}"},
                            }
                        },
                        "500": {
                            "color": {
                                "tone": {"$value": "{tokens.color.gray.500}"},
                                "on-tone": {"$value": "#ffffff"},
                            }
                        },
                        "700": {
                            "color": {
                                "tone": {"$value": "{tokens.color.gray.700}"},
                                "on-tone": {"$value": "{brand.palettes.white}"},
                            }
                        },
                        "900": {"color": {"tone": {"$value": "{tokens.color.gray.900}"}}},
                    },
                    "accent": {
                        "300": {"color": {"tone": "{tokens.color.blue.300}", "on-tone": "#000000"}},
                        "500": {"color": {"tone": "{tokens.color.blue.500}", "on-tone": "#ffffff"}},
                    },
                    "core-colors": {
                        "$value": {
                            "black": "{tokens.color.gray.1000}",
                            "white": "{tokens.color.gray.000}",
                            "alert": {
                                "tone": "{tokens.color.red.700}",
                                "on-tone": "{brand.palettes.white}",
                            },
                            "warning": {"tone": "{tokens.color.red.500}"},
                            "success": {"tone": "{tokens.colors.scale-01.700}"},
                            "interactive": {
                                "default": {
                                    "tone": "{tokens.color.blue.500}",
                                    "on-tone": "#ffffff",
                                },
                                "hover": {"tone": "{tokens.color.blue.700}"},
                            },
                        }
                    },
                },
                "layers": {
                    "layer-0": {
                        "properties": {
                            "surface": {"$value": "{brand.palettes.neutral.100.color.tone}"},
                            "padding": {"$value": 16},
                            "border-radius": {"$value": 9},
                            "border-color": {"$value": "{tokens.color.gray.200}"},
                        },
                        "elements": {"text": {"low-emphasis": "{tokens.opacity.smoky}"}},
                    },
                    "layer-1": {
                        "properties": {
                            "surface": {"$value": "{brand.palettes.neutral.900.color.tone}"},
                        },
                    },
                },
                "text-emphasis": {
                    "high": "{tokens.opacity.solid}",
                    "low": 0.6,
                },
                "states": {
                    "disabled": "{tokens.opacity.ghost}",
                    "hover": 8,
                    "overlay": {"opacity": 0.5, "color": "{tokens.color.gray.1000}"},
                },
            },
            "dark": {
                "palettes": {
                    "neutral": {
                        "500": {"color": {"tone": "{tokens.color.gray.500}"}},
                        "900": {"color": {"tone": "{tokens.color.gray.900}", "on-tone": "#ffffff"}},
                    },
                    "core-colors": {
                        "black": "{tokens.color.gray.1000}",
                        "white": "{tokens.color.gray.000}",
                    },
                },
            },
        },
        "dimensions": {
            "sm": {"$type": "number", "$value": "{tokens.size.sm}"},
            "spacers": {
                "sm": {"$type": "number", "$value": 8},
                "md": {"$type": "number", "$value": "{tokens.size.md}"},
            },
            "general": {"border": {"$type": "number", "$value": {"value": 1, "unit": "px"}}},
        },
        "typography": {
            "h1": {
                "$type": "typography",
                "$value": {
                    "fontFamily": "{tokens.font.typefaces.secondary}",
                    "fontSize": "{tokens.font.sizes.2xl}",
                    "fontWeight": 700,
                },
            },
            "body": {
                "$type": "typography",
                "$value": {"fontFamily": "Open Sans", "fontSize": 16, "lineHeight": 1.2},
            },
        },
    }
}


@pytest.fixture(autouse=True)
def isolated_logging():
    """Undo CLI logging setup so caplog sees package records."""
    yield
    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture()
def sample_tokens() -> dict:
    """Fresh copy of the sample token source."""
    return copy.deepcopy(TOKENS)


@pytest.fixture()
def sample_theme() -> dict:
    """Fresh copy of the sample brand theme."""
    return copy.deepcopy(THEME)


@pytest.fixture()
def token_index(sample_tokens):
    """Token index over the sample tokens."""
    return build_token_index(sample_tokens)


@pytest.fixture()
def source_files(tmp_path, sample_tokens, sample_theme) -> tuple[Path, Path]:
    """Sample tokens and theme written to JSON files."""
    tokens_path = tmp_path / "tokens.json"
    theme_path = tmp_path / "brand.json"
    tokens_path.write_text(json.dumps(sample_tokens))
    theme_path.write_text(json.dumps(sample_theme))
    return tokens_path, theme_path
