"""Click-based CLI for building and inspecting Recursica CSS variables."""

import json
import sys
from pathlib import Path
from typing import Any

import click

from . import __version__
from .builders.values import ensure_index, normalize_mode
from .color import blend_hex_over, contrast_ratio, normalize_hex
from .compliance import find_aa_compliant_color, patch_core_color_on_tones
from .config import ResolverConfig, load_config
from .css import CssVarSurface, EventBus
from .css.varmap import to_css
from .errors import RecursicaError, ThemePatchError
from .models import ColorTokenRef
from .pipeline import load_json_source, rebuild
from .resolver import resolve_reference
from .schema import as_theme_view
from .storage import JsonFileStore, write_primary_level
from .vars_logging import setup_logging


def _fail(error: RecursicaError) -> None:
    click.echo(error.format(use_color=sys.stderr.isatty()), err=True)
    sys.exit(error.exit_code)


def _config(ctx: click.Context) -> ResolverConfig:
    return ctx.obj["config"]


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option(
    "--config",
    "config_file",
    type=click.Path(path_type=Path),
    help="Configuration file path (default: .recursica/config.json)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, config_file: Path | None) -> None:
    """Recursica variables - compile design tokens and brand themes to CSS."""
    if quiet and verbose:
        click.echo("Error: --quiet and --verbose are mutually exclusive", err=True)
        sys.exit(1)
    try:
        config = load_config(Path.cwd(), config_file)
    except RecursicaError as e:
        _fail(e)
    settings = config.logging
    setup_logging(
        level=settings.level,
        quiet=quiet,
        verbose=verbose,
        log_file=settings.file,
        log_format=settings.format,
        rotation_count=settings.rotation_count,
        max_bytes=settings.max_bytes,
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("tokens", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("theme", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--mode", type=click.Choice(["light", "dark"], case_sensitive=False), help="Theme mode")
@click.option(
    "--format", "output_format", type=click.Choice(["css", "json"]), default="css", show_default=True
)
@click.option("--selector", default=":root", show_default=True, help="CSS selector for the rule")
@click.option(
    "--choices",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file of per-slot typography choices",
)
@click.option("--no-compliance", is_flag=True, help="Skip the layer AA compliance pass")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write to file")
@click.pass_context
def build(
    ctx: click.Context,
    tokens: Path,
    theme: Path,
    mode: str | None,
    output_format: str,
    selector: str,
    choices: Path | None,
    no_compliance: bool,
    output: Path | None,
) -> None:
    """Build the CSS variables for TOKENS and THEME."""
    config = _config(ctx)
    try:
        index = ensure_index(load_json_source(tokens))
        view = as_theme_view(load_json_source(theme))
        choice_data = load_json_source(choices) if choices else None
        surface = CssVarSurface(events=EventBus(), tokens=index, strict=config.strict_brand_vars)
        result = rebuild(
            surface,
            index,
            view,
            mode,
            choices=choice_data,
            config=config,
            compliance=not no_compliance,
        )
    except RecursicaError as e:
        _fail(e)

    if output_format == "json":
        text = json.dumps(result.to_dict(), indent=2) + "\n"
    else:
        text = to_css(result.vars, selector)

    if output is not None:
        output.write_text(text)
        click.echo(f"Wrote {len(result.vars)} variables to {output}", err=True)
    else:
        click.echo(text, nl=False)


@cli.command()
@click.argument("tokens", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("args", nargs=-1, required=True)
@click.option("--mode", type=click.Choice(["light", "dark"], case_sensitive=False), help="Theme mode")
@click.pass_context
def resolve(ctx: click.Context, tokens: Path, args: tuple[str, ...], mode: str | None) -> None:
    """Resolve a reference: TOKENS [THEME] REF."""
    if len(args) > 2:
        raise click.UsageError("Expected TOKENS [THEME] REF")
    config = _config(ctx)
    theme_path, ref = (args[0], args[1]) if len(args) == 2 else (None, args[0])
    try:
        index = ensure_index(load_json_source(tokens))
        accessor = None
        if theme_path is not None:
            view = as_theme_view(load_json_source(theme_path))
            accessor = view.accessor(normalize_mode(mode or config.default_mode))
    except RecursicaError as e:
        _fail(e)

    resolution = resolve_reference(ref, index, accessor, max_depth=config.token_depth_limit)
    click.echo(json.dumps(resolution.to_dict(), indent=2, default=str))
    if resolution.is_miss:
        sys.exit(1)


@cli.command()
@click.argument("foreground")
@click.argument("background")
@click.option("--opacity", type=click.FloatRange(0, 1), default=1.0, show_default=True)
@click.pass_context
def contrast(ctx: click.Context, foreground: str, background: str, opacity: float) -> None:
    """Contrast of FOREGROUND (at --opacity) over BACKGROUND."""
    config = _config(ctx)
    for name, value in (("FOREGROUND", foreground), ("BACKGROUND", background)):
        if normalize_hex(value) is None:
            raise click.BadParameter(f"{value!r} is not a hex color", param_hint=name)
    blended = blend_hex_over(foreground, background, opacity)
    ratio = contrast_ratio(background, blended)
    passed = ratio >= config.aa_threshold
    click.echo(f"{ratio:.2f}:1 {'AA pass' if passed else 'AA fail'} (blended {blended})")
    if not passed:
        sys.exit(1)


@cli.command("aa-color")
@click.argument("tokens", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("background")
@click.option("--family", help="Color family to step through")
@click.option("--level", help="Starting level, e.g. 500")
@click.option("--opacity", type=click.FloatRange(0, 1), default=1.0, show_default=True)
@click.option("--mode", type=click.Choice(["light", "dark"], case_sensitive=False), default="light")
@click.pass_context
def aa_color(
    ctx: click.Context,
    tokens: Path,
    background: str,
    family: str | None,
    level: str | None,
    opacity: float,
    mode: str,
) -> None:
    """Find an AA-compliant color over BACKGROUND."""
    if (family is None) != (level is None):
        raise click.UsageError("--family and --level must be given together")
    try:
        index = ensure_index(load_json_source(tokens))
    except RecursicaError as e:
        _fail(e)
    start = ColorTokenRef(family, level) if family and level else None
    result = find_aa_compliant_color(
        background, start, opacity, index, mode=mode, config=_config(ctx)
    )
    if result is None:
        click.echo("No starting point on the scale; nothing found", err=True)
        sys.exit(1)
    click.echo(result)


@cli.command()
@click.argument("palette")
@click.argument("level")
@click.option("--mode", type=click.Choice(["light", "dark"], case_sensitive=False), default="light")
@click.option("--store", "store_path", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def primary(ctx: click.Context, palette: str, level: str, mode: str, store_path: Path | None) -> None:
    """Remember LEVEL as the primary level of PALETTE."""
    store_path = store_path or _config(ctx).store_path
    if store_path is None:
        raise click.UsageError("No store configured; pass --store or set store_path")
    write_primary_level(JsonFileStore(store_path), palette, mode.lower(), level)
    click.echo(f"{palette} primary level for {mode.lower()} set to {level}")


@cli.command("fix-core")
@click.argument("tokens", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("theme", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--mode", type=click.Choice(["light", "dark"], case_sensitive=False), default="light")
@click.option("--force", is_flag=True, help="Re-pick on-tones that already pass")
@click.pass_context
def fix_core(ctx: click.Context, tokens: Path, theme: Path, mode: str, force: bool) -> None:
    """Print THEME with core on-tones rewritten for AA contrast."""
    config = _config(ctx)
    try:
        token_data: Any = load_json_source(tokens)
        theme_data = load_json_source(theme)
    except RecursicaError as e:
        _fail(e)
    index = ensure_index(token_data)
    surface = CssVarSurface(tokens=index)
    rebuild(surface, index, theme_data, mode, config=config, compliance=False)
    patched = patch_core_color_on_tones(theme_data, index, surface, mode, force=force, config=config)
    if patched is None:
        _fail(ThemePatchError("Core on-tone patch", "a planned on-tone has no theme reference"))
    click.echo(json.dumps(patched, indent=2))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
