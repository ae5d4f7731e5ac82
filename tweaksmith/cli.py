#!/usr/bin/env python3
"""
Tweaksmith CLI - build PowerShell scripts from a tweak catalog.

Usage:
    tweaksmith preview CATALOG [-s ID ...] [--width N]
    tweaksmith export CATALOG [-s ID ...] [--output-dir DIR] [--custom FILE] [--yes]
    tweaksmith edit CATALOG [-s ID ...] [--output-dir DIR] [--yes]
    tweaksmith redact [TEXT] [--file PATH] [--scan]
    tweaksmith settings show
    tweaksmith settings set KEY VALUE
"""

import warnings
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Optional, Tuple

import click

from tweaksmith import __version__
from tweaksmith.cli_helpers import (
    build_script_view,
    configure_logging,
    console,
    gutter_width,
    print_error,
    print_export_warning,
    print_success,
    print_warning,
)
from tweaksmith.composer.compose import ComposeResult, TweakProcessingWarning, build_artifacts
from tweaksmith.composer.powershell import DEFAULT_REBOOT_TIMEOUT
from tweaksmith.config.manager import SettingsManager, build_selection, load_catalog
from tweaksmith.config.models import EditorSettings
from tweaksmith.editor.engine import EditorEngine
from tweaksmith.editor.line_numbers import MonospaceRowHeightProvider, VisualLayout
from tweaksmith.editor.tokenizer import split_lines
from tweaksmith.exceptions import TweaksmithError
from tweaksmith.security.redactor import get_redactor


class TweaksmithCLIError(click.ClickException):
    """ClickException rendered with the CLI's red cross."""

    def __init__(self, message: str, fix_hint: str = ""):
        super().__init__(message)
        self.fix_hint = fix_hint

    def show(self, file=None) -> None:
        print_error(self.format_message(), self.fix_hint)


@contextmanager
def cli_errors():
    """Turn library errors into CLI errors."""
    try:
        yield
    except TweaksmithError as exc:
        raise TweaksmithCLIError(str(exc)) from exc


@contextmanager
def surfaced_warnings():
    """Print composer warnings after the block instead of via the warnings module."""
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", TweakProcessingWarning)
        yield
    for warning in caught:
        if issubclass(warning.category, TweakProcessingWarning):
            print_warning(str(warning.message))


def _load_selection(catalog: Path, ids: Iterable[str]):
    with cli_errors():
        return build_selection(load_catalog(catalog), list(ids) or None)


def _fit_layout(engine: EditorEngine, width: int) -> Tuple[Optional[VisualLayout], Optional[int]]:
    """Gutter layout and code column width for a ``width``-cell viewport.

    The gutter grows with the largest visual number, which shrinks the code
    column, which can add rows; iterate until the gutter width settles.
    """
    settings = engine.settings
    digits = len(str(len(split_lines(engine.displayed_text)))) if settings.show_line_numbers else 0
    layout = None
    columns = width
    for _ in range(4):
        columns = max(1, width - digits - 1) if settings.show_line_numbers else max(1, width)
        provider = MonospaceRowHeightProvider(columns) if settings.word_wrap else None
        layout = engine.visual_layout(provider, columns)
        if gutter_width(layout) <= digits:
            break
        digits = gutter_width(layout)
    return layout, columns if settings.word_wrap else None


def render_engine(engine: EditorEngine, width: Optional[int] = None) -> None:
    # The console never prints wider than the terminal
    width = min(width, console.width) if width else console.width
    rows = engine.highlighter.wait().rows
    layout, columns = _fit_layout(engine, width)
    view = build_script_view(rows, layout, columns, colors=engine.settings.enable_text_colors)
    console.print(view, width=width, crop=True)


def deliver(result: ComposeResult, settings: EditorSettings, output_dir: Path, yes: bool) -> None:
    """Write artifacts to ``output_dir``, asking first when the settings say so."""
    for warning in result.warnings:
        print_warning(str(warning))

    if result.is_empty:
        raise TweaksmithCLIError("Nothing to export", "Select tweaks with -s ID")

    if result.requires_confirmation and not yes:
        print_export_warning()
        click.confirm("Continue and write the script?", abort=True)

    encoding = "utf-8" if settings.encoding_utf8 else "utf-16"
    output_dir.mkdir(parents=True, exist_ok=True)
    for artifact in result.artifacts:
        path = output_dir / artifact.filename
        path.write_text(artifact.content, encoding=encoding)
        print_success(f"Wrote {path}")


selection_option = click.option(
    "--select", "-s", "ids", multiple=True, metavar="ID",
    help="Tweak id to include (repeatable, in order). Default: whole catalog.",
)
catalog_argument = click.argument(
    "catalog", type=click.Path(exists=True, dir_okay=False, path_type=Path),
)


@click.group()
@click.version_option(version=__version__, prog_name="tweaksmith")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.option("--settings", "settings_path", type=click.Path(dir_okay=False, path_type=Path),
              envvar="TWEAKSMITH_SETTINGS", help="Settings file (default ~/.tweaksmith/settings.yaml)")
@click.pass_context
def main(ctx, verbose: bool, settings_path: Optional[Path]):
    """Tweaksmith - compose Windows tweak scripts you can review and edit."""
    configure_logging(verbose)
    ctx.obj = SettingsManager(settings_path)


@main.command()
@catalog_argument
@selection_option
@click.option("--width", type=click.IntRange(min=10), default=None,
              help="Viewport width in cells (default: terminal width)")
@click.pass_obj
def preview(manager: SettingsManager, catalog: Path, ids: Tuple[str, ...], width: Optional[int]):
    """Show the composed script with highlighting and line numbers."""
    selection = _load_selection(catalog, ids)
    settings = manager.load()
    with surfaced_warnings():
        engine = EditorEngine(selection, settings)
    with engine:
        render_engine(engine, width)


@main.command()
@catalog_argument
@selection_option
@click.option("--output-dir", "-o", type=click.Path(file_okay=False, path_type=Path),
              default=Path("."), show_default=True, help="Where to write the script(s)")
@click.option("--custom", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Export this hand-edited script instead of the composed one")
@click.option("--reboot-timeout", type=click.IntRange(min=1), default=DEFAULT_REBOOT_TIMEOUT,
              show_default=True, help="Seconds the reboot prompt waits")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.pass_obj
def export(manager: SettingsManager, catalog: Path, ids: Tuple[str, ...], output_dir: Path,
           custom: Optional[Path], reboot_timeout: int, yes: bool):
    """Write the script artifact(s) for the selection.

    \b
    Policy, first match wins:
      --custom FILE          one tweaksmith-custom.ps1, exported verbatim
      download_each_tweak    one script per tweak
      otherwise              one combined tweaksmith-selection.ps1
    """
    settings = manager.load()
    override = custom.read_text(encoding="utf-8") if custom else None
    selection = _load_selection(catalog, ids)
    result = build_artifacts(selection, settings, override=override, reboot_timeout=reboot_timeout)
    deliver(result, settings, output_dir, yes)


@main.command()
@catalog_argument
@selection_option
@click.option("--output-dir", "-o", type=click.Path(file_okay=False, path_type=Path),
              default=Path("."), show_default=True, help="Where to write the saved script")
@click.option("--yes", "-y", is_flag=True, help="Save without asking and skip the export prompt")
@click.pass_obj
def edit(manager: SettingsManager, catalog: Path, ids: Tuple[str, ...], output_dir: Path, yes: bool):
    """Edit the composed script in $EDITOR, then save it as a custom script."""
    selection = _load_selection(catalog, ids)
    settings = manager.load()
    with surfaced_warnings():
        engine = EditorEngine(selection, settings)

    with engine:
        if not engine.enter_edit():
            raise TweaksmithCLIError(
                "Code editing is disabled",
                "tweaksmith settings set enable_code_editing true",
            )

        edited = click.edit(engine.displayed_text, extension=".ps1")
        if edited is not None:
            engine.edit(edited)

        if not engine.dirty:
            engine.discard()
            console.print("[dim]No changes; nothing saved[/dim]")
            return

        if not yes and not click.confirm("Save your edits?", default=True):
            engine.discard()
            console.print("[dim]Edits discarded[/dim]")
            return

        engine.save()
        deliver(engine.export(), settings, output_dir, yes)


@main.command()
@click.argument("text", required=False)
@click.option("--file", "file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Read the text from a file")
@click.option("--scan", is_flag=True, help="Report what would be redacted")
def redact(text: Optional[str], file_path: Optional[Path], scan: bool):
    """Mask emails, secrets and access keys in TEXT (or --file, or stdin)."""
    if file_path is not None:
        text = file_path.read_text(encoding="utf-8")
    elif text is None:
        text = click.get_text_stream("stdin").read()

    redactor = get_redactor()
    if scan:
        findings = redactor.scan(text)
        if not findings:
            print_success("Nothing sensitive found")
            return
        for finding in findings:
            print_warning(f"{finding['name']}: {finding['count']} match(es)")
        return

    click.echo(redactor.redact_string(text), nl=False)


@main.group()
def settings():
    """Inspect or change editor settings."""
    pass


@settings.command("show")
@click.pass_obj
def settings_show(manager: SettingsManager):
    """Print every setting and its value."""
    from rich.markup import escape
    from rich.table import Table

    current = manager.load()
    table = Table(title=f"Settings ({escape(str(manager.path))})")
    table.add_column("Setting")
    table.add_column("Value", justify="right")
    for name, value in current.model_dump().items():
        table.add_row(name, "[green]on[/green]" if value else "[dim]off[/dim]")
    console.print(table)


@settings.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def settings_set(manager: SettingsManager, key: str, value: str):
    """Set KEY (snake_case or camelCase) to a boolean VALUE."""
    with cli_errors():
        updated = manager.set_value(key, value)
    print_success(f"Saved settings to {manager.path}")
    if key in ("enable_code_editing", "enableCodeEditing") and updated.enable_code_editing:
        console.print("[dim]Line numbers are always shown while editing is enabled[/dim]")


if __name__ == "__main__":
    main()
