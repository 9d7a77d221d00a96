from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from colltab.build import Builder, CollationTable, ElementTag, unpack
from colltab.config import build_defaults, build_locale, build_log_level, merge_payload
from colltab.exceptions import CollationBuildError, InvariantViolation
from colltab.runtime.json_io import EntryPayloadError, dump_json_pretty, load_entries_path

app = typer.Typer(add_completion=False)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise typer.BadParameter(f"unknown log level: {level}", param_hint="--log-level")
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _resolve_settings(
    *,
    config: Optional[Path],
    locale: Optional[str],
    log_level: Optional[str],
) -> tuple[str, str]:
    section = build_defaults(config_path=config)
    merged = merge_payload({"locale": locale, "log_level": log_level}, section)
    return build_locale(merged), build_log_level(merged)


def _builder_from(entries_path: Path) -> Builder:
    try:
        entries = load_entries_path(entries_path)
    except EntryPayloadError as exc:
        raise typer.BadParameter(str(exc), param_hint="ENTRIES") from exc
    builder = Builder()
    for runes, weight_lists in entries:
        builder.add(runes, weight_lists)
    logger.info("loaded %d entries from %s", len(builder), entries_path)
    return builder


def _build_or_exit(builder: Builder, locale: str) -> CollationTable:
    try:
        return builder.build(locale)
    except CollationBuildError as exc:
        typer.echo(f"build failed: {exc}", err=True)
        typer.echo(dump_json_pretty(exc.payload()), err=True)
        raise typer.Exit(code=1) from exc
    except InvariantViolation as exc:
        typer.echo(f"inconsistent input data: {exc}", err=True)
        raise typer.Exit(code=2) from exc


@app.command("build")
def build(
    entries: Path = typer.Argument(..., help="JSON file of rune sequences and weights."),
    locale: Optional[str] = typer.Option(None, "--locale"),
    config: Optional[Path] = typer.Option(None, "--config"),
    out: Optional[Path] = typer.Option(None, "--out", help="Write stats JSON here instead of stdout."),
    log_level: Optional[str] = typer.Option(None, "--log-level"),
) -> None:
    """Compile a collation table and report its shape and digest."""
    resolved_locale, resolved_level = _resolve_settings(
        config=config, locale=locale, log_level=log_level
    )
    _configure_logging(resolved_level)
    table = _build_or_exit(_builder_from(entries), resolved_locale)
    rendered = dump_json_pretty(table.stats())
    if out is None:
        typer.echo(rendered)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(rendered + "\n", encoding="utf-8")


@app.command("inspect")
def inspect(
    entries: Path = typer.Argument(..., help="JSON file of rune sequences and weights."),
    rune: str = typer.Argument(..., help="Character or U+XXXX code point to look up."),
    config: Optional[Path] = typer.Option(None, "--config"),
    log_level: Optional[str] = typer.Option(None, "--log-level"),
) -> None:
    """Print the packed element the compiled table stores for one rune."""
    locale, resolved_level = _resolve_settings(config=config, locale=None, log_level=log_level)
    _configure_logging(resolved_level)
    code_point = _parse_rune(rune)
    table = _build_or_exit(_builder_from(entries), locale)
    element = unpack(table.lookup(code_point))
    payload: dict[str, object] = {
        "rune": f"U+{code_point:04X}",
        "tag": element.tag.name.lower(),
        "fields": list(element.fields),
    }
    if element.tag is ElementTag.EXPANSION:
        payload["expansion"] = [
            list(unpack(value).weight()) for value in table.expansion(element.fields[0])
        ]
    typer.echo(dump_json_pretty(payload))


def _parse_rune(value: str) -> int:
    if len(value) == 1:
        return ord(value)
    text = value.upper().removeprefix("U+")
    try:
        return int(text, 16)
    except ValueError:
        raise typer.BadParameter(f"not a rune: {value}", param_hint="RUNE") from None


def main() -> None:  # pragma: no cover - console entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
