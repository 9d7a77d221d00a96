from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from colltab import cli

runner = CliRunner()

_ENTRIES = [
    {"text": "a", "weights": [[100, 32, 2]]},
    {"text": "ab", "weights": [[100, 32, 2], [150, 32, 2]]},
    {"runes": ["U+0064"], "weights": [[201], [202]]},
]


def test_build_prints_stats(tmp_path: Path, write_entries) -> None:
    path = write_entries(tmp_path / "entries.json", _ENTRIES)
    result = runner.invoke(cli.app, ["build", str(path)])
    assert result.exit_code == 0, result.output
    stats = json.loads(result.stdout)
    assert stats["locale"] == ""
    assert stats["max_contraction_len"] == 2
    assert stats["contraction_trie_nodes"] == 1
    assert len(stats["digest"]) == 64


def test_build_writes_out_file(tmp_path: Path, write_entries) -> None:
    path = write_entries(tmp_path / "entries.json", _ENTRIES)
    out = tmp_path / "artifacts" / "stats.json"
    result = runner.invoke(cli.app, ["build", str(path), "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert json.loads(out.read_text())["expansion_elements"] == 6


def test_build_uses_config_locale(tmp_path: Path, write_entries) -> None:
    path = write_entries(tmp_path / "entries.json", _ENTRIES)
    config = tmp_path / "colltab.toml"
    config.write_text('[build]\nlocale = "de"\nlog_level = "error"\n')
    result = runner.invoke(cli.app, ["build", str(path), "--config", str(config)])
    assert result.exit_code == 0, result.output
    # Only the root table is compiled.
    assert json.loads(result.stdout)["locale"] == ""


def test_build_reports_recorded_errors(tmp_path: Path, write_entries) -> None:
    path = write_entries(
        tmp_path / "entries.json",
        [{"text": "x", "weights": [[1, 0x10000]]}],
    )
    result = runner.invoke(cli.app, ["build", str(path)])
    assert result.exit_code == 1
    assert "U+0078" in result.output
    assert '"kind": "packing_error"' in result.output


def test_build_rejects_bad_documents(tmp_path: Path) -> None:
    path = tmp_path / "entries.json"
    path.write_text('{"entries": [{"text": "a"}]}')
    result = runner.invoke(cli.app, ["build", str(path)])
    assert result.exit_code == 2


def test_build_rejects_unknown_log_level(tmp_path: Path, write_entries) -> None:
    path = write_entries(tmp_path / "entries.json", _ENTRIES)
    result = runner.invoke(cli.app, ["build", str(path), "--log-level", "chatty"])
    assert result.exit_code == 2


def test_inspect_reports_expansion_weights(tmp_path: Path, write_entries) -> None:
    path = write_entries(tmp_path / "entries.json", _ENTRIES)
    result = runner.invoke(cli.app, ["inspect", str(path), "U+0064"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["rune"] == "U+0064"
    assert payload["tag"] == "expansion"
    assert payload["expansion"] == [[201, 32, 2, 201], [202, 32, 2, 202]]


def test_inspect_reports_contraction_starter(tmp_path: Path, write_entries) -> None:
    path = write_entries(tmp_path / "entries.json", _ENTRIES)
    result = runner.invoke(cli.app, ["inspect", str(path), "a"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["tag"] == "contraction"
    assert payload["fields"][:2] == [0, 1]


def test_inspect_rejects_bad_rune(tmp_path: Path, write_entries) -> None:
    path = write_entries(tmp_path / "entries.json", _ENTRIES)
    result = runner.invoke(cli.app, ["inspect", str(path), "zzz"])
    assert result.exit_code == 2
