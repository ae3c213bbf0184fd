from __future__ import annotations

import json

from typer.testing import CliRunner

from sculpture_guide import cli
from tests.conftest import DATA_PATH


def test_serve_overrides(monkeypatch):
    captured: dict[str, object] = {}

    def fake_run(settings):
        captured["settings"] = settings

    monkeypatch.setattr(cli, "app_run", fake_run)
    runner = CliRunner()
    result = runner.invoke(
        cli.app,
        [
            "serve",
            "--host",
            "127.0.0.1",
            "--port",
            "9000",
            "--backend",
            "azure",
            "--data-path",
            str(DATA_PATH),
            "--verbose",
        ],
    )
    assert result.exit_code == 0, result.output
    settings = captured["settings"]
    assert settings.host == "127.0.0.1"
    assert settings.port == 9000
    assert settings.backend == "azure"
    assert settings.sculpture_data_path == DATA_PATH
    assert "9000" in result.stdout
    assert "openai_api_key" not in result.stdout


def test_lookup_prints_record():
    runner = CliRunner()
    result = runner.invoke(cli.app, ["lookup", "charles the fourth", "--data-path", str(DATA_PATH)])
    assert result.exit_code == 0
    record = json.loads(result.stdout)
    assert record["year"] == "between 1375 - 1378"


def test_lookup_unknown_exits_nonzero():
    runner = CliRunner()
    result = runner.invoke(cli.app, ["lookup", "Unknown Artifact", "--data-path", str(DATA_PATH)])
    assert result.exit_code == 1


def test_search_prints_matches():
    runner = CliRunner()
    result = runner.invoke(
        cli.app, ["search", "--year", "1228", "--data-path", str(DATA_PATH)]
    )
    assert result.exit_code == 0
    assert [s["name"] for s in json.loads(result.stdout)] == [
        "Votive relief from the Basilica of St. George"
    ]


def test_missing_data_file_exits(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli.app, ["search", "--name", "x", "--data-path", str(tmp_path / "nope.json")])
    assert result.exit_code == 2
