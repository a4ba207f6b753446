import json
import subprocess
import sys
from pathlib import Path

import pytest

from pluginhealth.cli import main

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "update-center.sample.json"


def test_cli_help():
    cmd = [sys.executable, "-m", "pluginhealth.cli", "--help"]
    result = subprocess.run(cmd, capture_output=True, text=True)
    assert result.returncode == 0


def test_cli_imports():
    import pluginhealth.cli  # noqa: F401


def test_cli_ingest_then_list(tmp_path: Path, capsys):
    db_url = f"sqlite:///{tmp_path / 'plugins.db'}"

    assert main(["ingest", "--source", str(FIXTURE), "--database-url", db_url]) == 0
    assert "Stored 3 plugins" in capsys.readouterr().out

    assert main(["plugins", "--database-url", db_url, "--json"]) == 0
    records = json.loads(capsys.readouterr().out)
    assert sorted(r["name"] for r in records) == [
        "build-pipeline-plugin",
        "cucumber-reports",
        "workflow-cps",
    ]


def test_cli_ingest_uses_environment(tmp_path: Path, monkeypatch, capsys):
    db_url = f"sqlite:///{tmp_path / 'plugins.db'}"
    monkeypatch.setenv("PLUGINHEALTH_UPDATE_CENTER_URL", str(FIXTURE))
    monkeypatch.setenv("PLUGINHEALTH_DATABASE_URL", db_url)

    assert main(["ingest"]) == 0
    assert "Stored 3 plugins" in capsys.readouterr().out


def test_cli_ingest_malformed_source_exits_nonzero(tmp_path: Path):
    bad = tmp_path / "bad.json"
    bad.write_text("not json", encoding="utf-8")
    db_url = f"sqlite:///{tmp_path / 'plugins.db'}"

    assert main(["ingest", "--source", str(bad), "--database-url", db_url]) == 1


def test_cli_ingest_blank_source_is_config_error(tmp_path: Path):
    db_url = f"sqlite:///{tmp_path / 'plugins.db'}"
    assert main(["ingest", "--source", " ", "--database-url", db_url]) == 1


def test_cli_workflows_json(tmp_path: Path, capsys):
    (tmp_path / "cd.yml").write_text(
        "jobs:\n  maven-cd:\n    uses: jenkins-infra/github-reusable-workflows/.github/workflows/maven-cd.yml@v1\n",
        encoding="utf-8",
    )

    assert main(["workflows", "--dir", str(tmp_path), "--json"]) == 0
    assert json.loads(capsys.readouterr().out) == [
        "jenkins-infra/github-reusable-workflows/.github/workflows/maven-cd.yml@v1"
    ]


def test_cli_ingest_blank_env_source_is_config_error(tmp_path: Path, monkeypatch):
    fetched = []
    monkeypatch.setenv("PLUGINHEALTH_UPDATE_CENTER_URL", "   ")
    monkeypatch.setattr(
        "pluginhealth.service.fetch_update_center",
        lambda source, timeout_s=30.0: fetched.append(source),
    )
    db_url = f"sqlite:///{tmp_path / 'plugins.db'}"

    assert main(["ingest", "--database-url", db_url]) == 1
    assert fetched == []


def test_cli_ingest_sample_needs_no_source(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.setattr(
        "pluginhealth.service.fetch_update_center",
        lambda source, timeout_s=30.0: pytest.fail(f"unexpected fetch of {source}"),
    )
    db_url = f"sqlite:///{tmp_path / 'plugins.db'}"

    assert main(["ingest", "--sample", "--database-url", db_url]) == 0
    assert "Stored 2 plugins from the offline sample" in capsys.readouterr().out

    assert main(["plugins", "--database-url", db_url, "--json"]) == 0
    records = json.loads(capsys.readouterr().out)
    assert sorted(r["name"] for r in records) == ["cucumber-reports", "workflow-cps"]
