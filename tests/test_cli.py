"""Tests for the tfc-publisher command-line entry point."""

import json
from unittest.mock import AsyncMock, patch

import pytest
import structlog

from tfc_publisher.cli import main
from tfc_publisher.registry.types import UploadTicket

PROBE = "tfc_publisher.registry.client.list_organizations"


@pytest.fixture(autouse=True)
def cli_env(monkeypatch, tmp_path):
    for name in ("TFC_TOKEN", "GITHUB_SHA", "TFC_REGISTRY_URL", "TFC_REQUEST_TIMEOUT", "DEBUG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    structlog.reset_defaults()


def test_verify_success(monkeypatch, module_dir, capsys):
    monkeypatch.setenv("TFC_TOKEN", "tok")
    monkeypatch.setenv("GITHUB_SHA", "abc")
    with patch(PROBE, AsyncMock(return_value={})):
        code = main(["verify", "--cwd", str(module_dir), "--org-name", "acme"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == {"verified": True, "options": {"orgName": "acme"}}


def test_verify_failure_prints_errors(module_dir, capsys):
    code = main(["verify", "--cwd", str(module_dir)])

    assert code == 1
    payload = json.loads(capsys.readouterr().out)
    assert [e["code"] for e in payload["errors"]] == ["ENOTFCTOKEN", "ENOCOMMITSHA"]


def test_publish_skipped_with_no_publish(module_dir, capsys):
    code = main(["publish", "--cwd", str(module_dir), "--no-publish"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "skipped"
    assert payload["version"] == "1.2.0"


def test_publish_runs_pipeline(monkeypatch, module_dir, capsys):
    monkeypatch.setenv("TFC_TOKEN", "tok")
    monkeypatch.setenv("GITHUB_SHA", "abc")

    async def fake_version(token, version, **kwargs):
        return UploadTicket(version=version, url="https://archivist.example.com/upload")

    with patch(PROBE, AsyncMock(return_value={})), \
         patch("tfc_publisher.package.archiver.compress_module", AsyncMock(side_effect=lambda s, a, **kw: a)), \
         patch.multiple(
             "tfc_publisher.registry.client",
             list_modules=AsyncMock(return_value=set()),
             create_module=AsyncMock(return_value={}),
             create_module_version=AsyncMock(side_effect=fake_version),
             upload_module=AsyncMock(),
             get_module=AsyncMock(return_value=None),
         ):
        code = main(["publish", "--cwd", str(module_dir), "--tarball-dir", "dist"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "published"
    assert payload["module_created"] is True
    assert payload["identity"]["namespace"] == "acme"
    assert payload["archive_path"].endswith("dist/vpc-module-1.2.0.tgz")
    assert payload["confirmation"] is None


def test_requires_subcommand():
    with pytest.raises(SystemExit):
        main([])
