"""Unit tests for flow-alfred CLI commands.

Search commands are exercised end to end against temp directory trees and
their Script Filter JSON is parsed back; workflow commands run against a
temp workflows directory.
"""

import json
import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from flow_alfred import workflows
from flow_cli import __version__
from flow_cli.main import app

runner = CliRunner()


def titles(stdout: str) -> list[str]:
    return [item["title"] for item in json.loads(stdout)["items"]]


class TestApp:
    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"flow-alfred version {__version__}" in result.output

    def test_invalid_config_exits(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("code: [unclosed\n")

        result = runner.invoke(app, ["--config", str(bad), "code"])

        assert result.exit_code == 1

    def test_unknown_level_in_default_config_does_not_exit(self, isolated_env, code_root):
        default = isolated_env / ".config" / "flow-alfred" / "config.yaml"
        default.parent.mkdir(parents=True)
        default.write_text(yaml.dump({"logging": {"level": "chatty"}}))

        result = runner.invoke(app, ["code", "--root", str(code_root)])

        assert result.exit_code == 0
        assert "flow" in titles(result.stdout)


class TestCodeCommand:
    """Tests for `flow-alfred code`."""

    def test_lists_all_repositories_sorted(self, code_root):
        result = runner.invoke(app, ["code", "--root", str(code_root)])

        assert result.exit_code == 0
        assert titles(result.stdout) == sorted(
            [
                "flow",
                str(Path("tools") / "alfred"),
                str(Path("tools") / "cli"),
                str(Path("work") / "a" / "b" / "deep"),
            ]
        )

    def test_query_filters_and_ranks(self, code_root):
        result = runner.invoke(app, ["code", "fl", "--root", str(code_root)])

        assert result.exit_code == 0
        assert titles(result.stdout)[0] == "flow"
        assert str(Path("tools") / "cli") not in titles(result.stdout)

    def test_items_are_files_with_full_paths(self, code_root):
        result = runner.invoke(app, ["code", "flow", "--root", str(code_root)])

        item = json.loads(result.stdout)["items"][0]
        assert item["arg"] == str(code_root / "flow")
        assert item["type"] == "file"
        assert item["text"]["copy"] == f"{code_root}/flow"

    def test_missing_root_message(self, tmp_path):
        missing = tmp_path / "nope"

        result = runner.invoke(app, ["code", "--root", str(missing)])

        assert result.exit_code == 0
        item = json.loads(result.stdout)["items"][0]
        assert item["title"] == f"No directory found at {missing}"
        assert item["valid"] is False

    def test_no_repositories_message(self, tmp_path):
        result = runner.invoke(app, ["code", "--root", str(tmp_path)])

        assert titles(result.stdout) == ["No git repositories found"]

    def test_no_matches_is_empty(self, code_root):
        result = runner.invoke(app, ["code", "qqq", "--root", str(code_root)])

        assert json.loads(result.stdout) == {"items": []}

    def test_root_from_alfred_variable(self, code_root, monkeypatch):
        monkeypatch.setenv("code_root", str(code_root))

        result = runner.invoke(app, ["code", "deep"])

        assert titles(result.stdout) == [str(Path("work") / "a" / "b" / "deep")]

    def test_home_relative_root(self, isolated_env, make_repo):
        make_repo(isolated_env / "code" / "flow")

        result = runner.invoke(app, ["code"])

        item = json.loads(result.stdout)["items"][0]
        assert item["title"] == "flow"
        assert item["text"]["copy"] == "~/code/flow"


class TestReposCommand:
    """Tests for `flow-alfred repos`."""

    def test_lists_owner_repo(self, repos_root):
        result = runner.invoke(app, ["repos", "--root", str(repos_root)])

        assert result.exit_code == 0
        assert titles(result.stdout) == ["acme/gadgets", "acme/widgets", "zeta/alpha"]

    def test_query(self, repos_root):
        result = runner.invoke(app, ["repos", "aw", "--root", str(repos_root)])

        assert titles(result.stdout) == ["acme/widgets"]

    def test_items_are_not_file_type(self, repos_root):
        result = runner.invoke(app, ["repos", "--root", str(repos_root)])

        assert all("type" not in item for item in json.loads(result.stdout)["items"])

    def test_root_from_config_file(self, repos_root, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(yaml.dump({"repos": {"root": str(repos_root)}}))

        result = runner.invoke(app, ["--config", str(config), "repos", "zeta"])

        assert titles(result.stdout) == ["zeta/alpha"]

    def test_missing_root_mentions_setting(self, tmp_path):
        result = runner.invoke(app, ["repos", "--root", str(tmp_path / "nope")])

        item = json.loads(result.stdout)["items"][0]
        assert item["subtitle"] == "Check your repos_root setting"


@pytest.fixture
def alfred_workflows(tmp_path, monkeypatch) -> Path:
    path = tmp_path / "workflows"
    path.mkdir()
    monkeypatch.setattr(workflows, "workflows_dir", lambda: path)
    return path


@pytest.fixture
def workflow_source(tmp_path) -> Path:
    source = tmp_path / "Flow.alfredworkflow"
    source.mkdir()
    (source / "info.plist").write_text("<plist/>")
    return source


class TestWorkflowCommands:
    """Tests for link/unlink/reload/pack/install."""

    def test_link_and_unlink(self, alfred_workflows, workflow_source):
        result = runner.invoke(
            app, ["link", str(workflow_source), "--bundle-id", "me.flow"]
        )

        assert result.exit_code == 0
        assert (alfred_workflows / "me.flow").is_symlink()

        result = runner.invoke(app, ["unlink", "--bundle-id", "me.flow"])

        assert result.exit_code == 0
        assert not (alfred_workflows / "me.flow").is_symlink()

    def test_link_uses_default_bundle_id(self, alfred_workflows, workflow_source):
        result = runner.invoke(app, ["link", str(workflow_source)])

        assert result.exit_code == 0
        assert (alfred_workflows / "nikiv.dev.flow").is_symlink()

    def test_link_missing_directory(self, alfred_workflows, tmp_path):
        result = runner.invoke(app, ["link", str(tmp_path / "missing")])

        assert result.exit_code == 1

    def test_link_conflict(self, alfred_workflows, workflow_source):
        (alfred_workflows / "nikiv.dev.flow").mkdir()

        result = runner.invoke(app, ["link", str(workflow_source)])

        assert result.exit_code == 1
        assert "Failed to link" in result.output

    def test_pack(self, workflow_source, tmp_path):
        output = tmp_path / "out.alfredworkflow"

        result = runner.invoke(app, ["pack", str(workflow_source), "-o", str(output)])

        assert result.exit_code == 0
        with zipfile.ZipFile(output) as archive:
            assert archive.namelist() == ["info.plist"]

    def test_pack_missing_directory(self, tmp_path):
        result = runner.invoke(app, ["pack", str(tmp_path / "missing")])

        assert result.exit_code == 1

    def test_install(self, tmp_path):
        package = tmp_path / "Flow.alfredworkflow"
        package.write_bytes(b"PK")

        with patch("subprocess.run") as run:
            result = runner.invoke(app, ["install", str(package)])

        assert result.exit_code == 0
        assert run.call_args[0][0] == ["open", str(package)]

    def test_install_missing_file(self, tmp_path):
        result = runner.invoke(app, ["install", str(tmp_path / "missing.alfredworkflow")])

        assert result.exit_code == 1

    def test_reload(self):
        with patch("subprocess.run") as run:
            result = runner.invoke(app, ["reload", "--bundle-id", "me.flow"])

        assert result.exit_code == 0
        assert 'reload workflow "me.flow"' in run.call_args[0][0][2]
