"""Tests for the command-line front end."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from node_packagers import (
    DependencyNode,
    DependencyQueryResult,
    PackagerOptions,
    PnpmPackager,
    SpawnError,
)
from node_packagers.cli import create_parser, main


@pytest.fixture
def fake_packager() -> MagicMock:
    packager = MagicMock(spec=PnpmPackager)
    packager.get_prod_dependencies = AsyncMock(
        return_value=DependencyQueryResult(
            dependencies={
                "mkdirp": DependencyNode(
                    version="0.5.1",
                    dependencies={"minimist": DependencyNode(version="0.0.8")},
                )
            }
        )
    )
    packager.install = AsyncMock()
    packager.prune = AsyncMock()
    packager.run_scripts = AsyncMock()
    return packager


@pytest.fixture
def use_fake(fake_packager: MagicMock):
    with patch("node_packagers.cli.get_packager", return_value=fake_packager) as factory:
        yield factory


class TestParser:
    def test_requires_command(self) -> None:
        with pytest.raises(SystemExit):
            create_parser().parse_args([])

    def test_defaults_to_pnpm(self) -> None:
        args = create_parser().parse_args(["deps"])
        assert args.packager == "pnpm"
        assert args.cwd == "."
        assert args.depth is None

    def test_rejects_unknown_packager(self) -> None:
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--packager", "yarn", "deps"])


class TestDepsCommand:
    def test_prints_tree(
        self, use_fake: MagicMock, fake_packager: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["deps", "--cwd", "svc", "--depth", "2"]) == 0

        fake_packager.get_prod_dependencies.assert_awaited_once_with("svc", 2)
        out = capsys.readouterr().out
        assert "mkdirp@0.5.1" in out
        assert "  minimist@0.0.8" in out

    def test_prints_json(self, use_fake: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["deps", "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["problems"] == []
        assert data["dependencies"]["mkdirp"]["dependencies"]["minimist"]["version"] == "0.0.8"

    def test_reports_spawn_errors(
        self, use_fake: MagicMock, fake_packager: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        fake_packager.get_prod_dependencies.side_effect = SpawnError(
            "pnpm list exited with code 1", stderr="ERR_PNPM_NO_IMPORTER\n"
        )

        assert main(["deps"]) == 1

        err = capsys.readouterr().err
        assert "exited with code 1" in err
        assert "ERR_PNPM_NO_IMPORTER" in err


class TestInstallCommands:
    def test_install_with_flag(self, use_fake: MagicMock, fake_packager: MagicMock) -> None:
        assert main(["install", "--cwd", "build", "--ignore-scripts"]) == 0

        fake_packager.install.assert_awaited_once_with(
            "build", PackagerOptions(ignore_scripts=True)
        )

    def test_prune_uses_config_file(
        self, use_fake: MagicMock, fake_packager: MagicMock, tmp_path: Path
    ) -> None:
        config = tmp_path / "packager.yaml"
        config.write_text("packagerOptions:\n  ignoreScripts: true\n  flatTree: true\n")

        assert main(["prune", "--config", str(config)]) == 0

        fake_packager.prune.assert_awaited_once_with(
            ".", PackagerOptions(ignore_scripts=True, flat_tree=True)
        )
        fake_packager.install.assert_not_awaited()

    def test_bad_config_fails(self, use_fake: MagicMock, tmp_path: Path) -> None:
        assert main(["install", "--config", str(tmp_path / "missing.yaml")]) == 1


class TestRunCommand:
    def test_runs_scripts_in_order(self, use_fake: MagicMock, fake_packager: MagicMock) -> None:
        assert main(["run", "--cwd", "build", "build", "test"]) == 0

        fake_packager.run_scripts.assert_awaited_once_with("build", ["build", "test"])


class TestRebaseLockfileCommand:
    def test_writes_to_stdout(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        lockfile = tmp_path / "shrinkwrap.yaml"
        lockfile.write_text("pkg@file:../lib:\n  version 1.0.0\n")

        assert main(["rebase-lockfile", "--root", "../project", str(lockfile)]) == 0

        assert capsys.readouterr().out == "pkg@file:../project/../lib:\n  version 1.0.0\n"

    def test_writes_to_output_file(self, tmp_path: Path) -> None:
        lockfile = tmp_path / "shrinkwrap.yaml"
        lockfile.write_text("pkg@file:../lib:\n")
        output = tmp_path / "rebased.yaml"

        assert (
            main(["rebase-lockfile", "--root", "up", str(lockfile), "--output", str(output)])
            == 0
        )

        assert output.read_text() == "pkg@file:up/../lib:\n"
        assert lockfile.read_text() == "pkg@file:../lib:\n"

    def test_missing_lockfile_fails(self, tmp_path: Path) -> None:
        assert main(["rebase-lockfile", "--root", "up", str(tmp_path / "nope.yaml")]) == 1
