"""End-to-end tests for the scaffolding pipeline.

These tests drive the CLI entry point and the orchestrator with the fake
npm toolchain but a real ``git`` binary, then inspect the generated
project directory and its repository history.

No network access or Node.js installation is required.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from frontkit.config import Config
from frontkit.pipeline import Pipeline, main
from frontkit.utils import run_command


@pytest.mark.integration
class TestPipelineEndToEnd:
    """Full runs against a real git repository."""

    async def test_demo_app(self, output_dir: Path, make_toolchain, git_identity):
        config = Config(output_dir=output_dir, stream_output=False)
        report = await Pipeline(config, toolchain=make_toolchain(real_git=True)).run(
            "demo-app", "react-typescript"
        )
        assert report.success, report.reason

        project = output_dir / "demo-app"
        jest = (project / "jest.config.js").read_text(encoding="utf-8")
        for key in ("branches", "functions", "lines", "statements"):
            assert f"{key}: 80" in jest

        scripts = json.loads((project / "package.json").read_text(encoding="utf-8"))["scripts"]
        assert "lint" in scripts
        assert "format" in scripts

        readme = (project / "README.md").read_text(encoding="utf-8")
        assert readme.splitlines()[0] == "# demo-app"

        code, count, _ = await run_command(["git", "rev-list", "--count", "HEAD"], cwd=project)
        assert code == 0
        assert count == "1"

        code, status, _ = await run_command(["git", "status", "--porcelain"], cwd=project)
        assert code == 0
        assert status == ""

        code, subject, _ = await run_command(["git", "log", "-1", "--format=%s"], cwd=project)
        assert "Initial commit" in subject

    def test_cli_exit_codes(self, output_dir: Path, make_toolchain, git_identity):
        with patch("frontkit.pipeline.NpmToolchain", return_value=make_toolchain(real_git=True)):
            main(["demo-app", "react-typescript", "-o", str(output_dir), "-q"])
        assert (output_dir / "demo-app" / ".git").is_dir()

        with patch("frontkit.pipeline.NpmToolchain", return_value=make_toolchain(real_git=True)):
            with pytest.raises(SystemExit) as exc_info:
                main(["demo-app", "react-typescript", "-o", str(output_dir), "-q"])
        assert exc_info.value.code == 1

    def test_invalid_name_creates_nothing(self, output_dir: Path, make_toolchain):
        toolchain = make_toolchain()
        with patch("frontkit.pipeline.NpmToolchain", return_value=toolchain):
            with pytest.raises(SystemExit) as exc_info:
                main(["Demo_App", "react-typescript", "-o", str(output_dir)])
        assert exc_info.value.code == 1
        assert list(output_dir.iterdir()) == []
        assert "generate" not in toolchain.operations()

    async def test_commit_failure_with_cleanup(
        self, output_dir: Path, make_toolchain, git_identity
    ):
        config = Config(output_dir=output_dir, stream_output=False, cleanup_on_failure=True)
        toolchain = make_toolchain(real_git=True, fail={"git:commit": 128})
        report = await Pipeline(config, toolchain=toolchain).run("demo-app")

        assert report.failed_stage == "repository"
        assert report.error_kind == "CommitFailed"
        assert report.cleaned_up is True
        assert not (output_dir / "demo-app").exists()
