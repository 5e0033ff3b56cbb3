"""Shared pytest fixtures for the frontkit test suite.

Provides reusable fixtures for:
- A fake ``Toolchain`` that simulates npx/npm/git without running them
- Configs pointing at a temporary output directory
- Mock subprocess helpers
- A throwaway git identity for tests that run real git
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence
from unittest.mock import AsyncMock, MagicMock

import pytest

from frontkit.config import Config, Template
from frontkit.toolchain import NpmToolchain
from frontkit.utils import run_command


# ---------------------------------------------------------------------------
# Fake toolchain
# ---------------------------------------------------------------------------

class FakeToolchain:
    """In-memory stand-in for ``NpmToolchain``.

    ``generate`` writes a minimal CRA-like tree, ``install_dev`` records the
    packages in ``package.json``, and ``git`` simulates init/add/commit.
    Every call is appended to ``calls`` so tests can assert on ordering.
    Set ``fail`` to ``{"<operation>": exit_code}`` to make an operation fail.
    """

    def __init__(
        self,
        tools: Sequence[str] = ("node", "npm", "git"),
        node_version: str = "v20.11.1",
        fail: Optional[dict[str, int]] = None,
        real_git: bool = False,
    ) -> None:
        self.tools = set(tools)
        self.node_version = node_version
        self.fail = dict(fail or {})
        self.real_git = real_git
        self.calls: list[tuple[Any, ...]] = []
        self.commits: list[str] = []

    def _failure(self, operation: str) -> int:
        return self.fail.get(operation, 0)

    def which(self, tool: str) -> Optional[str]:
        self.calls.append(("which", tool))
        return f"/usr/bin/{tool}" if tool in self.tools else None

    async def version(self, tool: str) -> tuple[int, str]:
        self.calls.append(("version", tool))
        code = self._failure("version")
        return (code, self.node_version if code == 0 else "node: broken")

    async def generate(self, name: str, template: Template, cwd: Path) -> tuple[int, str]:
        self.calls.append(("generate", name, template))
        code = self._failure("generate")
        project = Path(cwd) / name
        project.mkdir(parents=True)
        if code:
            return (code, "npm ERR! generator crashed")
        (project / "src").mkdir()
        (project / "src" / "App.tsx").write_text("export default function App() {}\n")
        (project / ".gitignore").write_text("/node_modules\n")
        manifest = {
            "name": name,
            "version": "0.1.0",
            "private": True,
            "scripts": {"start": "react-scripts start", "test": "react-scripts test"},
        }
        (project / "package.json").write_text(json.dumps(manifest, indent=2))
        return (0, "")

    async def install_dev(self, project_dir: Path, packages: Sequence[str]) -> tuple[int, str]:
        self.calls.append(("install_dev", tuple(packages)))
        code = self._failure("install_dev")
        if code:
            return (code, "npm ERR! 404 Not Found")
        manifest_path = Path(project_dir) / "package.json"
        manifest = json.loads(manifest_path.read_text())
        dev = manifest.setdefault("devDependencies", {})
        for package in packages:
            dev[package] = "^1.0.0"
        manifest_path.write_text(json.dumps(manifest, indent=2))
        return (0, "")

    def set_scripts(self, project_dir: Path, scripts: Mapping[str, str]) -> None:
        self.calls.append(("set_scripts", dict(scripts)))
        NpmToolchain().set_scripts(project_dir, scripts)

    async def run_script(
        self, project_dir: Path, script: str, env: Optional[dict[str, str]] = None
    ) -> tuple[int, str]:
        self.calls.append(("run_script", script, env))
        return (self._failure(f"script:{script}"), "")

    async def git(self, project_dir: Path, *args: str) -> tuple[int, str]:
        self.calls.append(("git", *args))
        code = self._failure(f"git:{args[0]}")
        if code:
            return (code, f"fatal: git {args[0]} failed")
        if self.real_git:
            code, _out, err = await run_command(["git", *args], cwd=project_dir)
            return (code, err)
        if args[0] == "init":
            (Path(project_dir) / ".git").mkdir()
        elif args[0] == "commit":
            self.commits.append(args[2])
        return (0, "")

    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_toolchain() -> FakeToolchain:
    return FakeToolchain()


@pytest.fixture
def make_toolchain():
    """Factory for ``FakeToolchain`` instances with custom behaviour."""
    return FakeToolchain


# ---------------------------------------------------------------------------
# Configs and directories
# ---------------------------------------------------------------------------

@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Parent directory projects are generated into."""
    out = tmp_path / "workspace"
    out.mkdir()
    return out


@pytest.fixture
def config(output_dir: Path) -> Config:
    return Config(output_dir=output_dir, stream_output=False)


@pytest.fixture
def scaffolded_project(output_dir: Path) -> Path:
    """A project directory shaped like the generator's output."""
    project = output_dir / "demo-app"
    (project / "src").mkdir(parents=True)
    (project / ".gitignore").write_text("/node_modules\n", encoding="utf-8")
    (project / "package.json").write_text(
        json.dumps({"name": "demo-app", "scripts": {"start": "react-scripts start"}}),
        encoding="utf-8",
    )
    return project


# ---------------------------------------------------------------------------
# Subprocess helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


# ---------------------------------------------------------------------------
# Real git
# ---------------------------------------------------------------------------

@pytest.fixture
def git_identity(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate git from the user's config and give it an author identity."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Frontkit Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@frontkit.local")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Frontkit Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@frontkit.local")
