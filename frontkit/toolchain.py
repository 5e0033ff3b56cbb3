"""External tool access for the pipeline.

Every stage reaches ``npx``, ``npm`` and ``git`` through a ``Toolchain`` so
the pipeline can run against a fake in tests.  ``NpmToolchain`` is the real
implementation and shells out via :func:`frontkit.utils.run_command`.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Mapping, Optional, Protocol, Sequence

from frontkit.config import Template
from frontkit.utils import load_json, log, run_command, save_json


# ---------------------------------------------------------------------------
# Generator table
# ---------------------------------------------------------------------------

# Template -> argv with ``{name}`` standing in for the project name.
GENERATOR_COMMANDS: dict[Template, tuple[str, ...]] = {
    Template.REACT_TYPESCRIPT: (
        "npx", "create-react-app", "{name}", "--template", "typescript",
    ),
    Template.REACT_JAVASCRIPT: (
        "npx", "create-react-app", "{name}", "--template", "javascript",
    ),
    Template.NEXT_TYPESCRIPT: (
        "npx", "create-next-app@latest", "{name}",
        "--typescript", "--tailwind", "--eslint", "--app", "--src-dir",
        "--import-alias", "@/*",
    ),
}


def generator_command(name: str, template: Template) -> list[str]:
    """Return the argv that creates *name* from *template*."""
    return [part.replace("{name}", name) for part in GENERATOR_COMMANDS[template]]


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------

# Every method returning ``tuple[int, str]`` yields ``(exit_code, stderr)``.


class Toolchain(Protocol):
    def which(self, tool: str) -> Optional[str]: ...

    async def version(self, tool: str) -> tuple[int, str]: ...

    async def generate(
        self, name: str, template: Template, cwd: Path
    ) -> tuple[int, str]: ...

    async def install_dev(
        self, project_dir: Path, packages: Sequence[str]
    ) -> tuple[int, str]: ...

    def set_scripts(self, project_dir: Path, scripts: Mapping[str, str]) -> None: ...

    async def run_script(
        self, project_dir: Path, script: str, env: Optional[dict[str, str]] = None
    ) -> tuple[int, str]: ...

    async def git(self, project_dir: Path, *args: str) -> tuple[int, str]: ...


# ---------------------------------------------------------------------------
# Real implementation
# ---------------------------------------------------------------------------


class NpmToolchain:
    """Runs the real ``npx``/``npm``/``git`` executables.

    Args:
        timeout: Per-command timeout in seconds, ``None`` for unbounded.
        stream_output: When ``True`` the long-running installers write to the
            terminal instead of being captured.
    """

    def __init__(self, timeout: Optional[float] = None, stream_output: bool = True) -> None:
        self.timeout = timeout
        self.stream_output = stream_output

    def which(self, tool: str) -> Optional[str]:
        return shutil.which(tool)

    async def version(self, tool: str) -> tuple[int, str]:
        code, stdout, stderr = await run_command([tool, "--version"], timeout=30)
        return code, stdout if code == 0 else stderr

    async def generate(self, name: str, template: Template, cwd: Path) -> tuple[int, str]:
        cmd = generator_command(name, template)
        log("INFO", f"Running: {' '.join(cmd)}")
        return await self._run(cmd, cwd)

    async def install_dev(self, project_dir: Path, packages: Sequence[str]) -> tuple[int, str]:
        return await self._run(["npm", "install", "--save-dev", *packages], project_dir)

    def set_scripts(self, project_dir: Path, scripts: Mapping[str, str]) -> None:
        """Merge *scripts* into ``package.json``; existing keys are overwritten."""
        manifest_path = project_dir / "package.json"
        manifest = load_json(manifest_path)
        merged = dict(manifest.get("scripts") or {})
        merged.update(scripts)
        manifest["scripts"] = merged
        save_json(manifest, manifest_path)

    async def run_script(
        self, project_dir: Path, script: str, env: Optional[dict[str, str]] = None
    ) -> tuple[int, str]:
        cmd = ["npm", "test"] if script == "test" else ["npm", "run", script]
        return await self._run(cmd, project_dir, env=env)

    async def git(self, project_dir: Path, *args: str) -> tuple[int, str]:
        code, _stdout, stderr = await run_command(
            ["git", *args], cwd=project_dir, timeout=self.timeout
        )
        return code, stderr

    async def _run(
        self, cmd: list[str], cwd: Path, env: Optional[dict[str, str]] = None
    ) -> tuple[int, str]:
        code, _stdout, stderr = await run_command(
            cmd,
            cwd=cwd,
            timeout=self.timeout,
            capture=not self.stream_output,
            env=env,
        )
        return code, stderr
