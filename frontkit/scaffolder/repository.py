"""Git repository initialisation for the generated project.

Initialises the repository only when ``.git`` is missing, appends the fixed
ignore block to ``.gitignore`` and records everything in a single commit.

The ignore block is appended on every run without looking at what the file
already holds, so running this twice against the same project duplicates the
block.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from frontkit.errors import CommitFailed, VcsInitFailed
from frontkit.scaffolder.templates import TemplateRenderer
from frontkit.toolchain import Toolchain
from frontkit.utils import append_file, log


class RepositoryInitializer:
    """Runs ``git init`` / ``git add .`` / ``git commit`` in the project."""

    def __init__(self, toolchain: Toolchain, renderer: TemplateRenderer) -> None:
        self.toolchain = toolchain
        self.renderer = renderer

    @property
    def ignore_block(self) -> str:
        return self.renderer.render("gitignore.j2")

    @property
    def commit_message(self) -> str:
        return self.renderer.render("commit_message.j2").strip()

    async def initialize(self, project_dir: Path) -> None:
        log("INFO", "Setting up git repository...")

        if not (project_dir / ".git").is_dir():
            code, stderr = await self.toolchain.git(project_dir, "init")
            if code != 0:
                raise VcsInitFailed(
                    "Failed to initialize git repository",
                    exit_code=code, command="git init", stderr=stderr,
                )

        await asyncio.to_thread(append_file, project_dir / ".gitignore", self.ignore_block)

        code, stderr = await self.toolchain.git(project_dir, "add", ".")
        if code != 0:
            raise CommitFailed(
                "Failed to stage files", exit_code=code, command="git add .", stderr=stderr
            )

        code, stderr = await self.toolchain.git(project_dir, "commit", "-m", self.commit_message)
        if code != 0:
            raise CommitFailed(
                "Failed to create initial commit",
                exit_code=code, command="git commit", stderr=stderr,
            )

        log("INFO", "Git repository setup completed")
