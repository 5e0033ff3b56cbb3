"""Base project generation.

Delegates the initial file tree to the external generator registered for the
request's template in :data:`frontkit.toolchain.GENERATOR_COMMANDS`.
"""

from __future__ import annotations

from pathlib import Path

from frontkit.errors import GenerationFailed
from frontkit.models import ProjectRequest
from frontkit.toolchain import Toolchain, generator_command
from frontkit.utils import log


class ScaffoldGenerator:
    """Creates ``<parent_dir>/<name>`` with the external generator.

    A failed generator is not rolled back: whatever it managed to write stays
    on disk.
    """

    def __init__(self, toolchain: Toolchain) -> None:
        self.toolchain = toolchain

    async def generate(self, request: ProjectRequest) -> Path:
        log("INFO", "Creating base project structure...")
        code, stderr = await self.toolchain.generate(
            request.name, request.template, request.parent_dir
        )
        if code != 0:
            raise GenerationFailed(
                f"Failed to create {request.template.value} project",
                exit_code=code,
                command=" ".join(generator_command(request.name, request.template)),
                stderr=stderr,
            )
        log("INFO", "Base project structure created successfully")
        return request.project_dir
