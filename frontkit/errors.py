"""Exception hierarchy for the scaffolding pipeline.

Three families, matching when in a run they can happen:

* ``ValidationError`` -- pre-flight, nothing has been written yet.
* ``ExternalToolError`` -- a delegated process exited non-zero mid-pipeline.
* ``FilesystemError`` -- a write into the generated tree failed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class FrontkitError(Exception):
    """Base class for every error the pipeline reports."""

    @property
    def kind(self) -> str:
        return type(self).__name__


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ValidationError(FrontkitError):
    """Raised before any filesystem mutation when the request is unusable."""


class MissingTool(ValidationError):
    def __init__(self, tools: Sequence[str]) -> None:
        self.tools = list(tools)
        super().__init__(f"Missing required dependencies: {' '.join(self.tools)}")

    @property
    def tool(self) -> str:
        return self.tools[0]


class UnsupportedToolVersion(ValidationError):
    def __init__(self, tool: str, found: str, required: str) -> None:
        self.tool = tool
        self.found = found
        self.required = required
        super().__init__(f"{tool} version {required} required. Current version: {found}")


class InvalidName(ValidationError):
    def __init__(self, reason: str, *, collision: bool = False) -> None:
        self.reason = reason
        self.collision = collision
        super().__init__(reason)


class UnsupportedTemplate(ValidationError):
    def __init__(self, value: str, allowed: Sequence[str]) -> None:
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            f"Unsupported template: {value}. Supported: {' '.join(self.allowed)}"
        )


# ---------------------------------------------------------------------------
# External tools
# ---------------------------------------------------------------------------


class ExternalToolError(FrontkitError):
    """Raised when a delegated command exits with a non-zero code."""

    def __init__(
        self,
        message: str,
        exit_code: int,
        command: str = "",
        stderr: str = "",
    ) -> None:
        self.exit_code = exit_code
        self.command = command
        self.stderr = stderr
        super().__init__(f"{message} (exit {exit_code})")


class GenerationFailed(ExternalToolError):
    pass


class DependencyInstallFailed(ExternalToolError):
    pass


class VcsInitFailed(ExternalToolError):
    pass


class CommitFailed(ExternalToolError):
    pass


# ---------------------------------------------------------------------------
# Filesystem
# ---------------------------------------------------------------------------


class FilesystemError(FrontkitError):
    pass


class WriteFailed(FilesystemError):
    def __init__(self, path: Path, cause: Exception | None = None) -> None:
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to write {self.path}{detail}")
