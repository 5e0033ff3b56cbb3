"""Pydantic v2 models shared by the validator, the stages and the orchestrator.

All of these live only for the duration of one run; nothing is persisted
apart from the files the stages write into the generated project.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from frontkit.config import Template


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class PipelineState(str, Enum):
    """Orchestrator states, in the order a successful run visits them."""
    IDLE = "idle"
    VALIDATING = "validating"
    SCAFFOLDING = "scaffolding"
    INSTALLING_TESTS = "installing_tests"
    INSTALLING_QUALITY = "installing_quality"
    GENERATING_DOCS = "generating_docs"
    INITIALIZING_REPO = "initializing_repo"
    DONE = "done"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (PipelineState.DONE, PipelineState.FAILED)


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class ProjectRequest(BaseModel):
    """A validated scaffolding request. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project name, also the directory name")
    template: Template = Field(..., description="Template from the allow-list")
    parent_dir: Path = Field(
        default=Path("."), description="Directory the project is created in"
    )

    @property
    def project_dir(self) -> Path:
        return self.parent_dir / self.name


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

class ExecutionReport(BaseModel):
    """What happened during one run, built up stage by stage."""

    project_name: str = Field(default="")
    template: Optional[Template] = Field(default=None)
    stages_run: list[str] = Field(default_factory=list)
    elapsed_seconds: int = Field(default=0, ge=0)
    outcome: Optional[Outcome] = Field(default=None)
    failed_stage: Optional[str] = Field(default=None)
    reason: str = Field(default="")
    error_kind: Optional[str] = Field(default=None)
    cleaned_up: bool = Field(default=False)

    @property
    def success(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    def mark_failed(self, stage: str, kind: str, reason: str) -> None:
        self.outcome = Outcome.FAILED
        self.failed_stage = stage
        self.error_kind = kind
        self.reason = reason
