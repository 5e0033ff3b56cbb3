"""frontkit configuration.

Centralised, typed configuration for the scaffolding pipeline. Settings use
Pydantic v2 models so they are validated at construction time and can be
built from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field


class Template(str, Enum):
    """The closed allow-list of project templates."""

    REACT_TYPESCRIPT = "react-typescript"
    REACT_JAVASCRIPT = "react-javascript"
    NEXT_TYPESCRIPT = "next-typescript"

    @classmethod
    def values(cls) -> list[str]:
        return [t.value for t in cls]


DEFAULT_TEMPLATE = Template.REACT_TYPESCRIPT

REQUIRED_TOOLS: tuple[str, ...] = ("node", "npm", "git")

MIN_NODE_MAJOR = 16


class Config(BaseModel):
    """Global frontkit configuration.

    Created once by the CLI entry point (or by tests) and passed through the
    validator, the stages and the orchestrator.
    """

    output_dir: Path = Field(
        default=Path("."), description="Parent directory the project is created in"
    )
    default_template: Template = Field(default=DEFAULT_TEMPLATE)
    required_tools: list[str] = Field(default_factory=lambda: list(REQUIRED_TOOLS))
    min_node_major: int = Field(default=MIN_NODE_MAJOR, ge=1)
    command_timeout: Optional[int] = Field(
        default=None,
        ge=1,
        description="Per-command timeout in seconds; None waits indefinitely",
    )
    stream_output: bool = Field(
        default=True, description="Let child processes write straight to the terminal"
    )
    cleanup_on_failure: bool = Field(
        default=False,
        description="Remove the partially generated project when a stage fails",
    )
    health_check_prefix: str = Field(default="health-check")

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            FRONTKIT_OUTPUT_DIR, FRONTKIT_DEFAULT_TEMPLATE,
            FRONTKIT_MIN_NODE_MAJOR, FRONTKIT_COMMAND_TIMEOUT,
            FRONTKIT_QUIET, FRONTKIT_CLEANUP_ON_FAILURE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("FRONTKIT_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["FRONTKIT_OUTPUT_DIR"])
        if os.environ.get("FRONTKIT_DEFAULT_TEMPLATE"):
            kwargs["default_template"] = os.environ["FRONTKIT_DEFAULT_TEMPLATE"]
        if os.environ.get("FRONTKIT_MIN_NODE_MAJOR"):
            kwargs["min_node_major"] = _env_int("FRONTKIT_MIN_NODE_MAJOR")
        if os.environ.get("FRONTKIT_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = _env_int("FRONTKIT_COMMAND_TIMEOUT")
        if _env_flag("FRONTKIT_QUIET"):
            kwargs["stream_output"] = False
        if _env_flag("FRONTKIT_CLEANUP_ON_FAILURE"):
            kwargs["cleanup_on_failure"] = True
        return cls(**kwargs)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str) -> int:
    raw = os.environ[name]
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
