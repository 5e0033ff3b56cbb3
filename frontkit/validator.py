"""Pre-flight validation of the environment and the scaffolding request.

Checks run in a fixed order -- tool existence, tool version, name shape,
name collision, template membership -- and the first failure raises.  No
check writes to the filesystem.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from frontkit.config import Config, Template
from frontkit.errors import (
    InvalidName,
    MissingTool,
    UnsupportedTemplate,
    UnsupportedToolVersion,
)
from frontkit.models import ProjectRequest
from frontkit.toolchain import Toolchain
from frontkit.utils import log

PROJECT_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*[a-z0-9]$")

_VERSION_RE = re.compile(r"v?(\d+)(?:\.\d+)*")


def check_required_tools(tools: list[str], toolchain: Toolchain) -> None:
    """Raise ``MissingTool`` listing every tool not found on ``PATH``."""
    missing = [tool for tool in tools if not toolchain.which(tool)]
    if missing:
        raise MissingTool(missing)


def parse_major_version(output: str) -> Optional[int]:
    """Extract the major version from ``node --version`` style output.

    Examples::

        parse_major_version("v20.11.1") -> 20
        parse_major_version("18.0.0")   -> 18
        parse_major_version("garbage")  -> None
    """
    match = _VERSION_RE.search(output.strip())
    if match is None:
        return None
    return int(match.group(1))


async def check_node_version(toolchain: Toolchain, min_major: int) -> str:
    """Return the installed node version, or raise ``UnsupportedToolVersion``."""
    code, output = await toolchain.version("node")
    found = output.strip() or "unknown"
    major = parse_major_version(output) if code == 0 else None
    if major is None or major < min_major:
        raise UnsupportedToolVersion("node", found, f"{min_major}+")
    return found


def validate_project_name(name: str, parent_dir: Path) -> str:
    """Check the npm naming rules and that ``parent_dir / name`` is free."""
    if not name:
        raise InvalidName("Project name is required. Usage: frontkit <project-name> [template]")

    if not PROJECT_NAME_PATTERN.fullmatch(name):
        raise InvalidName(
            f"Invalid project name '{name}'. Use lowercase letters, numbers, and hyphens only."
        )

    if (parent_dir / name).exists():
        raise InvalidName(
            f"Directory '{name}' already exists. Choose a different name.",
            collision=True,
        )

    return name


def validate_template(raw: Optional[str], default: Template) -> Template:
    """Map *raw* to a ``Template``; blank means *default*, anything else must match exactly."""
    value = raw or ""
    if not value.strip():
        return default
    try:
        return Template(value)
    except ValueError:
        raise UnsupportedTemplate(value, Template.values()) from None


async def validate_request(
    raw_name: Optional[str],
    raw_template: Optional[str],
    *,
    config: Config,
    toolchain: Toolchain,
) -> ProjectRequest:
    """Run every pre-flight check and build the immutable request."""
    log("INFO", "Validating system dependencies...")
    check_required_tools(config.required_tools, toolchain)
    if "node" in config.required_tools:
        await check_node_version(toolchain, config.min_node_major)
    log("INFO", "All dependencies validated successfully")

    name = validate_project_name(raw_name or "", config.output_dir)
    log("INFO", f"Project name '{name}' is valid")

    template = validate_template(raw_template, config.default_template)
    log("INFO", f"Using template: {template.value}")

    return ProjectRequest(name=name, template=template, parent_dir=config.output_dir)
