"""Code quality tooling: Prettier, the ESLint integration and npm scripts."""

from __future__ import annotations

import asyncio
from pathlib import Path

from frontkit.errors import DependencyInstallFailed, WriteFailed
from frontkit.scaffolder.templates import TemplateRenderer
from frontkit.toolchain import Toolchain
from frontkit.utils import log

QUALITY_DEPENDENCIES: tuple[str, ...] = (
    "prettier",
    "eslint-config-prettier",
    "eslint-plugin-prettier",
)

QUALITY_FILES: dict[str, str] = {
    "prettierrc.json.j2": ".prettierrc.json",
    "eslintrc.json.j2": ".eslintrc.json",
}

MANIFEST_SCRIPTS: dict[str, str] = {
    "lint": "eslint src --ext .ts,.tsx --fix",
    "format": "prettier --write src/**/*.{ts,tsx,js,jsx,json,css,md}",
    "test:coverage": "jest --coverage",
    "test:watch": "jest --watch",
}


class QualityInstaller:
    """Installs the formatter/linter integration and registers the scripts."""

    def __init__(self, toolchain: Toolchain, renderer: TemplateRenderer) -> None:
        self.toolchain = toolchain
        self.renderer = renderer

    async def install(self, project_dir: Path) -> list[Path]:
        log("INFO", "Setting up code quality tools...")

        code, stderr = await self.toolchain.install_dev(project_dir, QUALITY_DEPENDENCIES)
        if code != 0:
            raise DependencyInstallFailed(
                "Failed to install code quality tools",
                exit_code=code,
                command="npm install --save-dev " + " ".join(QUALITY_DEPENDENCIES),
                stderr=stderr,
            )

        written = [
            await self.renderer.render_to_file(template, project_dir / target)
            for template, target in QUALITY_FILES.items()
        ]

        manifest = project_dir / "package.json"
        try:
            await asyncio.to_thread(self.toolchain.set_scripts, project_dir, MANIFEST_SCRIPTS)
        except (OSError, ValueError) as exc:
            raise WriteFailed(manifest, exc) from exc
        written.append(manifest)

        log("INFO", "Code quality tools configured successfully")
        return written
