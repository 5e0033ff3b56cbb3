"""Testing infrastructure: test dependencies, Jest config and example tests."""

from __future__ import annotations

from pathlib import Path

from frontkit.errors import DependencyInstallFailed
from frontkit.scaffolder.templates import TemplateRenderer
from frontkit.toolchain import Toolchain
from frontkit.utils import log

TEST_DEPENDENCIES: tuple[str, ...] = (
    "@testing-library/react",
    "@testing-library/jest-dom",
    "@testing-library/user-event",
    "jest-environment-jsdom",
    "@types/jest",
)

COVERAGE_THRESHOLD = 80

# template -> path inside the project
TEST_FILES: dict[str, str] = {
    "jest.config.js.j2": "jest.config.js",
    "tests/test-utils.tsx.j2": "src/__tests__/utils/test-utils.tsx",
    "tests/App.test.tsx.j2": "src/__tests__/App.test.tsx",
}


class TestingInstaller:
    """Installs test dependencies and writes the fixed test scaffolding."""

    __test__ = False  # not a pytest class

    def __init__(self, toolchain: Toolchain, renderer: TemplateRenderer) -> None:
        self.toolchain = toolchain
        self.renderer = renderer

    async def install(self, project_dir: Path) -> list[Path]:
        log("INFO", "Setting up testing infrastructure...")

        code, stderr = await self.toolchain.install_dev(project_dir, TEST_DEPENDENCIES)
        if code != 0:
            raise DependencyInstallFailed(
                "Failed to install testing dependencies",
                exit_code=code,
                command="npm install --save-dev " + " ".join(TEST_DEPENDENCIES),
                stderr=stderr,
            )

        written = await self.write_files(project_dir)
        log("INFO", "Testing infrastructure setup completed")
        return written

    async def write_files(self, project_dir: Path) -> list[Path]:
        """Overwrite the test config and example tests."""
        context = {"coverage_threshold": COVERAGE_THRESHOLD}
        return [
            await self.renderer.render_to_file(template, project_dir / target, context)
            for template, target in TEST_FILES.items()
        ]
