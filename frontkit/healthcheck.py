"""Toolkit health check.

Scaffolds a disposable ``health-check-<timestamp>`` project with the full
pipeline, then runs the generated project's own test, lint and build
scripts.  Any non-zero exit fails the check.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from typing import Optional

from frontkit.config import Config
from frontkit.pipeline import Pipeline, add_common_arguments, load_config
from frontkit.toolchain import Toolchain
from frontkit.utils import console, log, print_error, print_success

# (script, extra env). CI=true stops the CRA test runner from entering watch mode.
PROJECT_CHECKS: tuple[tuple[str, dict[str, str]], ...] = (
    ("test", {"CI": "true"}),
    ("lint", {}),
    ("build", {}),
)


class HealthCheck:
    """Runs the scaffolder end-to-end and verifies the result works."""

    def __init__(self, config: Config, toolchain: Optional[Toolchain] = None) -> None:
        self.config = config
        self.pipeline = Pipeline(config, toolchain=toolchain)
        self.toolchain = self.pipeline.toolchain

    def project_name(self) -> str:
        return f"{self.config.health_check_prefix}-{int(time.time())}"

    async def run(self, template: Optional[str] = None) -> bool:
        console.print("[bold]Testing toolkit health...[/bold]")

        report = await self.pipeline.run(self.project_name(), template)
        if not report.success:
            print_error(f"Toolkit is unhealthy: scaffolding failed at '{report.failed_stage}'")
            return False

        project_dir = self.config.output_dir / report.project_name
        for script, env in PROJECT_CHECKS:
            log("INFO", f"Running npm {script} in {project_dir}")
            code, _stderr = await self.toolchain.run_script(project_dir, script, env=env or None)
            if code != 0:
                print_error(f"Toolkit is unhealthy: 'npm {script}' exited with {code}")
                return False

        print_success("Toolkit is healthy!")
        return True


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``frontkit-health``."""
    parser = argparse.ArgumentParser(
        prog="frontkit-health",
        description="Scaffold a throwaway project and check that it tests, lints and builds",
    )
    parser.add_argument(
        "template", nargs="?", default=None, help="Template (default: react-typescript)"
    )
    add_common_arguments(parser)
    args = parser.parse_args(argv)

    healthy = asyncio.run(HealthCheck(load_config(args)).run(args.template))
    if not healthy:
        sys.exit(1)


if __name__ == "__main__":
    main()
