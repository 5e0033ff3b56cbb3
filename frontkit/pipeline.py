"""frontkit Pipeline Orchestrator.

Runs the scaffolding stages strictly in order:

Stage 1: VALIDATE   -- tools, tool versions, project name, template.
Stage 2: SCAFFOLD   -- external generator creates the base tree.
Stage 3: TESTING    -- test dependencies, Jest config, example tests.
Stage 4: QUALITY    -- Prettier/ESLint config and npm scripts.
Stage 5: DOCS       -- README and contributing guide.
Stage 6: REPOSITORY -- git init, ignore patterns, initial commit.

The first failure stops the run; nothing is retried.

Usage::

    python -m frontkit.pipeline demo-app
    python -m frontkit.pipeline demo-app next-typescript -o ./projects
"""

from __future__ import annotations

import argparse
import asyncio
import shutil
import sys
import time
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from frontkit import __version__
from frontkit.config import Config, Template
from frontkit.errors import FrontkitError
from frontkit.models import ExecutionReport, Outcome, PipelineState, ProjectRequest
from frontkit.scaffolder import (
    DocumentationGenerator,
    QualityInstaller,
    RepositoryInitializer,
    ScaffoldGenerator,
    TemplateRenderer,
    TestingInstaller,
)
from frontkit.toolchain import NpmToolchain, Toolchain
from frontkit.utils import (
    console,
    format_duration,
    log,
    print_banner,
    print_error,
    print_stage_header,
    print_success,
    print_summary_table,
    print_warning,
)
from frontkit.validator import validate_request

BANNER_TITLE = "Enterprise Frontend Project Setup"

VALIDATE_STAGE = "validate"


@dataclass(frozen=True)
class PipelineStage:
    """One step after validation. ``action`` receives the validated request."""

    name: str
    state: PipelineState
    action: Callable[[ProjectRequest], Awaitable[Any]]


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives validation and the five build stages for one project.

    Attributes:
        config: Global configuration.
        toolchain: Gateway to ``npx``/``npm``/``git``.
        state: Current ``PipelineState``; ``DONE`` or ``FAILED`` after ``run``.
        report: The ``ExecutionReport`` of the latest run.
    """

    def __init__(
        self,
        config: Config,
        toolchain: Optional[Toolchain] = None,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        self.config = config
        self.toolchain: Toolchain = toolchain or NpmToolchain(
            timeout=config.command_timeout, stream_output=config.stream_output
        )
        self.renderer = renderer or TemplateRenderer()
        self.state = PipelineState.IDLE
        self.report = ExecutionReport()

        self.generator = ScaffoldGenerator(self.toolchain)
        self.testing = TestingInstaller(self.toolchain, self.renderer)
        self.quality = QualityInstaller(self.toolchain, self.renderer)
        self.docs = DocumentationGenerator(self.renderer)
        self.repository = RepositoryInitializer(self.toolchain, self.renderer)

    # ------------------------------------------------------------------
    # Stage table
    # ------------------------------------------------------------------

    @property
    def stages(self) -> list[PipelineStage]:
        return [
            PipelineStage("scaffold", PipelineState.SCAFFOLDING, self.generator.generate),
            PipelineStage(
                "testing", PipelineState.INSTALLING_TESTS,
                lambda req: self.testing.install(req.project_dir),
            ),
            PipelineStage(
                "quality", PipelineState.INSTALLING_QUALITY,
                lambda req: self.quality.install(req.project_dir),
            ),
            PipelineStage(
                "docs", PipelineState.GENERATING_DOCS,
                lambda req: self.docs.generate(req.project_dir, req.name),
            ),
            PipelineStage(
                "repository", PipelineState.INITIALIZING_REPO,
                lambda req: self.repository.initialize(req.project_dir),
            ),
        ]

    def _transition(self, state: PipelineState) -> None:
        if self.state.terminal:
            raise RuntimeError(f"Pipeline already finished in state {self.state.value}")
        self.state = state

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(
        self, raw_name: Optional[str], raw_template: Optional[str] = None
    ) -> ExecutionReport:
        """Validate the request and run every stage.

        Args:
            raw_name: Project name as given by the caller.
            raw_template: Template name, or ``None``/empty for the default.

        Returns:
            The ``ExecutionReport``; ``report.success`` tells whether every
            stage completed.
        """
        start = time.monotonic()
        self.state = PipelineState.IDLE
        self.report = ExecutionReport(project_name=raw_name or "")

        print_banner(BANNER_TITLE, __version__)

        total = len(self.stages) + 1
        print_stage_header(1, total, VALIDATE_STAGE)
        self._transition(PipelineState.VALIDATING)
        request: Optional[ProjectRequest] = None
        try:
            request = await validate_request(
                raw_name, raw_template, config=self.config, toolchain=self.toolchain
            )
        except FrontkitError as exc:
            self._fail(VALIDATE_STAGE, exc.kind, str(exc))
        else:
            self.report.template = request.template
            self.report.stages_run.append(VALIDATE_STAGE)
            log("INFO", f"Starting project setup for '{request.name}'")
            await self._run_stages(request, total)

        if self.report.outcome is None:
            self._transition(PipelineState.DONE)
            self.report.outcome = Outcome.SUCCESS
        elif request is not None and self.config.cleanup_on_failure:
            await self._cleanup(request)

        self.report.elapsed_seconds = int(time.monotonic() - start)
        self._print_final_summary(request)
        return self.report

    async def _run_stages(self, request: ProjectRequest, total: int) -> None:
        for index, stage in enumerate(self.stages, start=2):
            print_stage_header(index, total, stage.name)
            self._transition(stage.state)
            try:
                await stage.action(request)
            except FrontkitError as exc:
                self._fail(stage.name, exc.kind, str(exc))
                if getattr(exc, "stderr", ""):
                    console.print(exc.stderr, style="dim", markup=False)
                return
            except Exception as exc:
                self._fail(stage.name, "UnexpectedError", str(exc) or type(exc).__name__)
                console.print(traceback.format_exc(), style="dim", markup=False)
                return
            self.report.stages_run.append(stage.name)

    def _fail(self, stage: str, kind: str, reason: str) -> None:
        self._transition(PipelineState.FAILED)
        self.report.mark_failed(stage, kind, reason)
        log("ERROR", f"{kind} in stage '{stage}': {reason}")

    async def _cleanup(self, request: ProjectRequest) -> None:
        """Remove the partially generated project directory."""
        target = request.project_dir
        if not target.exists():
            return
        log("WARN", f"Removing partially created project at {target}")
        await asyncio.to_thread(shutil.rmtree, target)
        self.report.cleaned_up = True

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def _print_final_summary(self, request: Optional[ProjectRequest]) -> None:
        report = self.report
        duration = format_duration(report.elapsed_seconds)
        console.print()

        if not report.success:
            print_error(
                f"PROJECT SETUP FAILED at stage '{report.failed_stage}' "
                f"({report.error_kind}) after {duration}"
            )
            console.print(f"  {report.reason}", markup=False)
            if request is not None and not report.cleaned_up and request.project_dir.exists():
                print_warning(
                    f"Partial project left at {request.project_dir}; "
                    "remove it before retrying with the same name."
                )
            return

        if request is None:
            return
        print_success("PROJECT SETUP COMPLETE!")
        print_summary_table(
            {
                "Project": request.name,
                "Template": request.template.value,
                "Setup Time": duration,
                "Location": str(request.project_dir.resolve()),
            },
            title="Project Setup",
        )

        start_cmd = "npm run dev" if request.template == Template.NEXT_TYPESCRIPT else "npm start"
        console.print("[bold green]Next Steps:[/bold green]")
        console.print(f"  1. cd {request.project_dir}", markup=False)
        console.print(f"  2. {start_cmd}")
        console.print("  3. Open http://localhost:3000")
        console.print()
        console.print("[bold green]Available Commands:[/bold green]")
        console.print("  • npm test           - Run test suite")
        console.print("  • npm run lint       - Check code quality")
        console.print("  • npm run format     - Format code")
        console.print("  • npm run build      - Build for production")
        console.print()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_config(args: argparse.Namespace) -> Config:
    """Layer CLI flags on top of the environment configuration."""
    config = Config.from_env()
    updates: dict[str, Any] = {}
    if args.output_dir:
        updates["output_dir"] = args.output_dir
    if args.cleanup_on_failure:
        updates["cleanup_on_failure"] = True
    if args.quiet:
        updates["stream_output"] = False
    return config.model_copy(update=updates) if updates else config


def load_config(args: argparse.Namespace) -> Config:
    """Like ``build_config`` but reports a bad setting and exits with status 1."""
    try:
        return build_config(args)
    except ValueError as exc:
        log("ERROR", f"Invalid configuration: {exc}")
        sys.exit(1)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        default=None,
        help="Directory the project is created in (default: current directory)",
    )
    parser.add_argument(
        "--cleanup-on-failure",
        action="store_true",
        help="Remove the partially created project if a stage fails",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Capture npm/npx output instead of streaming it",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``frontkit`` / ``python -m frontkit.pipeline``."""
    parser = argparse.ArgumentParser(
        prog="frontkit",
        description="Scaffold a React/TypeScript project with testing, linting, docs and git",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Templates: " + ", ".join(Template.values()) + "\n\n"
            "Examples:\n"
            "  frontkit demo-app\n"
            "  frontkit demo-app react-javascript\n"
            "  frontkit demo-app next-typescript -o ./projects\n"
        ),
    )
    parser.add_argument("project_name", nargs="?", default="", help="Name of the new project")
    parser.add_argument(
        "template", nargs="?", default=None, help="Template (default: react-typescript)"
    )
    add_common_arguments(parser)
    args = parser.parse_args(argv)

    pipeline = Pipeline(load_config(args))
    report = asyncio.run(pipeline.run(args.project_name, args.template))
    if not report.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
