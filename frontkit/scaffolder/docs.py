"""README and contributing guide generation."""

from __future__ import annotations

from pathlib import Path

from frontkit.scaffolder.templates import TemplateRenderer
from frontkit.utils import log

DOC_FILES: dict[str, str] = {
    "README.md.j2": "README.md",
    "CONTRIBUTING.md.j2": "CONTRIBUTING.md",
}


class DocumentationGenerator:
    """Writes the project docs. Pure overwrite, so re-running is a no-op."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    async def generate(self, project_dir: Path, project_name: str) -> list[Path]:
        log("INFO", "Setting up project documentation...")
        context = {"project_name": project_name}
        written = [
            await self.renderer.render_to_file(template, project_dir / target, context)
            for template, target in DOC_FILES.items()
        ]
        log("INFO", "Documentation setup completed")
        return written
