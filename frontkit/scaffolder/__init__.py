"""frontkit scaffolder -- the stages that build and finish a new project.

Each stage takes the project directory explicitly; none of them changes the
process working directory.

Quick usage::

    from frontkit.scaffolder import DocumentationGenerator, TemplateRenderer

    docs = DocumentationGenerator(TemplateRenderer())
    await docs.generate(Path("demo-app"), "demo-app")
"""

from frontkit.scaffolder.docs import DocumentationGenerator
from frontkit.scaffolder.generator import ScaffoldGenerator
from frontkit.scaffolder.quality import QualityInstaller
from frontkit.scaffolder.repository import RepositoryInitializer
from frontkit.scaffolder.templates import TemplateRenderer
from frontkit.scaffolder.testing import TestingInstaller

__all__ = [
    "DocumentationGenerator",
    "QualityInstaller",
    "RepositoryInitializer",
    "ScaffoldGenerator",
    "TemplateRenderer",
    "TestingInstaller",
]
