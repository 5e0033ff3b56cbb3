"""frontkit -- scaffold front-end projects with testing, linting, docs and git."""

__version__ = "1.0.0"
