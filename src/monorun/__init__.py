"""monorun: task runner for the server/collector/frontend monorepo."""

__version__ = "0.1.0"

__all__ = ["__version__"]
