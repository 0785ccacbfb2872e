"""deploygate tools for artifact management."""

# Import tools as modules: from deploygate.tools import artifacts

__all__ = []
