"""leak-gate: containerized secret scanning gate for git commits."""

__version__ = "1.0.0"
