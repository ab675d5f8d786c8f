"""TaskFlow: personal task tracker with deadline-driven auto-completion."""

__version__ = "0.1.0"
