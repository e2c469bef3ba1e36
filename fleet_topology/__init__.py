"""Force-directed layout engine for server/project fleet topologies."""

__version__ = "0.1.0"
