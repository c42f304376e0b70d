"""Dashboard templates: per-user grid layout templates."""

__version__ = "0.1.0"
