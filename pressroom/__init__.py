"""AI article generation with a quality gate, editorial review and publishing."""

__version__ = "0.1.0"
