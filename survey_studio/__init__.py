"""Survey Studio: survey authoring, anonymous response collection and analytics."""

__version__ = "1.0.0"
