"""EventHub: event signup site."""

__version__ = "1.0.0"
