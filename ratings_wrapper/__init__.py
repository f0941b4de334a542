"""ratings-wrapper - Consolidation de notes films, series et episodes."""

__version__ = "0.1.0"
