"""Turn-based card battle engine for Card Survivor."""

__version__ = "0.1.0"
