"""PropComply — statutory certificate compliance tracking for rental properties."""

__version__ = "1.0.0"
