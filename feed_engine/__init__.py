"""Feed consumption categorization and batch targeting engine."""

__version__ = "0.1.0"
