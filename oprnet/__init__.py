"""Oracle price record validation and consensus grading."""

__version__ = "0.1.0"
