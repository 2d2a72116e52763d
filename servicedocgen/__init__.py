"""servicedocgen - service documentation generator."""

__version__ = "1.0.0"
