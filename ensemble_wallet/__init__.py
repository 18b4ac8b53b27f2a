"""Local encrypted wallet manager for the ensemble CLI."""

__version__ = "0.1.0"
