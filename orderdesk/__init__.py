"""Order reconciliation engine for exchanges and returns."""

__version__ = "1.0.0"
