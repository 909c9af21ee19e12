"""Portfolio site backend: themes, admin API and client helpers."""

__version__ = "0.1.0"
