"""Leveraged trailing-stop backtester over a daily price series."""

__version__ = "0.1.0"
