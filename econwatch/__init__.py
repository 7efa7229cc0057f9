"""EconWatch: economic data sync, threshold alerts and notifications."""

__version__ = "0.1.0"
