"""Version information for vreport."""

__version__ = "0.1.0"
