"""StorePulse - attendance and sales analytics engine."""

__version__ = "0.1.0"
