"""toneguard: tone scoring and diplomatic rewrites for written messages."""

__version__ = "0.1.0"
