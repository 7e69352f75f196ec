"""Version information for neo-jwt."""

__version__ = "0.1.0"
