"""shellstrap — shell-profile bootstrapper."""

__version__ = "0.1.0"
