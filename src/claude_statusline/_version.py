"""Version information for claude-statusline."""

__version__ = "0.1.0"
