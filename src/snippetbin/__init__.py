"""SnippetBin: pastebin-style snippet sharing with role-aware ranking."""

__version__ = "0.1.0"
