# src/snippetbin/services/__init__.py
"""Business logic services for the SnippetBin application.

Submodules are imported directly (``snippetbin.services.ranking`` and so on);
the repository layer depends on the ranking engine, so nothing is re-exported
here.
"""
