"""API layer: canonical read surface for the web app, CLI and export.

Key rules:

1. No SQLAlchemy imports - only call repo functions (``Session`` for type hints only)
2. Filtering and sorting come from a FilterSpec; nothing is re-filtered here
3. Return Pydantic models only
"""
