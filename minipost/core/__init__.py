"""Core — pure domain types, errors, protocols and request parsing.

Invariants:
    - No IO, no FastAPI/SQLAlchemy/jinja2 imports
"""
