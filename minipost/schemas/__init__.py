"""Pydantic Schemas — form validation at the request boundary."""
