"""Pydantic models and payload schemas."""
