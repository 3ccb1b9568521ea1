"""Pydantic request/response models for the lesson booking API."""
