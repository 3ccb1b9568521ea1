"""Monitoring package for the lesson booking service."""
