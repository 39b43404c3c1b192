"""Lesson pipeline services."""
