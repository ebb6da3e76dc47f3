"""Classroom board server: whiteboard relay and quiz catalog API."""
