"""Tests for the classroom board server."""
