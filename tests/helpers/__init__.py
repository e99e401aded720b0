"""Shared helpers for the adoc-reducer test suite."""
