"""Shared library for the Nova inference services."""
