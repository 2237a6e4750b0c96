"""Completion capability plugins."""
