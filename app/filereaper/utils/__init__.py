"""Utility modules for filereaper."""
