"""Core tracker, deletion strategies, configuration and paths."""
