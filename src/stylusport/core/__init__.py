"""Errors, configuration, and logging shared by every layer."""
