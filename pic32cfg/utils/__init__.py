"""Loader and constant helpers for pic32cfg."""
