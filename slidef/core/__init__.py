"""Conversion and artifact-management core."""
