"""Rendering of the generated Go registry file."""
