"""Mirrorarr: resolves movies and episodes to HLS streams on mirror providers."""

__version__ = "0.1.0"
