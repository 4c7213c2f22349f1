"""Autotype - type secrets into the focused X11 window."""

__version__ = "1.0.0"
