"""Milestones: a small Flask backend storing milestone records and their images."""

__version__ = "0.1.0"
