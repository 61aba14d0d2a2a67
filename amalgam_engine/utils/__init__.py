"""Utility functions and classes."""

from .encoding import StateEncoder

__all__ = ['StateEncoder']
