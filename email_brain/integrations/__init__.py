"""
External service integrations.
"""

from .base import TextGenerator

__all__ = ['TextGenerator']
