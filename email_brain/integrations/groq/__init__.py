from .client import GroqTextGenerator

__all__ = [
    'GroqTextGenerator'
]
