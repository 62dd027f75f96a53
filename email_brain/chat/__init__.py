from .context import ChatContextBuilder
from .engine import ChatEngine

__all__ = [
    'ChatContextBuilder',
    'ChatEngine'
]
