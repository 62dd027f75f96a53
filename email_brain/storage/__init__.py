"""
Process-lifetime state containers.
"""

from .conversations import ConversationStore
from .dataset import dataset_from_dict, load_dataset
from .overlays import EmailOverlayStore
from .prompts import PromptCatalog
from .sessions import SessionStore

__all__ = [
    'ConversationStore',
    'EmailOverlayStore',
    'PromptCatalog',
    'SessionStore',
    'dataset_from_dict',
    'load_dataset'
]
