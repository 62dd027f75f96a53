"""
Email enrichment package initialization.
"""

from .action_items import extract_action_items
from .pipeline import EnrichmentPipeline, PipelineState, render_email

__all__ = [
    'EnrichmentPipeline',
    'PipelineState',
    'extract_action_items',
    'render_email'
]
