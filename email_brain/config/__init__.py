from .engine_config import ENGINE_CONFIG

__all__ = ['ENGINE_CONFIG']
