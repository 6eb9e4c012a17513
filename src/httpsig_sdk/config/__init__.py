"""
Configuration management for the HTTP Signatures SDK
"""

from .context_config import ContextConfig

__all__ = [
    'ContextConfig',
]
