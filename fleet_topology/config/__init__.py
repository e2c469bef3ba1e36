"""
Configuration for the topology layout engine and service.
"""

from .config import Settings, settings

__all__ = ['Settings', 'settings']
