"""
Configuration package for the hotel reservation API.
"""

from app.config.settings import Settings, get_settings, settings

__all__ = ['Settings', 'get_settings', 'settings']
