"""Catpoint Control API"""

from .manager import create_app, AppState

__all__ = ['create_app', 'AppState']
