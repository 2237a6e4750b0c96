"""Workspace state for emmetls."""
from .document_store import DocumentSnapshot, DocumentStore
from .settings_cache import DEFAULT_SETTINGS, Settings, SettingsCache

__all__ = [
    'DEFAULT_SETTINGS',
    'DocumentSnapshot',
    'DocumentStore',
    'Settings',
    'SettingsCache',
]
