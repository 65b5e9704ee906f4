"""
Infrastructure overrides module.

Contains the store reading directory-scoped override files.
"""

from src.infrastructure.overrides.ini_override_store import IniOverrideStore

__all__ = [
    'IniOverrideStore',
]
