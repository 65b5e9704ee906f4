"""
Interfaces module.

Contains abstract base classes defining the contracts for the resolver's
external collaborators.
"""

from src.core.interfaces.adapters import (
    IMetadataClient,
    INamingTokenizer,
    IOverrideStore,
)

__all__ = [
    'IMetadataClient',
    'INamingTokenizer',
    'IOverrideStore',
]
