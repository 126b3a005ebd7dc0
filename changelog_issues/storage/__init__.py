"""
Storage Layer
=============

Persistence of the last processed changelog GUID.
"""

from .guid_store import GuidStore

__all__ = [
    "GuidStore",
]
