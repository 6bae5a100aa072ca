"""
Fest Events Backend
GraphQL API for fest event listings, registrations and live event status
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
