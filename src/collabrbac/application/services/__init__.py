"""Application services."""

from collabrbac.application.services.access import require_permission
from collabrbac.application.services.grant_store import GrantStore
from collabrbac.application.services.item_locks import ItemLocks

__all__ = [
    "GrantStore",
    "ItemLocks",
    "require_permission",
]
