"""Infrastructure providers.

Production implementations are imported here so they are registered as
subclasses of their component base before any container is built.
"""

from .identity import IdentityProvider, ProdIdentityProvider
from .notification import NotificationProvider, ProdNotificationProvider
from .persistence import PersistenceProvider, ProdPersistenceProvider

__all__ = [
    "IdentityProvider",
    "NotificationProvider",
    "PersistenceProvider",
    "ProdIdentityProvider",
    "ProdNotificationProvider",
    "ProdPersistenceProvider",
]
