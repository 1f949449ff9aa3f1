"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the access-control rules that span communities,
    collaborators, invites and subscriptions. They keep no state between
    calls; everything lives in the store.
    """

    pass
