"""Exceptions raised by menu bot components."""


class MenuBotError(Exception):
    """Base class for menu bot errors."""


class CatalogError(MenuBotError):
    """The catalog store rejected a write or query."""


class SessionConflictError(MenuBotError):
    """Another writer advanced the session since it was read."""

    def __init__(self, tenant_id: str, sender: str, expected_version: int):
        super().__init__(
            f"Session for {tenant_id}/{sender} changed "
            f"(expected version {expected_version})"
        )
        self.tenant_id = tenant_id
        self.sender = sender
        self.expected_version = expected_version
