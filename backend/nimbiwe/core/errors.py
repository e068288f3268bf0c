"""Domain exceptions raised by services and translated by the API layer"""


class NimbiweError(Exception):
    """Base class for application errors."""


class EntryNotFoundError(NimbiweError):
    def __init__(self, entry_id: str):
        super().__init__("Entry not found")
        self.entry_id = entry_id


class AuthenticationError(NimbiweError):
    """Credential missing, malformed, expired or revoked."""
