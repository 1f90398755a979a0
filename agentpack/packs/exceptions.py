"""Exception hierarchy for pack loading and deployment.

Engines never raise for a single entity's failure; these are raised by
the registry and the deploy service when a whole request cannot proceed.
"""


class AgentPackError(Exception):
    """Base exception for pack errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PackLoadError(AgentPackError):
    """Raised when a pack document cannot be read or parsed."""

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class PackNotFoundError(AgentPackError):
    """Raised when no pack is registered under the requested key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Pack '{key}' not found")
        self.key = key


class InvalidPackError(AgentPackError):
    """Raised when a pack fails validation and must not be applied."""

    def __init__(self, pack_key: str, errors: list[str]) -> None:
        super().__init__(f"Pack '{pack_key}' is invalid: {len(errors)} error(s)")
        self.pack_key = pack_key
        self.errors = errors
