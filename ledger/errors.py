class LedgerError(Exception):
    """Base class for errors raised by the ledger package."""


class InvalidSelectionError(LedgerError, ValueError):
    """Unknown range key, sort field or sort direction."""

    def __init__(self, kind: str, value, allowed):
        self.kind = kind
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            f"Unknown {kind} {value!r}; expected one of {', '.join(map(str, self.allowed))}"
        )


class SeedFormatError(LedgerError):
    """A seed file could not be read into accounts and transactions."""
