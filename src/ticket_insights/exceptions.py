class TicketInsightsError(Exception):
    """Base exception for ticket insights errors."""

    pass


class TicketExtractionError(TicketInsightsError):
    """Raised when a raw payload violates the required-field invariant."""

    pass


class MalformedChangelogError(TicketExtractionError):
    """Raised when a changelog is supplied but does not have the expected shape."""

    pass


class TicketSourceError(TicketInsightsError):
    """Raised when a ticket source cannot deliver a payload."""

    pass


class TicketSourceAuthenticationError(TicketSourceError):
    """Raised when the tracker rejects the configured credentials (401/403)."""

    pass
