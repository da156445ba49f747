class OutboxError(Exception):
    """Raised when routed records cannot be committed to the outbox."""
