# Error taxonomy for the influencer engine
# Routers map these onto HTTP responses in server.py


class MarketplaceError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(MarketplaceError):
    """A referenced influencer, campaign, request, content or report does not exist."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(MarketplaceError, ValueError):
    """Missing required fields or an unsupported value."""


class InvalidTransitionError(ValidationError):
    """A status change the state machine does not allow."""

    def __init__(self, entity: str, current: str, requested: str):
        super().__init__(f"Cannot move {entity} from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class PermissionDenied(MarketplaceError, PermissionError):
    """The caller is not allowed to act on this campaign."""


class ExternalServiceError(MarketplaceError):
    """The text-generation collaborator failed or returned unusable output."""


class PersistenceError(MarketplaceError):
    """The database rejected or failed a unit of work."""
