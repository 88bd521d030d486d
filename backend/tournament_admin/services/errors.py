"""
Core failure taxonomy.

NotFoundError and BusinessRuleError are permanent for the given input and are never
retried. TransientStoreError wraps lock-wait timeouts, connection loss and aborted
transactions; the whole operation may be retried because every guard re-reads state.
"""


class CoreError(Exception):
    """Base class for failures surfaced by the registration and match services."""


class NotFoundError(CoreError):
    entity = "Record"

    def __init__(self, entity_id: int):
        self.entity_id = entity_id
        super().__init__(f"{self.entity} {entity_id} not found")


class EventNotFound(NotFoundError):
    entity = "Event"


class RegistrationNotFound(NotFoundError):
    entity = "Registration"


class MatchNotFound(NotFoundError):
    entity = "Match"


class PlayerNotFound(NotFoundError):
    entity = "Player"


class TeamNotFound(NotFoundError):
    entity = "Team"


class BusinessRuleError(CoreError):
    """Rejected by a state or capacity rule; message carries the specific reason."""


class DuplicateActiveRegistration(BusinessRuleError):
    pass


class DeadlinePassed(BusinessRuleError):
    pass


class WrongParticipantKind(BusinessRuleError):
    pass


class AlreadyCancelled(BusinessRuleError):
    pass


class AlreadyCompleted(BusinessRuleError):
    pass


class ParticipantMismatch(BusinessRuleError):
    pass


class NoFieldsToUpdate(BusinessRuleError):
    pass


class TransientStoreError(CoreError):
    """Store failure that aborted the transaction; nothing was committed."""
