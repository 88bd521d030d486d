"""
Registration Ledger: the only writer of Registration.status.

Every capacity-affecting call (register, cancel + promotion) runs in one transaction that
first locks the Event row, so all of them are serialized per event:
- register: lock Event -> count Confirmed -> duplicate check -> admission policy -> insert
- cancel:   lock Event -> lock Registration -> Cancelled -> promote oldest Waitlisted (if a slot is free)

Lock order is always Event -> Registration and never spans two events.
No counts or statuses are cached between calls.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from tournament_admin.models.event import Event
from tournament_admin.models.player import Player
from tournament_admin.models.registration import Registration, RegistrationStatus
from tournament_admin.models.team import Team
from tournament_admin.services.admission_policy import (
    AdmissionDecision,
    EventSnapshot,
    decide_admission,
    has_free_slot,
)
from tournament_admin.services.errors import (
    AlreadyCancelled,
    DeadlinePassed,
    DuplicateActiveRegistration,
    EventNotFound,
    NoFieldsToUpdate,
    PlayerNotFound,
    RegistrationNotFound,
    TeamNotFound,
    WrongParticipantKind,
)
from tournament_admin.services.unit_of_work import locked_transaction, locking_engine, read_session
from tournament_admin.utils.sql import grouped_counts, scalar_int

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParticipantRef:
    """Exactly one of player_id / team_id."""

    player_id: Optional[int] = None
    team_id: Optional[int] = None

    def __post_init__(self):
        if (self.player_id is None) == (self.team_id is None):
            raise ValueError("exactly one of player_id or team_id is required")

    @property
    def is_team(self) -> bool:
        return self.team_id is not None

    def __str__(self) -> str:
        return f"team {self.team_id}" if self.is_team else f"player {self.player_id}"


@dataclass
class CancellationResult:
    cancelled: Registration
    promoted: Optional[Registration] = None


@dataclass
class RegistrationOverview:
    event_id: int
    event_name: str
    max_participants: int
    confirmed: int
    waitlisted: int
    cancelled: int

    @property
    def available_slots(self) -> int:
        return max(self.max_participants - self.confirmed, 0)


@dataclass
class RegistrationUpdate:
    """Fields an administrator may change directly. Status is never one of them."""

    payment_status: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.payment_status is None


def _lock_event(session: Session, event_id: int) -> Event:
    event = session.exec(select(Event).where(Event.id == event_id).with_for_update()).first()
    if event is None:
        raise EventNotFound(event_id)
    return event


def _require_participant(session: Session, participant: ParticipantRef) -> None:
    if participant.is_team:
        if session.get(Team, participant.team_id) is None:
            raise TeamNotFound(participant.team_id)
    elif session.get(Player, participant.player_id) is None:
        raise PlayerNotFound(participant.player_id)


def _count_confirmed(session: Session, event_id: int) -> int:
    return scalar_int(
        session.exec(
            select(func.count(Registration.id)).where(
                Registration.event_id == event_id,
                Registration.status == RegistrationStatus.confirmed.value,
            )
        ).one()
    )


def _find_active(session: Session, event_id: int, participant: ParticipantRef) -> Optional[Registration]:
    stmt = select(Registration).where(
        Registration.event_id == event_id,
        Registration.status != RegistrationStatus.cancelled.value,
    )
    if participant.is_team:
        stmt = stmt.where(Registration.team_id == participant.team_id)
    else:
        stmt = stmt.where(Registration.player_id == participant.player_id)
    return session.exec(stmt).first()


def _is_unique_violation(exc: IntegrityError) -> bool:
    return "unique" in str(exc.orig).lower()


class RegistrationLedger:
    def __init__(self, engine: Engine, clock: Callable[[], datetime] = datetime.utcnow):
        self._engine = engine
        self._locking_engine = locking_engine(engine)
        self._clock = clock

    def register(self, event_id: int, participant: ParticipantRef, now: Optional[datetime] = None) -> Registration:
        """
        Create a Confirmed or Waitlisted registration for participant.

        Raises:
            EventNotFound, PlayerNotFound, TeamNotFound, DuplicateActiveRegistration, DeadlinePassed,
            WrongParticipantKind, TransientStoreError
        """
        with locked_transaction(self._locking_engine, "register") as session:
            event = _lock_event(session, event_id)
            # Read the clock under the event lock so registration_date follows commit order
            now = now or self._clock()
            snapshot = EventSnapshot.from_event(event)
            _require_participant(session, participant)
            confirmed_count = _count_confirmed(session, event_id)

            if _find_active(session, event_id, participant) is not None:
                raise DuplicateActiveRegistration(f"{participant} already registered for event {event_id}")

            decision = decide_admission(snapshot, participant.is_team, confirmed_count, now)
            if decision == AdmissionDecision.REJECTED_DEADLINE_PASSED:
                logger.warning(
                    "Rejected %s for event %d: deadline %s passed", participant, event_id, event.registration_deadline
                )
                raise DeadlinePassed(f"Registration deadline for event {event_id} has passed")
            if decision == AdmissionDecision.REJECTED_WRONG_PARTICIPANT_KIND:
                expected = "team" if snapshot.is_team_based else "player"
                raise WrongParticipantKind(f"Event {event_id} accepts {expected} registrations only")

            status = RegistrationStatus.waitlisted
            if decision == AdmissionDecision.CONFIRMED:
                status = RegistrationStatus.confirmed
            registration = Registration(
                event_id=event_id,
                player_id=participant.player_id,
                team_id=participant.team_id,
                status=status.value,
                registration_date=now,
                updated_at=now,
            )
            session.add(registration)
            try:
                session.flush()
            except IntegrityError as exc:
                if _is_unique_violation(exc):
                    raise DuplicateActiveRegistration(
                        f"{participant} already registered for event {event_id}"
                    ) from exc
                raise

        logger.info(
            "Registered %s for event %d as %s (%d/%d confirmed before)",
            participant,
            event_id,
            registration.status,
            confirmed_count,
            snapshot.max_participants,
        )
        return registration

    def cancel(self, registration_id: int) -> CancellationResult:
        """
        Cancel a registration and promote at most one Waitlisted registration into the freed slot.

        Promotion picks the oldest Waitlisted entry (registration_date, then id) and does not
        look at the registration deadline.

        Raises:
            RegistrationNotFound, AlreadyCancelled, TransientStoreError
        """
        with locked_transaction(self._locking_engine, "cancel") as session:
            # event_id never changes, so it is safe to read before taking the Event lock
            event_id = session.exec(select(Registration.event_id).where(Registration.id == registration_id)).first()
            if event_id is None:
                raise RegistrationNotFound(registration_id)

            event = _lock_event(session, event_id)
            registration = session.exec(
                select(Registration).where(Registration.id == registration_id).with_for_update()
            ).one()

            if registration.status == RegistrationStatus.cancelled.value:
                raise AlreadyCancelled(f"Registration {registration_id} already cancelled")

            previous_status = registration.status
            registration.status = RegistrationStatus.cancelled.value
            registration.updated_at = self._clock()
            session.add(registration)
            session.flush()

            promoted = self._promote_next(session, EventSnapshot.from_event(event))

        logger.info(
            "Cancelled registration %d (was %s) for event %d; promoted=%s",
            registration_id,
            previous_status,
            event_id,
            promoted.id if promoted else None,
        )
        return CancellationResult(cancelled=registration, promoted=promoted)

    def _promote_next(self, session: Session, event: EventSnapshot) -> Optional[Registration]:
        """Confirm the head of the waitlist if capacity allows. Caller holds the Event lock."""
        if not has_free_slot(event, _count_confirmed(session, event.event_id)):
            return None

        head = session.exec(
            select(Registration)
            .where(
                Registration.event_id == event.event_id,
                Registration.status == RegistrationStatus.waitlisted.value,
            )
            .order_by(Registration.registration_date, Registration.id)
            .limit(1)
            .with_for_update()
        ).first()
        if head is None:
            return None

        head.status = RegistrationStatus.confirmed.value
        head.updated_at = self._clock()
        session.add(head)
        session.flush()
        return head

    def update_registration(self, registration_id: int, changes: RegistrationUpdate) -> Registration:
        """Apply administrator-editable fields (payment status passthrough)."""
        with locked_transaction(self._locking_engine, "update_registration") as session:
            registration = session.exec(
                select(Registration).where(Registration.id == registration_id).with_for_update()
            ).first()
            if registration is None:
                raise RegistrationNotFound(registration_id)

            if changes.is_empty:
                raise NoFieldsToUpdate("No fields to update")

            registration.payment_status = changes.payment_status
            registration.updated_at = self._clock()
            session.add(registration)
        return registration

    def get_registration(self, registration_id: int) -> Registration:
        with read_session(self._engine, "get_registration") as session:
            registration = session.get(Registration, registration_id)
            if registration is None:
                raise RegistrationNotFound(registration_id)
            return registration

    def list_registrations(
        self,
        event_id: Optional[int] = None,
        player_id: Optional[int] = None,
        team_id: Optional[int] = None,
        status: Optional[RegistrationStatus] = None,
    ) -> List[Registration]:
        """Registrations matching all given filters, newest first."""
        stmt = select(Registration)
        if event_id is not None:
            stmt = stmt.where(Registration.event_id == event_id)
        if player_id is not None:
            stmt = stmt.where(Registration.player_id == player_id)
        if team_id is not None:
            stmt = stmt.where(Registration.team_id == team_id)
        if status is not None:
            stmt = stmt.where(Registration.status == RegistrationStatus(status).value)
        stmt = stmt.order_by(Registration.registration_date.desc(), Registration.id.desc())

        with read_session(self._engine, "list_registrations") as session:
            return list(session.exec(stmt).all())

    def registration_overview(self, event_id: int) -> RegistrationOverview:
        with read_session(self._engine, "registration_overview") as session:
            event = session.get(Event, event_id)
            if event is None:
                raise EventNotFound(event_id)

            counts = grouped_counts(session, Registration.status, Registration.event_id == event_id)

        return RegistrationOverview(
            event_id=event.id,
            event_name=event.event_name,
            max_participants=event.max_participants,
            confirmed=counts.get(RegistrationStatus.confirmed.value, 0),
            waitlisted=counts.get(RegistrationStatus.waitlisted.value, 0),
            cancelled=counts.get(RegistrationStatus.cancelled.value, 0),
        )
