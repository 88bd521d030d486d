"""
Capacity/deadline admission rules for event registration.

Pure functions over an event snapshot: no session, no clock, no hidden state.
Rules are evaluated in order and the first match wins:
  1. now past registration_deadline  -> REJECTED_DEADLINE_PASSED
  2. participant kind != event kind  -> REJECTED_WRONG_PARTICIPANT_KIND
  3. confirmed_count < capacity      -> CONFIRMED, otherwise WAITLISTED
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from tournament_admin.models.event import Event


class AdmissionDecision(str, Enum):
    CONFIRMED = "CONFIRMED"
    WAITLISTED = "WAITLISTED"
    REJECTED_DEADLINE_PASSED = "REJECTED_DEADLINE_PASSED"
    REJECTED_WRONG_PARTICIPANT_KIND = "REJECTED_WRONG_PARTICIPANT_KIND"

    @property
    def is_rejection(self) -> bool:
        return self in (
            AdmissionDecision.REJECTED_DEADLINE_PASSED,
            AdmissionDecision.REJECTED_WRONG_PARTICIPANT_KIND,
        )


@dataclass(frozen=True)
class EventSnapshot:
    event_id: int
    max_participants: int
    is_team_based: bool
    registration_deadline: datetime

    @classmethod
    def from_event(cls, event: Event) -> "EventSnapshot":
        return cls(
            event_id=event.id,
            max_participants=event.max_participants,
            is_team_based=bool(event.is_team_based),
            registration_deadline=event.registration_deadline,
        )


def has_free_slot(event: EventSnapshot, confirmed_count: int) -> bool:
    return confirmed_count < event.max_participants


def decide_admission(
    event: EventSnapshot,
    is_team_participant: bool,
    confirmed_count: int,
    now: datetime,
) -> AdmissionDecision:
    """Admission decision for one registration attempt."""
    if now > event.registration_deadline:
        return AdmissionDecision.REJECTED_DEADLINE_PASSED
    if is_team_participant != event.is_team_based:
        return AdmissionDecision.REJECTED_WRONG_PARTICIPANT_KIND
    if has_free_slot(event, confirmed_count):
        return AdmissionDecision.CONFIRMED
    return AdmissionDecision.WAITLISTED
