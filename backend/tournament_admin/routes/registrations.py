"""
Registration API Routes
Thin HTTP layer over RegistrationLedger: register, cancel (with waitlist promotion),
payment status passthrough, listing and per-event overview.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict

from tournament_admin.dependencies import get_registration_ledger
from tournament_admin.models.registration import RegistrationStatus
from tournament_admin.services.registration_ledger import ParticipantRef, RegistrationLedger, RegistrationUpdate
from tournament_admin.utils.http_errors import core_errors_as_http

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class PlayerRegistrationRequest(BaseModel):
    event_id: int
    player_id: int


class TeamRegistrationRequest(BaseModel):
    event_id: int
    team_id: int


class RegistrationUpdateRequest(BaseModel):
    payment_status: Optional[str] = None


class RegistrationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    event_id: int
    player_id: Optional[int] = None
    team_id: Optional[int] = None
    status: RegistrationStatus
    payment_status: str
    registration_date: datetime


class RegistrationCreatedResponse(BaseModel):
    message: str
    registration: RegistrationResponse


class CancellationResponse(BaseModel):
    message: str
    cancelled: RegistrationResponse
    promoted: Optional[RegistrationResponse] = None


class RegistrationOverviewResponse(BaseModel):
    event_id: int
    event_name: str
    max_participants: int
    confirmed: int
    waitlisted: int
    cancelled: int
    available_slots: int


def _created(ledger: RegistrationLedger, event_id: int, participant: ParticipantRef) -> RegistrationCreatedResponse:
    with core_errors_as_http():
        registration = ledger.register(event_id, participant)

    kind = "Team" if participant.is_team else "Player"
    if registration.status == RegistrationStatus.confirmed.value:
        message = f"{kind} registered successfully"
    else:
        message = f"{kind} added to waitlist"
    return RegistrationCreatedResponse(
        message=message,
        registration=RegistrationResponse.model_validate(registration),
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/registrations/player", response_model=RegistrationCreatedResponse, status_code=201)
def register_player(
    payload: PlayerRegistrationRequest,
    ledger: RegistrationLedger = Depends(get_registration_ledger),
):
    """Register a player for an individual event (Confirmed, or Waitlisted when full)"""
    return _created(ledger, payload.event_id, ParticipantRef(player_id=payload.player_id))


@router.post("/registrations/team", response_model=RegistrationCreatedResponse, status_code=201)
def register_team(
    payload: TeamRegistrationRequest,
    ledger: RegistrationLedger = Depends(get_registration_ledger),
):
    """Register a team for a team-based event (Confirmed, or Waitlisted when full)"""
    return _created(ledger, payload.event_id, ParticipantRef(team_id=payload.team_id))


@router.put("/registrations/{registration_id}/cancel", response_model=CancellationResponse)
def cancel_registration(
    registration_id: int,
    ledger: RegistrationLedger = Depends(get_registration_ledger),
):
    """Cancel a registration; the oldest waitlisted registration takes the freed slot."""
    with core_errors_as_http():
        result = ledger.cancel(registration_id)

    message = "Registration cancelled successfully"
    if result.promoted is not None:
        message += f"; registration {result.promoted.id} promoted from waitlist"
    return CancellationResponse(
        message=message,
        cancelled=RegistrationResponse.model_validate(result.cancelled),
        promoted=RegistrationResponse.model_validate(result.promoted) if result.promoted else None,
    )


@router.put("/registrations/{registration_id}", response_model=RegistrationResponse)
def update_registration(
    registration_id: int,
    payload: RegistrationUpdateRequest,
    ledger: RegistrationLedger = Depends(get_registration_ledger),
):
    """Update payment status. Registration status only changes through register/cancel."""
    with core_errors_as_http():
        return ledger.update_registration(
            registration_id, RegistrationUpdate(payment_status=payload.payment_status)
        )


@router.get("/registrations", response_model=List[RegistrationResponse])
def get_registrations(
    event_id: Optional[int] = None,
    player_id: Optional[int] = None,
    team_id: Optional[int] = None,
    status: Optional[RegistrationStatus] = None,
    ledger: RegistrationLedger = Depends(get_registration_ledger),
):
    with core_errors_as_http():
        return ledger.list_registrations(event_id=event_id, player_id=player_id, team_id=team_id, status=status)


@router.get("/registrations/{registration_id}", response_model=RegistrationResponse)
def get_registration(
    registration_id: int,
    ledger: RegistrationLedger = Depends(get_registration_ledger),
):
    with core_errors_as_http():
        return ledger.get_registration(registration_id)


@router.get("/registrations/event/{event_id}/overview", response_model=RegistrationOverviewResponse)
def get_registration_overview(
    event_id: int,
    ledger: RegistrationLedger = Depends(get_registration_ledger),
):
    """Confirmed / waitlisted / cancelled counts and remaining capacity for an event"""
    with core_errors_as_http():
        overview = ledger.registration_overview(event_id)

    return RegistrationOverviewResponse(
        event_id=overview.event_id,
        event_name=overview.event_name,
        max_participants=overview.max_participants,
        confirmed=overview.confirmed,
        waitlisted=overview.waitlisted,
        cancelled=overview.cancelled,
        available_slots=overview.available_slots,
    )
