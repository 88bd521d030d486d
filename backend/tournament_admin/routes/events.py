from datetime import date, datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator, model_validator
from sqlmodel import Session, select

from tournament_admin.dependencies import get_session
from tournament_admin.models.event import Event, EventStatus

router = APIRouter()


class EventCreate(BaseModel):
    event_name: str
    sport_type: str
    format: Optional[str] = None
    start_date: date
    end_date: date
    registration_deadline: datetime
    max_participants: int
    is_team_based: bool = False

    @field_validator("event_name", "sport_type")
    @classmethod
    def validate_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("cannot be empty")
        return v.strip()

    @field_validator("max_participants")
    @classmethod
    def validate_max_participants(cls, v):
        if v < 2:
            raise ValueError("max_participants must be >= 2")
        return v

    @field_validator("registration_deadline")
    @classmethod
    def validate_deadline(cls, v):
        # Stored as naive UTC
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @model_validator(mode="after")
    def validate_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class EventUpdate(BaseModel):
    """Capacity and registration deadline are fixed at creation and cannot be updated."""

    event_name: Optional[str] = None
    sport_type: Optional[str] = None
    format: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    event_status: Optional[EventStatus] = None

    @field_validator("event_name", "sport_type")
    @classmethod
    def validate_not_blank(cls, v):
        if v is not None and (not v or not v.strip()):
            raise ValueError("cannot be empty")
        return v.strip() if v else v


class EventResponse(BaseModel):
    id: int
    event_name: str
    sport_type: str
    format: Optional[str] = None
    start_date: date
    end_date: date
    registration_deadline: datetime
    max_participants: int
    is_team_based: bool
    event_status: EventStatus
    created_at: datetime

    class Config:
        from_attributes = True


@router.get("/events", response_model=List[EventResponse])
def get_events(
    sport_type: Optional[str] = None,
    event_status: Optional[EventStatus] = None,
    session: Session = Depends(get_session),
):
    """List events, most recent start date first"""
    query = select(Event)
    if sport_type:
        query = query.where(Event.sport_type == sport_type)
    if event_status:
        query = query.where(Event.event_status == event_status.value)

    return session.exec(query.order_by(Event.start_date.desc(), Event.id.desc())).all()


@router.get("/events/{event_id}", response_model=EventResponse)
def get_event(event_id: int, session: Session = Depends(get_session)):
    event = session.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.post("/events", response_model=EventResponse, status_code=201)
def create_event(event_data: EventCreate, session: Session = Depends(get_session)):
    """Create a new event"""
    event = Event(**event_data.model_dump(), event_status=EventStatus.upcoming.value)
    session.add(event)
    session.commit()
    session.refresh(event)

    return event


@router.put("/events/{event_id}", response_model=EventResponse)
def update_event(event_id: int, event_data: EventUpdate, session: Session = Depends(get_session)):
    """Update descriptive fields of an event"""
    event = session.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    if event_data.event_name is not None:
        event.event_name = event_data.event_name
    if event_data.sport_type is not None:
        event.sport_type = event_data.sport_type
    if event_data.format is not None:
        event.format = event_data.format
    if event_data.start_date is not None:
        event.start_date = event_data.start_date
    if event_data.end_date is not None:
        event.end_date = event_data.end_date
    if event_data.event_status is not None:
        event.event_status = event_data.event_status.value

    if event.end_date < event.start_date:
        raise HTTPException(status_code=422, detail="end_date must be on or after start_date")

    session.add(event)
    session.commit()
    session.refresh(event)

    return event
