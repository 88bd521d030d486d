"""FastAPI providers for the core services. Each request gets services bound to the injected engine."""
from typing import Generator

from fastapi import Depends
from sqlalchemy.engine import Engine
from sqlmodel import Session

from tournament_admin.database import get_engine
from tournament_admin.services.match_finalizer import MatchResultFinalizer
from tournament_admin.services.registration_ledger import RegistrationLedger


def get_registration_ledger(engine: Engine = Depends(get_engine)) -> RegistrationLedger:
    return RegistrationLedger(engine)


def get_match_finalizer(engine: Engine = Depends(get_engine)) -> MatchResultFinalizer:
    return MatchResultFinalizer(engine)


def get_session(engine: Engine = Depends(get_engine)) -> Generator[Session, None, None]:
    """Plain session for event CRUD (no capacity-affecting writes)."""
    with Session(engine) as session:
        yield session
