from datetime import date, datetime, timedelta
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from tournament_admin import database
from tournament_admin.database import create_db_engine, get_engine, init_db
from tournament_admin.main import app
from tournament_admin.models.event import Event
from tournament_admin.models.player import Player
from tournament_admin.models.team import Team

# ============================================================================
# Test Database Setup
# ============================================================================
# 1. One file-backed SQLite database per test (tmp_path), never :memory: + StaticPool:
#    the locking services need real separate connections to serialize against each other
# 2. Engine built with create_db_engine() so the BEGIN IMMEDIATE / WAL hooks are installed
# 3. Seeding and assertions use short-lived sessions (Seeder) so no test holds a
#    transaction open across a service call
# 4. App dependency get_engine overridden to the test engine (see client_fixture)


class Seeder:
    """Insert and re-read rows with one short session per call."""

    def __init__(self, engine):
        self.engine = engine

    def add(self, obj):
        with Session(self.engine) as session:
            session.add(obj)
            session.commit()
            session.refresh(obj)
        return obj

    def event(
        self,
        max_participants: int = 2,
        is_team_based: bool = False,
        registration_deadline: Optional[datetime] = None,
        event_name: str = "Spring Open",
    ) -> Event:
        return self.add(
            Event(
                event_name=event_name,
                sport_type="tennis",
                start_date=date(2030, 5, 1),
                end_date=date(2030, 5, 3),
                registration_deadline=registration_deadline or datetime.utcnow() + timedelta(days=30),
                max_participants=max_participants,
                is_team_based=is_team_based,
            )
        )

    def player(self, first_name: str = "Pat", last_name: str = "Player") -> Player:
        return self.add(Player(first_name=first_name, last_name=last_name))

    def players(self, n: int) -> List[Player]:
        return [self.player(first_name=f"Player{i}") for i in range(1, n + 1)]

    def team(self, team_name: str = "Team") -> Team:
        return self.add(Team(team_name=team_name))

    def get(self, model, obj_id: int):
        with Session(self.engine) as session:
            return session.get(model, obj_id)

    def all(self, model, *where):
        with Session(self.engine) as session:
            return list(session.exec(select(model).where(*where).order_by(model.id)).all())


@pytest.fixture(name="engine")
def engine_fixture(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}", echo=False)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="seed")
def seed_fixture(engine) -> Seeder:
    return Seeder(engine)


@pytest.fixture(name="client")
def client_fixture(engine, monkeypatch):
    """Provide a test client bound to the per-test engine

    Both swaps MUST happen BEFORE TestClient() so startup's init_db and every
    request use the test engine, never the production one.
    """
    monkeypatch.setattr(database, "engine", engine)
    app.dependency_overrides[get_engine] = lambda: engine

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
