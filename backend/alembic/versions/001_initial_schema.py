"""Initial schema: players, teams, events, registrations, matches, participants, game logs

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None

ACTIVE_REGISTRATION = "status != 'Cancelled'"


def upgrade() -> None:
    op.create_table(
        "player",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_player_email", "player", ["email"])

    op.create_table(
        "team",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("team_name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_team_team_name", "team", ["team_name"])

    op.create_table(
        "event",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_name", sa.String(), nullable=False),
        sa.Column("sport_type", sa.String(), nullable=False),
        sa.Column("format", sa.String(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("registration_deadline", sa.DateTime(), nullable=False),
        sa.Column("max_participants", sa.Integer(), nullable=False),
        sa.Column("is_team_based", sa.Boolean(), nullable=False),
        sa.Column("event_status", sa.String(), nullable=False, server_default="Upcoming"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("max_participants >= 2", name="ck_event_min_capacity"),
    )

    op.create_table(
        "registration",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=True),
        sa.Column("team_id", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("payment_status", sa.String(), nullable=False, server_default="Pending"),
        sa.Column("registration_date", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["event_id"], ["event.id"]),
        sa.ForeignKeyConstraint(["player_id"], ["player.id"]),
        sa.ForeignKeyConstraint(["team_id"], ["team.id"]),
        sa.CheckConstraint("(player_id IS NULL) <> (team_id IS NULL)", name="ck_registration_one_participant"),
    )
    op.create_index(
        "uq_registration_active_player",
        "registration",
        ["event_id", "player_id"],
        unique=True,
        sqlite_where=sa.text(ACTIVE_REGISTRATION),
        postgresql_where=sa.text(ACTIVE_REGISTRATION),
    )
    op.create_index(
        "uq_registration_active_team",
        "registration",
        ["event_id", "team_id"],
        unique=True,
        sqlite_where=sa.text(ACTIVE_REGISTRATION),
        postgresql_where=sa.text(ACTIVE_REGISTRATION),
    )
    op.create_index(
        "ix_registration_event_status_fifo",
        "registration",
        ["event_id", "status", "registration_date", "id"],
    )

    op.create_table(
        "match",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("bracket_id", sa.Integer(), nullable=True),
        sa.Column("round_name", sa.String(), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(), nullable=True),
        sa.Column("is_team", sa.Boolean(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="Scheduled"),
        sa.Column("winner_id", sa.Integer(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["event_id"], ["event.id"]),
    )
    op.create_index("ix_match_event_id", "match", ["event_id"])

    op.create_table(
        "matchparticipant",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("match_id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=True),
        sa.Column("team_id", sa.Integer(), nullable=True),
        sa.Column("score", sa.Integer(), nullable=True),
        sa.Column("result", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["match_id"], ["match.id"]),
        sa.ForeignKeyConstraint(["player_id"], ["player.id"]),
        sa.ForeignKeyConstraint(["team_id"], ["team.id"]),
        sa.CheckConstraint("(player_id IS NULL) <> (team_id IS NULL)", name="ck_match_participant_one_side"),
        sa.UniqueConstraint("match_id", "player_id", name="uq_match_participant_player"),
        sa.UniqueConstraint("match_id", "team_id", name="uq_match_participant_team"),
    )
    op.create_index("ix_matchparticipant_match_id", "matchparticipant", ["match_id"])

    op.create_table(
        "gamelog",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("match_id", sa.Integer(), nullable=False),
        sa.Column("event_type", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=True),
        sa.Column("log_time", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["match_id"], ["match.id"]),
        sa.ForeignKeyConstraint(["player_id"], ["player.id"]),
    )
    op.create_index("ix_gamelog_match_id", "gamelog", ["match_id"])


def downgrade() -> None:
    op.drop_index("ix_gamelog_match_id", table_name="gamelog")
    op.drop_table("gamelog")
    op.drop_index("ix_matchparticipant_match_id", table_name="matchparticipant")
    op.drop_table("matchparticipant")
    op.drop_index("ix_match_event_id", table_name="match")
    op.drop_table("match")
    op.drop_index("ix_registration_event_status_fifo", table_name="registration")
    op.drop_index("uq_registration_active_team", table_name="registration")
    op.drop_index("uq_registration_active_player", table_name="registration")
    op.drop_table("registration")
    op.drop_table("event")
    op.drop_index("ix_team_team_name", table_name="team")
    op.drop_table("team")
    op.drop_index("ix_player_email", table_name="player")
    op.drop_table("player")
