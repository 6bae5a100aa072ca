"""
Initial schema: users, events, rounds, teams, team members and winners.

Revision ID: 20241001_000000_initial_schema
Revises:
Create Date: 2024-10-01 00:00:00
"""

import sqlalchemy as sa

from alembic import op  # type: ignore[reportMissingImports]

# revision identifiers, used by Alembic.
revision = "20241001_000000_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # users
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("auth_provider", sa.String(length=50), nullable=False),
        sa.Column("auth_subject", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id", name="users_pkey"),
        sa.UniqueConstraint(
            "auth_provider", "auth_subject", name="users_auth_provider_auth_subject_key"
        ),
    )

    # events
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "category",
            sa.String(length=50),
            server_default=sa.text("'TECHNICAL'"),
            nullable=False,
        ),
        sa.Column(
            "event_type",
            sa.String(length=50),
            server_default=sa.text("'INDIVIDUAL'"),
            nullable=False,
        ),
        sa.Column("venue", sa.String(length=255), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("published", sa.Boolean(), server_default=sa.text("false")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id", name="events_pkey"),
        sa.CheckConstraint(
            "category IN ('CORE', 'TECHNICAL', 'NON_TECHNICAL', 'SPECIAL')",
            name="ck_events_category",
        ),
        sa.CheckConstraint(
            "event_type IN ('INDIVIDUAL', 'TEAM', 'INDIVIDUAL_MULTIPLE_ENTRY', "
            "'TEAM_MULTIPLE_ENTRY')",
            name="ck_events_event_type",
        ),
    )
    op.create_index("idx_events_published_category", "events", ["published", "category"])

    # rounds
    op.create_table(
        "rounds",
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("round_no", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed", sa.Boolean(), server_default=sa.text("false")),
        sa.ForeignKeyConstraint(
            ["event_id"], ["events.id"], ondelete="CASCADE", name="rounds_event_id_fkey"
        ),
        sa.PrimaryKeyConstraint("event_id", "round_no", name="rounds_pkey"),
        sa.CheckConstraint("round_no >= 0", name="ck_rounds_round_no_non_negative"),
    )

    # teams
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("confirmed", sa.Boolean(), server_default=sa.text("false")),
        sa.ForeignKeyConstraint(
            ["event_id"], ["events.id"], ondelete="CASCADE", name="teams_event_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="teams_pkey"),
        sa.UniqueConstraint("event_id", "name", name="teams_event_id_name_key"),
    )
    op.create_index("idx_teams_event", "teams", ["event_id"])

    # team_members
    op.create_table(
        "team_members",
        sa.Column("team_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["team_id"], ["teams.id"], ondelete="CASCADE", name="team_members_team_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="team_members_user_id_fkey"
        ),
        sa.PrimaryKeyConstraint("team_id", "user_id", name="team_members_pkey"),
    )
    op.create_index("idx_team_members_user", "team_members", ["user_id"])

    # winners
    op.create_table(
        "winners",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.ForeignKeyConstraint(
            ["event_id"], ["events.id"], ondelete="CASCADE", name="winners_event_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["team_id"], ["teams.id"], ondelete="CASCADE", name="winners_team_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="winners_pkey"),
        sa.UniqueConstraint("event_id", "team_id", name="winners_event_id_team_id_key"),
        sa.CheckConstraint(
            "type IN ('WINNER', 'RUNNER_UP', 'SECOND_RUNNER_UP')", name="ck_winners_type"
        ),
    )
    op.create_index("idx_winners_event", "winners", ["event_id"])


def downgrade() -> None:
    op.drop_index("idx_winners_event", table_name="winners")
    op.drop_table("winners")
    op.drop_index("idx_team_members_user", table_name="team_members")
    op.drop_table("team_members")
    op.drop_index("idx_teams_event", table_name="teams")
    op.drop_table("teams")
    op.drop_table("rounds")
    op.drop_index("idx_events_published_category", table_name="events")
    op.drop_table("events")
    op.drop_table("users")
