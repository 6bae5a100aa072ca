"""
Database models for the Fest backend (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKeyConstraint,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

EVENT_CATEGORIES = ("CORE", "TECHNICAL", "NON_TECHNICAL", "SPECIAL")
EVENT_TYPES = ("INDIVIDUAL", "TEAM", "INDIVIDUAL_MULTIPLE_ENTRY", "TEAM_MULTIPLE_ENTRY")
WINNER_TYPES = ("WINNER", "RUNNER_UP", "SECOND_RUNNER_UP")


def _in_values(column: str, values: tuple[str, ...]) -> str:
    return f"{column} IN ({', '.join(repr(v) for v in values)})"


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="users_pkey"),
        UniqueConstraint(
            "auth_provider",
            "auth_subject",
            name="users_auth_provider_auth_subject_key",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    auth_provider: Mapped[str] = mapped_column(String(50), nullable=False)
    auth_subject: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    name: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )

    team_members: Mapped[list["TeamMembers"]] = relationship(
        "TeamMembers", uselist=True, back_populates="user"
    )


class Events(Base):
    __tablename__ = "events"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="events_pkey"),
        CheckConstraint(_in_values("category", EVENT_CATEGORIES), name="category"),
        CheckConstraint(_in_values("event_type", EVENT_TYPES), name="event_type"),
        Index("idx_events_published_category", "published", "category"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    category: Mapped[str] = mapped_column(
        String(50), nullable=False, server_default=text("'TECHNICAL'")
    )
    event_type: Mapped[str] = mapped_column(
        String(50), nullable=False, server_default=text("'INDIVIDUAL'")
    )
    venue: Mapped[str | None] = mapped_column(String(255))
    image: Mapped[str | None] = mapped_column(Text)
    published: Mapped[bool] = mapped_column(Boolean, server_default=text("false"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )

    rounds: Mapped[list["Rounds"]] = relationship(
        "Rounds", uselist=True, back_populates="event", order_by="Rounds.round_no"
    )
    teams: Mapped[list["Teams"]] = relationship("Teams", uselist=True, back_populates="event")
    winners: Mapped[list["Winners"]] = relationship(
        "Winners", uselist=True, back_populates="event"
    )


class Rounds(Base):
    __tablename__ = "rounds"
    __table_args__ = (
        ForeignKeyConstraint(
            ["event_id"], ["events.id"], ondelete="CASCADE", name="rounds_event_id_fkey"
        ),
        PrimaryKeyConstraint("event_id", "round_no", name="rounds_pkey"),
        CheckConstraint("round_no >= 0", name="round_no_non_negative"),
    )

    event_id: Mapped[int] = mapped_column(Integer, nullable=False)
    round_no: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[datetime | None] = mapped_column(DateTime(True))
    completed: Mapped[bool] = mapped_column(Boolean, server_default=text("false"))

    event: Mapped["Events"] = relationship("Events", back_populates="rounds")


class Teams(Base):
    __tablename__ = "teams"
    __table_args__ = (
        ForeignKeyConstraint(
            ["event_id"], ["events.id"], ondelete="CASCADE", name="teams_event_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="teams_pkey"),
        UniqueConstraint("event_id", "name", name="teams_event_id_name_key"),
        Index("idx_teams_event", "event_id"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    event_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    confirmed: Mapped[bool] = mapped_column(Boolean, server_default=text("false"))

    event: Mapped["Events"] = relationship("Events", back_populates="teams")
    team_members: Mapped[list["TeamMembers"]] = relationship(
        "TeamMembers", uselist=True, back_populates="team"
    )


class TeamMembers(Base):
    __tablename__ = "team_members"
    __table_args__ = (
        ForeignKeyConstraint(
            ["team_id"], ["teams.id"], ondelete="CASCADE", name="team_members_team_id_fkey"
        ),
        ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="team_members_user_id_fkey"
        ),
        PrimaryKeyConstraint("team_id", "user_id", name="team_members_pkey"),
        Index("idx_team_members_user", "user_id"),
    )

    team_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)

    team: Mapped["Teams"] = relationship("Teams", back_populates="team_members")
    user: Mapped["Users"] = relationship("Users", back_populates="team_members")


class Winners(Base):
    __tablename__ = "winners"
    __table_args__ = (
        ForeignKeyConstraint(
            ["event_id"], ["events.id"], ondelete="CASCADE", name="winners_event_id_fkey"
        ),
        ForeignKeyConstraint(
            ["team_id"], ["teams.id"], ondelete="CASCADE", name="winners_team_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="winners_pkey"),
        UniqueConstraint("event_id", "team_id", name="winners_event_id_team_id_key"),
        CheckConstraint(_in_values("type", WINNER_TYPES), name="type"),
        Index("idx_winners_event", "event_id"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    event_id: Mapped[int] = mapped_column(Integer, nullable=False)
    team_id: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)

    event: Mapped["Events"] = relationship("Events", back_populates="winners")
    team: Mapped["Teams"] = relationship("Teams")


# Expose for Alembic
target_metadata = Base.metadata
