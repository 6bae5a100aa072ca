"""
Tests for event GraphQL resolvers
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import strawberry

from fest.auth.tokens import AuthenticationError
from fest.auth.context import ANONYMOUS, AuthContext
from fest.events.errors import EventNotFoundError, InvalidInputError
from fest.events.status import COMPLETED, YET_TO_START, EventSnapshot, RoundSnapshot
from fest.graphql.pagination import encode_cursor
from fest.graphql.resolvers.event import (
    _to_event_type,
    resolve_completed_events,
    resolve_event_by_id,
    resolve_event_rounds,
    resolve_event_statuses,
    resolve_event_winners,
    resolve_events,
    resolve_published_events,
    resolve_registered_events,
)
from fest.graphql.types.event import EventCategory, EventType, WinnerType
from tests.factories import make_event, make_round, make_team, make_winner, utc

RESOLVERS = "fest.graphql.resolvers.event"


def scalars_result(rows):
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    result.scalar_one_or_none.return_value = rows[0] if rows else None
    return result


@pytest.fixture
def auth_context():
    return AuthContext(user_id=42, subject="user-42")


class TestResolveEvents:
    """Tests for resolve_events."""

    @pytest.mark.asyncio
    async def test_returns_page_with_cursors(self, mock_info, mock_session):
        factory, session = mock_session
        session.execute.return_value = scalars_result(
            [make_event(1, "Hack Day"), make_event(2, "Hackathon Finals")]
        )

        with patch(f"{RESOLVERS}.get_async_session", factory):
            connection = await resolve_events(mock_info, "Hack", None, None)

        assert [edge.node.name for edge in connection.edges] == ["Hack Day", "Hackathon Finals"]
        assert connection.edges[0].cursor == encode_cursor(1)
        assert connection.page_info.has_next_page is False
        assert connection.page_info.has_previous_page is False
        assert connection.page_info.start_cursor == encode_cursor(1)
        assert connection.page_info.end_cursor == encode_cursor(2)

    @pytest.mark.asyncio
    async def test_extra_row_signals_next_page(self, mock_info, mock_session):
        factory, session = mock_session
        session.execute.return_value = scalars_result(
            [make_event(i, f"Event {i}") for i in range(1, 4)]
        )

        with patch(f"{RESOLVERS}.get_async_session", factory):
            connection = await resolve_events(mock_info, None, 2, None)

        assert len(connection.edges) == 2
        assert connection.page_info.has_next_page is True
        assert connection.page_info.end_cursor == encode_cursor(2)

    @pytest.mark.asyncio
    async def test_after_cursor_filters_by_id(self, mock_info, mock_session):
        factory, session = mock_session
        session.execute.return_value = scalars_result([make_event(6, "Quiz Night")])

        with patch(f"{RESOLVERS}.get_async_session", factory):
            connection = await resolve_events(mock_info, None, 5, encode_cursor(5))

        assert connection.page_info.has_previous_page is True
        stmt = session.execute.call_args[0][0]
        assert "events.id >" in str(stmt)
        assert 5 in stmt.compile().params.values()

    @pytest.mark.asyncio
    async def test_search_is_substring_match_on_name_and_description(
        self, mock_info, mock_session
    ):
        factory, session = mock_session
        session.execute.return_value = scalars_result([])

        with patch(f"{RESOLVERS}.get_async_session", factory):
            connection = await resolve_events(mock_info, "50%_off", None, None)

        assert connection.edges == []
        assert connection.page_info.start_cursor is None
        sql = str(session.execute.call_args[0][0])
        assert "events.name LIKE" in sql
        assert "events.description LIKE" in sql
        assert "ESCAPE" in sql

    @pytest.mark.asyncio
    async def test_page_size_is_clamped(self, mock_info, mock_session):
        factory, session = mock_session
        session.execute.return_value = scalars_result([])

        with patch(f"{RESOLVERS}.get_async_session", factory):
            await resolve_events(mock_info, None, 10_000, None)

        stmt = session.execute.call_args[0][0]
        assert stmt._limit == 101

    @pytest.mark.asyncio
    async def test_non_positive_first_is_rejected(self, mock_info):
        with pytest.raises(ValueError, match="positive integer"):
            await resolve_events(mock_info, None, 0, None)

    @pytest.mark.asyncio
    async def test_invalid_cursor_is_rejected(self, mock_info, mock_session):
        factory, _ = mock_session

        with patch(f"{RESOLVERS}.get_async_session", factory):
            with pytest.raises(ValueError, match="Invalid cursor"):
                await resolve_events(mock_info, None, None, "not-a-cursor")


class TestResolveEventById:
    """Tests for resolve_event_by_id."""

    @pytest.mark.asyncio
    async def test_returns_event(self, mock_info, mock_session):
        factory, session = mock_session
        session.execute.return_value = scalars_result(
            [make_event(7, "Battle of Bands", category="CORE", event_type="TEAM", venue="Main Stage")]
        )

        with patch(f"{RESOLVERS}.get_async_session", factory):
            event = await resolve_event_by_id(mock_info, "7")

        assert event.id == "7"
        assert event.name == "Battle of Bands"
        assert event.category == EventCategory.CORE
        assert event.event_type == EventType.TEAM
        assert event.venue == "Main Stage"
        assert event.teams == []

    @pytest.mark.asyncio
    async def test_missing_event_raises(self, mock_info, mock_session):
        factory, session = mock_session
        session.execute.return_value = scalars_result([])

        with patch(f"{RESOLVERS}.get_async_session", factory):
            with pytest.raises(EventNotFoundError, match="Event 99 not found"):
                await resolve_event_by_id(mock_info, "99")

    @pytest.mark.asyncio
    async def test_non_numeric_id_raises(self, mock_info):
        with pytest.raises(ValueError, match="Invalid event id"):
            await resolve_event_by_id(mock_info, "abc")


class TestResolveRegisteredEvents:
    """Tests for resolve_registered_events."""

    @pytest.mark.asyncio
    async def test_requires_authentication(self, mock_info):
        with patch(
            f"{RESOLVERS}.get_auth_context_from_info", AsyncMock(return_value=ANONYMOUS)
        ):
            with pytest.raises(AuthenticationError, match="Not authenticated"):
                await resolve_registered_events(mock_info)

    @pytest.mark.asyncio
    async def test_returns_events_with_user_teams(self, mock_info, mock_session, auth_context):
        factory, session = mock_session
        hack_day = make_event(1, "Hack Day", teams=[make_team(10, 1, "Null Pointers")])
        quiz = make_event(3, "Quiz Night", teams=[make_team(30, 3, "Know-it-alls")])
        session.execute.return_value = scalars_result([hack_day, quiz])

        with (
            patch(f"{RESOLVERS}.get_auth_context_from_info", AsyncMock(return_value=auth_context)),
            patch(f"{RESOLVERS}.get_async_session", factory),
        ):
            events = await resolve_registered_events(mock_info)

        assert [event.name for event in events] == ["Hack Day", "Quiz Night"]
        assert [team.name for team in events[0].teams] == ["Null Pointers"]
        assert events[1].teams[0].id == "30"
        assert events[1].teams[0].event_id == "3"

        stmt = session.execute.call_args[0][0]
        assert 42 in stmt.compile().params.values()

    @pytest.mark.asyncio
    async def test_no_registrations(self, mock_info, mock_session, auth_context):
        factory, session = mock_session
        session.execute.return_value = scalars_result([])

        with (
            patch(f"{RESOLVERS}.get_auth_context_from_info", AsyncMock(return_value=auth_context)),
            patch(f"{RESOLVERS}.get_async_session", factory),
        ):
            assert await resolve_registered_events(mock_info) == []


class TestResolvePublishedEvents:
    """Tests for resolve_published_events."""

    @pytest.mark.asyncio
    async def test_core_events_come_first(self, mock_info, mock_session):
        factory, session = mock_session
        session.execute.side_effect = [
            scalars_result([make_event(4, "Battle of Bands", category="CORE")]),
            scalars_result(
                [
                    make_event(1, "Hack Day", category="TECHNICAL"),
                    make_event(2, "Quiz Night", category="NON_TECHNICAL"),
                ]
            ),
        ]

        with patch(f"{RESOLVERS}.get_async_session", factory):
            events = await resolve_published_events(mock_info)

        assert [event.name for event in events] == ["Battle of Bands", "Hack Day", "Quiz Night"]
        assert session.execute.call_count == 2

        core_sql = str(session.execute.call_args_list[0][0][0])
        other_sql = str(session.execute.call_args_list[1][0][0])
        assert "events.category =" in core_sql
        assert "events.category !=" in other_sql
        assert "ORDER BY events.name ASC" in core_sql

    @pytest.mark.asyncio
    async def test_no_published_events(self, mock_info, mock_session):
        factory, session = mock_session
        session.execute.side_effect = [scalars_result([]), scalars_result([])]

        with patch(f"{RESOLVERS}.get_async_session", factory):
            assert await resolve_published_events(mock_info) == []


class TestResolveCompletedEvents:
    """Tests for resolve_completed_events."""

    @pytest.mark.asyncio
    async def test_returns_events_with_winners(self, mock_info, mock_session):
        factory, session = mock_session
        session.execute.return_value = scalars_result([make_event(4, "Battle of Bands")])

        with patch(f"{RESOLVERS}.get_async_session", factory):
            events = await resolve_completed_events(mock_info)

        assert [event.name for event in events] == ["Battle of Bands"]
        assert "FROM winners" in str(session.execute.call_args[0][0])


class TestResolveEventStatuses:
    """Tests for resolve_event_statuses."""

    @pytest.mark.asyncio
    async def test_classifies_published_events(self, mock_info, mock_session):
        factory, session = mock_session
        snapshots = [
            EventSnapshot(
                "Hack Day",
                (
                    RoundSnapshot(1, utc(2024, 5, 1), completed=True),
                    RoundSnapshot(2, utc(2024, 6, 15)),
                ),
            ),
            EventSnapshot("Battle of Bands", winner_count=1),
        ]
        fetch = AsyncMock(return_value=snapshots)

        with (
            patch(f"{RESOLVERS}.get_async_session", factory),
            patch(f"{RESOLVERS}.fetch_published_events_with_rounds_and_winners", fetch),
        ):
            statuses = await resolve_event_statuses(mock_info, utc(2024, 6, 1))

        fetch.assert_awaited_once_with(session)
        assert [(s.event_name, s.status) for s in statuses] == [
            ("Hack Day", YET_TO_START),
            ("Battle of Bands", COMPLETED),
        ]

    @pytest.mark.asyncio
    async def test_misordered_rounds_propagate(self, mock_info, mock_session):
        factory, _ = mock_session
        snapshots = [
            EventSnapshot("Hack Day", (RoundSnapshot(2, None), RoundSnapshot(1, None))),
        ]

        with (
            patch(f"{RESOLVERS}.get_async_session", factory),
            patch(
                f"{RESOLVERS}.fetch_published_events_with_rounds_and_winners",
                AsyncMock(return_value=snapshots),
            ),
        ):
            with pytest.raises(InvalidInputError):
                await resolve_event_statuses(mock_info, utc(2024, 6, 1))


class TestEventFieldResolvers:
    """Tests for Event.rounds and Event.winners."""

    @pytest.mark.asyncio
    async def test_rounds_use_loader(self, mock_info):
        event = _to_event_type(make_event(1, "Hack Day"))
        loader = mock_info.context["loaders"].round_loader
        loader.load = AsyncMock(
            return_value=[
                make_round(1, 1, utc(2024, 5, 1), completed=True),
                make_round(1, 2, None),
            ]
        )

        rounds = await resolve_event_rounds(event, mock_info)

        loader.load.assert_awaited_once_with(1)
        assert [(r.round_no, r.completed) for r in rounds] == [(1, True), (2, False)]
        assert rounds[1].date is None
        assert rounds[0].event_id == strawberry.ID("1")

    @pytest.mark.asyncio
    async def test_winners_use_loader(self, mock_info):
        event = _to_event_type(make_event(4, "Battle of Bands"))
        loader = mock_info.context["loaders"].winner_loader
        loader.load = AsyncMock(
            return_value=[
                make_winner(1, 4, 40, "WINNER"),
                make_winner(2, 4, 41, "RUNNER_UP"),
            ]
        )

        winners = await resolve_event_winners(event, mock_info)

        loader.load.assert_awaited_once_with(4)
        assert [w.type for w in winners] == [WinnerType.WINNER, WinnerType.RUNNER_UP]
        assert winners[1].team_id == "41"
