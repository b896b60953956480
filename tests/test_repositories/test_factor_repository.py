"""Tests for SqlFactorRepository.upsert_values."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from feed_engine.core.errors import DependencyError
from feed_engine.models.batch_factor import AnimalBatchFactor
from feed_engine.repositories.factors import SqlFactorRepository


def _result(row=None) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = row
    return result


@pytest.fixture
def events() -> list[str]:
    return []


@pytest.fixture
def session(events):
    """Mock session recording savepoint boundaries and statements in order."""
    session = MagicMock()
    savepoint = MagicMock()

    def enter():
        events.append("begin")

    def exit_(*args):
        events.append("end")
        return False

    savepoint.__aenter__ = AsyncMock(side_effect=enter)
    savepoint.__aexit__ = AsyncMock(side_effect=exit_)
    session.begin_nested.return_value = savepoint
    session.savepoint = savepoint

    session.results = []

    def execute(query):
        events.append("execute")
        return session.results.pop(0)

    session.execute = AsyncMock(side_effect=execute)
    session.flush = AsyncMock(side_effect=lambda: events.append("flush"))
    session.add = MagicMock(side_effect=lambda row: events.append("add"))
    return session


class TestUpsertValues:
    @pytest.mark.asyncio
    async def test_every_row_inside_one_savepoint(self, session, events):
        farm_id, batch_id = uuid4(), uuid4()
        existing = AnimalBatchFactor(
            farm_id=farm_id, batch_id=batch_id, animal_id=uuid4(), factor_id=uuid4(), factor_value="1.0"
        )
        new_animal, new_factor = uuid4(), uuid4()
        session.results = [_result(existing), _result(None)]

        saved = await SqlFactorRepository(session).upsert_values(
            farm_id,
            batch_id,
            [
                (existing.animal_id, existing.factor_id, "1.5"),
                (new_animal, new_factor, "0.8"),
            ],
        )

        assert events == ["begin", "execute", "execute", "add", "flush", "end"]
        session.begin_nested.assert_called_once()
        assert saved[0] is existing
        assert existing.factor_value == "1.5"
        assert saved[1].animal_id == new_animal
        assert saved[1].factor_id == new_factor
        assert saved[1].factor_value == "0.8"
        assert saved[1].farm_id == farm_id

    @pytest.mark.asyncio
    async def test_database_error_is_dependency_error(self, session):
        session.execute.side_effect = [
            _result(None),
            OperationalError("SELECT", {}, Exception("down")),
        ]

        with pytest.raises(DependencyError):
            await SqlFactorRepository(session).upsert_values(
                uuid4(), uuid4(), [(uuid4(), uuid4(), "1.0"), (uuid4(), uuid4(), "2.0")]
            )

        # The savepoint saw the error and rolled back both rows
        exc_type = session.savepoint.__aexit__.await_args.args[0]
        assert exc_type is OperationalError
        session.flush.assert_not_called()

    @pytest.mark.asyncio
    async def test_flush_error_is_dependency_error(self, session):
        session.results = [_result(None)]
        session.flush.side_effect = OperationalError("INSERT", {}, Exception("constraint"))

        with pytest.raises(DependencyError):
            await SqlFactorRepository(session).upsert_values(uuid4(), uuid4(), [(uuid4(), uuid4(), "1.0")])

        assert session.savepoint.__aexit__.await_args.args[0] is OperationalError
