# tests/test_db_utils.py
import pytest

from interior_ledger.core.db_utils import is_connection_error, with_db_retry


class OperationalError(Exception):
    pass


def test_connection_errors_are_recognized_by_name():
    assert is_connection_error(OperationalError("server closed the connection"))
    assert not is_connection_error(ValueError("bad input"))


async def test_session_is_rolled_back_before_each_retry(db, monkeypatch):
    rollbacks = []
    attempts = []

    async def recording_rollback():
        rollbacks.append(len(attempts))

    monkeypatch.setattr(db, "rollback", recording_rollback)

    @with_db_retry(max_retries=3, retry_delay=0)
    async def read_rows(db):
        attempts.append(db)
        if len(attempts) < 3:
            raise OperationalError("server closed the connection")
        return "rows"

    assert await read_rows(db) == "rows"
    assert len(attempts) == 3
    assert rollbacks == [1, 2]


async def test_other_errors_are_not_retried(db):
    attempts = []

    @with_db_retry(max_retries=3, retry_delay=0)
    async def read_rows(db):
        attempts.append(db)
        raise ValueError("bad input")

    with pytest.raises(ValueError):
        await read_rows(db)
    assert len(attempts) == 1
