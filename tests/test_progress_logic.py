import pytest
from sqlalchemy.exc import IntegrityError

from achievement_api.exceptions import ConflictException, NotFoundException
from achievement_api.router.api.logics.progress_logic import _commit


class FailingSession:
    """Stands in for an AsyncSession whose commit is rejected by the database."""

    def __init__(self, message):
        self.error = IntegrityError("INSERT INTO user_achievement_progress ...", {}, Exception(message))
        self.rolled_back = False

    async def commit(self):
        raise self.error

    async def rollback(self):
        self.rolled_back = True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "message",
    [
        'duplicate key value violates unique constraint "uq_progress_user_achievement"',
        "UNIQUE constraint failed: user_achievement_progress.user_id, user_achievement_progress.achievement_id",
    ],
)
async def test_unique_pair_violation_is_a_conflict(message):
    db = FailingSession(message)
    with pytest.raises(ConflictException) as exc_info:
        await _commit(db)
    assert exc_info.value.status_code == 409
    assert db.rolled_back


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "message",
    [
        'insert or update on table "user_achievement_progress" violates foreign key constraint '
        '"user_achievement_progress_achievement_id_fkey"',
        "FOREIGN KEY constraint failed",
    ],
)
async def test_vanished_achievement_is_not_found(message):
    db = FailingSession(message)
    with pytest.raises(NotFoundException) as exc_info:
        await _commit(db)
    assert exc_info.value.detail == "Achievement not found"
    assert db.rolled_back


@pytest.mark.asyncio
async def test_other_integrity_errors_propagate():
    db = FailingSession("NOT NULL constraint failed: user_achievement_progress.user_id")
    with pytest.raises(IntegrityError):
        await _commit(db)
    assert db.rolled_back
