"""State machine tests for the friendship service (no HTTP)."""
import pytest
from sqlalchemy import func, select

from pillarlog.core.errors import InvalidInput, NoPendingRequest, NotFound
from pillarlog.db.models import Friendship, Habit, Pillar
from pillarlog.services import friendship as svc

pytestmark = pytest.mark.asyncio(loop_scope="function")

ALICE, BOB, CAROL = 1, 2, 3


async def _rows(db) -> int:
    return await db.scalar(select(func.count()).select_from(Friendship))


class TestRequest:

    async def test_first_request_creates_pending_row(self, db, users):
        assert await svc.request_friendship(db, BOB, ALICE) == "pending"

        row = await svc.get_friendship(db, ALICE, BOB)
        assert (row.user_low, row.user_high) == (ALICE, BOB)
        assert row.requester_id == BOB
        assert row.status == "pending"

    async def test_repeated_request_is_idempotent(self, db, users):
        await svc.request_friendship(db, ALICE, BOB)
        assert await svc.request_friendship(db, ALICE, BOB) == "pending"
        # the other direction hits the same row too
        assert await svc.request_friendship(db, BOB, ALICE) == "pending"

        assert await _rows(db) == 1
        row = await svc.get_friendship(db, ALICE, BOB)
        assert row.requester_id == ALICE

    async def test_request_on_accepted_pair_keeps_accepted(self, db, users):
        await svc.request_friendship(db, ALICE, BOB)
        await svc.accept_friendship(db, BOB, ALICE)

        assert await svc.request_friendship(db, ALICE, BOB) == "accepted"
        assert await svc.request_friendship(db, BOB, ALICE) == "accepted"
        assert await _rows(db) == 1

    async def test_request_self_is_invalid(self, db, users):
        with pytest.raises(InvalidInput):
            await svc.request_friendship(db, ALICE, ALICE)

    async def test_request_unknown_user(self, db, users):
        with pytest.raises(NotFound):
            await svc.request_friendship(db, ALICE, 999)


class TestAccept:

    async def test_only_invitee_can_accept(self, db, users):
        await svc.request_friendship(db, ALICE, BOB)

        with pytest.raises(NoPendingRequest):
            await svc.accept_friendship(db, ALICE, BOB)

        await svc.accept_friendship(db, BOB, ALICE)
        row = await svc.get_friendship(db, ALICE, BOB)
        await db.refresh(row)
        assert row.status == "accepted"

    async def test_accept_without_request(self, db, users):
        with pytest.raises(NoPendingRequest):
            await svc.accept_friendship(db, BOB, ALICE)

    async def test_accept_twice_fails(self, db, users):
        await svc.request_friendship(db, ALICE, BOB)
        await svc.accept_friendship(db, BOB, ALICE)
        with pytest.raises(NoPendingRequest):
            await svc.accept_friendship(db, BOB, ALICE)

    async def test_accept_after_decline_fails(self, db, users):
        await svc.request_friendship(db, ALICE, BOB)
        await svc.decline_friendship(db, BOB, ALICE)
        with pytest.raises(NoPendingRequest):
            await svc.accept_friendship(db, BOB, ALICE)


class TestDecline:

    async def test_either_side_can_decline(self, db, users):
        await svc.request_friendship(db, ALICE, BOB)
        assert await svc.decline_friendship(db, ALICE, BOB) is True

        await svc.request_friendship(db, ALICE, CAROL)
        assert await svc.decline_friendship(db, CAROL, ALICE) is True

    async def test_decline_without_pending_is_noop(self, db, users):
        assert await svc.decline_friendship(db, ALICE, BOB) is False

        await svc.request_friendship(db, ALICE, BOB)
        await svc.accept_friendship(db, BOB, ALICE)
        assert await svc.decline_friendship(db, BOB, ALICE) is False

        row = await svc.get_friendship(db, ALICE, BOB)
        await db.refresh(row)
        assert row.status == "accepted"

    async def test_decline_then_accept_race_has_one_winner(self, db, users):
        await svc.request_friendship(db, ALICE, BOB)
        assert await svc.decline_friendship(db, ALICE, BOB) is True
        with pytest.raises(NoPendingRequest):
            await svc.accept_friendship(db, BOB, ALICE)


async def test_declined_cycle_ends_with_last_requester(db, users):
    await svc.request_friendship(db, ALICE, BOB)
    await svc.decline_friendship(db, BOB, ALICE)

    # bob asks back after declining
    assert await svc.request_friendship(db, BOB, ALICE) == "pending"
    row = await svc.get_friendship(db, ALICE, BOB)
    await db.refresh(row)
    assert row.requester_id == BOB

    # bob is now the requester, so only alice may accept
    with pytest.raises(NoPendingRequest):
        await svc.accept_friendship(db, BOB, ALICE)
    await svc.accept_friendship(db, ALICE, BOB)

    await db.refresh(row)
    assert row.status == "accepted"
    assert row.requester_id == BOB
    assert await _rows(db) == 1


async def test_list_accepted_is_symmetric(db, users):
    await svc.request_friendship(db, ALICE, BOB)
    await svc.accept_friendship(db, BOB, ALICE)
    await svc.request_friendship(db, CAROL, ALICE)

    assert [u.id for u in await svc.list_accepted_friends(db, ALICE)] == [BOB]
    assert [u.id for u in await svc.list_accepted_friends(db, BOB)] == [ALICE]
    assert await svc.list_accepted_friends(db, CAROL) == []


async def test_list_incoming_excludes_sent_requests(db, users):
    await svc.request_friendship(db, BOB, ALICE)
    await svc.request_friendship(db, ALICE, CAROL)

    assert [u.id for u in await svc.list_incoming_requests(db, ALICE)] == [BOB]
    assert [u.id for u in await svc.list_incoming_requests(db, CAROL)] == [ALICE]
    assert await svc.list_incoming_requests(db, BOB) == []


async def test_find_by_friend_code(db, users):
    found = await svc.find_by_friend_code(db, BOB, " alice1 ")
    assert found.id == ALICE

    with pytest.raises(InvalidInput):
        await svc.find_by_friend_code(db, ALICE, "ALICE1")
    with pytest.raises(NotFound):
        await svc.find_by_friend_code(db, ALICE, "NOPE00")


async def test_ensure_friend_code_assigns_once(db, users):
    from pillarlog.db.models import User

    bob = await db.get(User, BOB)
    code = await svc.ensure_friend_code(db, bob)

    assert len(code) == svc.FRIEND_CODE_LENGTH
    assert set(code) <= set(svc.FRIEND_CODE_ALPHABET)
    assert await svc.ensure_friend_code(db, bob) == code


async def test_shared_habits_only_between_friends(db, users):
    for owner, titles in ((ALICE, ["Read", "Run", "Stretch"]), (BOB, ["Run", "Read", "Read"])):
        pillar = Pillar(user_id=owner, title="Health")
        db.add(pillar)
        await db.flush()
        db.add_all([Habit(user_id=owner, pillar_id=pillar.id, title=t) for t in titles])
    await db.commit()

    with pytest.raises(NotFound):
        await svc.shared_habit_titles(db, ALICE, BOB)

    await svc.request_friendship(db, ALICE, BOB)
    await svc.accept_friendship(db, BOB, ALICE)
    assert await svc.shared_habit_titles(db, ALICE, BOB) == ["Read", "Run"]


class TestInsertRace:
    """The existence check misses a row another request has just written."""

    @pytest.fixture
    def miss_next_lookup(self, monkeypatch):
        real_lookup = svc._friendship_id
        calls = []

        async def lookup(*args):
            calls.append(args)
            if len(calls) == 1:
                return None
            return await real_lookup(*args)

        def arm():
            monkeypatch.setattr(svc, "_friendship_id", lookup)
            return calls

        return arm

    async def test_pending_row_wins(self, db, session_factory, users, miss_next_lookup):
        async with session_factory() as other:
            await svc.request_friendship(other, BOB, ALICE)
        lookups = miss_next_lookup()

        assert await svc.request_friendship(db, ALICE, BOB) == "pending"
        assert len(lookups) == 1

        row = await svc.get_friendship(db, ALICE, BOB)
        assert row.requester_id == BOB
        assert await _rows(db) == 1

    async def test_declined_row_is_reopened(self, db, session_factory, users, miss_next_lookup):
        async with session_factory() as other:
            await svc.request_friendship(other, BOB, ALICE)
            await svc.decline_friendship(other, ALICE, BOB)
        lookups = miss_next_lookup()

        assert await svc.request_friendship(db, ALICE, BOB) == "pending"

        row = await svc.get_friendship(db, ALICE, BOB)
        assert (row.status, row.requester_id) == ("pending", ALICE)
        assert len(lookups) == 1
        assert await _rows(db) == 1
