# tests/services/test_vote_ledger.py
"""Tests for the vote ledger and its duplicate policies."""

import pytest
from sqlalchemy.exc import OperationalError

from slapboard.core.errors import (
    DuplicateVoteError,
    NotFoundOrNotApproved,
    StorageUnavailableError,
)
from slapboard.models import Vote
from slapboard.services.identity import VoterIdentity
from slapboard.services.ledger import VoteDuplicatePolicy, VoteLedger

VOTER = VoterIdentity(address="203.0.113.7", device_id="device-a")


@pytest.fixture()
def post(make_post):
    return make_post("Ada Lovelace")


@pytest.fixture()
def love(default_actions):
    return default_actions["love"]


def _vote_count(db_session, post_id: int) -> int:
    return db_session.query(Vote).filter(Vote.post_id == post_id).count()


def test_default_policy_is_strict_reject(db_session) -> None:
    assert VoteLedger(db_session).policy is VoteDuplicatePolicy.STRICT_REJECT


def test_create_vote_records_provenance(db_session, post, love, clock) -> None:
    ledger = VoteLedger(db_session, policy="strict-reject", clock=clock)

    result = ledger.create_vote(post.id, love.id, VOTER)

    assert result.removed is False
    vote = result.vote
    assert vote is not None
    assert vote.ip_address == "203.0.113.7"
    assert vote.device_id == "device-a"
    assert vote.voter_key == "203.0.113.7"
    assert vote.dedup_key == "203.0.113.7"
    assert ledger.has_voted(post.id, love.id, VOTER.key)


def test_strict_reject_refuses_repeat(db_session, post, love) -> None:
    ledger = VoteLedger(db_session, policy=VoteDuplicatePolicy.STRICT_REJECT)
    ledger.create_vote(post.id, love.id, VOTER)

    with pytest.raises(DuplicateVoteError):
        ledger.create_vote(post.id, love.id, VOTER)

    assert _vote_count(db_session, post.id) == 1


def test_strict_reject_allows_other_actions_and_voters(db_session, post, default_actions) -> None:
    ledger = VoteLedger(db_session, policy=VoteDuplicatePolicy.STRICT_REJECT)
    ledger.create_vote(post.id, default_actions["love"].id, VOTER)
    ledger.create_vote(post.id, default_actions["slap"].id, VOTER)
    ledger.create_vote(post.id, default_actions["love"].id, VoterIdentity("203.0.113.8"))

    assert _vote_count(db_session, post.id) == 3
    assert ledger.voted_actions(post.id, VOTER.key) == sorted(
        [default_actions["love"].id, default_actions["slap"].id]
    )


def test_strict_toggle_withdraws_repeat(db_session, post, love) -> None:
    ledger = VoteLedger(db_session, policy=VoteDuplicatePolicy.STRICT_TOGGLE)
    ledger.create_vote(post.id, love.id, VOTER)

    result = ledger.create_vote(post.id, love.id, VOTER)

    assert result.removed is True
    assert result.vote is None
    assert _vote_count(db_session, post.id) == 0

    again = ledger.create_vote(post.id, love.id, VOTER)
    assert again.removed is False
    assert _vote_count(db_session, post.id) == 1


def test_open_policy_records_every_vote(db_session, post, love) -> None:
    ledger = VoteLedger(db_session, policy=VoteDuplicatePolicy.OPEN)
    for _ in range(3):
        result = ledger.create_vote(post.id, love.id, VOTER)
        assert result.vote is not None
        assert result.vote.dedup_key is None

    assert _vote_count(db_session, post.id) == 3


def test_storage_constraint_backs_strict_modes(db_session, post, love) -> None:
    """A duplicate that slips past the read check still hits the unique constraint."""
    ledger = VoteLedger(db_session, policy=VoteDuplicatePolicy.STRICT_REJECT)
    ledger.create_vote(post.id, love.id, VOTER)
    ledger._existing_votes = lambda *args: []  # simulate a concurrent request

    with pytest.raises(DuplicateVoteError):
        ledger.create_vote(post.id, love.id, VOTER)

    assert _vote_count(db_session, post.id) == 1


def test_device_scoped_identity(db_session, post, love) -> None:
    ledger = VoteLedger(db_session, policy=VoteDuplicatePolicy.STRICT_REJECT)
    phone = VoterIdentity("203.0.113.7", "phone", include_device=True)
    laptop = VoterIdentity("203.0.113.7", "laptop", include_device=True)

    ledger.create_vote(post.id, love.id, phone)
    ledger.create_vote(post.id, love.id, laptop)

    assert _vote_count(db_session, post.id) == 2
    with pytest.raises(DuplicateVoteError):
        ledger.create_vote(post.id, love.id, phone)


def test_delete_vote(db_session, post, love) -> None:
    ledger = VoteLedger(db_session, policy=VoteDuplicatePolicy.STRICT_REJECT)
    ledger.create_vote(post.id, love.id, VOTER)

    assert ledger.delete_vote(post.id, love.id, VOTER.key) == 1
    assert ledger.delete_vote(post.id, love.id, VOTER.key) == 0
    assert not ledger.has_voted(post.id, love.id, VOTER.key)


def test_duplicate_check_failure_fails_closed(db_session, post, love, monkeypatch) -> None:
    ledger = VoteLedger(db_session, policy=VoteDuplicatePolicy.STRICT_REJECT)

    def _broken(*args):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(ledger, "_existing_votes", _broken)
    with pytest.raises(StorageUnavailableError):
        ledger.create_vote(post.id, love.id, VOTER)
    assert _vote_count(db_session, post.id) == 0


@pytest.mark.parametrize("policy", list(VoteDuplicatePolicy))
def test_vote_on_missing_post_is_not_found(db_session, love, policy) -> None:
    ledger = VoteLedger(db_session, policy=policy)

    with pytest.raises(NotFoundOrNotApproved):
        ledger.create_vote(99999, love.id, VOTER)

    assert db_session.query(Vote).count() == 0


def test_vote_on_missing_action_is_not_found(db_session, post) -> None:
    ledger = VoteLedger(db_session, policy=VoteDuplicatePolicy.STRICT_REJECT)

    with pytest.raises(NotFoundOrNotApproved):
        ledger.create_vote(post.id, 99999, VOTER)

    assert _vote_count(db_session, post.id) == 0
