"""Tests for prompt submission and the request index."""

import pytest

from prompt_ledger.services.errors import (
    AlreadySubmittedError,
    CapacityExceededError,
    InvalidIdentityError,
    InvalidIndexError,
    LedgerPausedError,
    ZeroIdentifierError,
)
from prompt_ledger.utils.identifiers import ZERO_ADDRESS, ZERO_ID
from tests.factories import ALICE, BOB, MAX_TOTAL_REQUESTS, OPERATOR, rid


def test_submit_prompt_records_sender_block_and_hash(ledger) -> None:
    """A first submission stores the caller, the sequence marker and the hash."""
    record = ledger.submit_prompt(ALICE, rid(1), rid(0xAA))

    assert record.sender == ALICE
    assert record.order_index == 0
    assert ledger.get_prompt_sender(rid(1)) == ALICE
    assert ledger.get_prompt_block(rid(1)) == record.block == ledger.current_block()
    assert ledger.get_prompt_hash(rid(1)) == rid(0xAA)
    assert ledger.total_requests() == 1


def test_duplicate_submission_is_rejected_and_original_kept(ledger) -> None:
    ledger.submit_prompt(ALICE, rid(1), rid(0xAA))

    with pytest.raises(AlreadySubmittedError):
        ledger.submit_prompt(BOB, rid(1), rid(0xBB))

    assert ledger.get_prompt_sender(rid(1)) == ALICE
    assert ledger.get_prompt_hash(rid(1)) == rid(0xAA)
    assert ledger.get_response(rid(1)) == ZERO_ID
    assert ledger.total_requests() == 1


def test_zero_request_id_is_rejected(ledger) -> None:
    with pytest.raises(ZeroIdentifierError):
        ledger.submit_prompt(ALICE, ZERO_ID, rid(0xAA))
    assert ledger.total_requests() == 0
    assert ledger.current_block() == 0


def test_each_submission_increments_total_by_one(ledger) -> None:
    for n in range(1, 4):
        ledger.submit_prompt(ALICE, rid(n), rid(n + 100))
        assert ledger.total_requests() == n


def test_capacity_is_enforced(ledger) -> None:
    for n in range(1, MAX_TOTAL_REQUESTS + 1):
        ledger.submit_prompt(ALICE, rid(n), rid(0xAA))

    with pytest.raises(CapacityExceededError):
        ledger.submit_prompt(ALICE, rid(99), rid(0xAA))

    assert ledger.total_requests() == MAX_TOTAL_REQUESTS
    assert ledger.get_prompt(rid(99)) is None


def test_duplicate_is_reported_before_capacity(ledger) -> None:
    for n in range(1, MAX_TOTAL_REQUESTS + 1):
        ledger.submit_prompt(ALICE, rid(n), rid(0xAA))

    with pytest.raises(AlreadySubmittedError):
        ledger.submit_prompt(ALICE, rid(1), rid(0xAA))


def test_paused_ledger_rejects_submissions(ledger) -> None:
    ledger.set_paused(OPERATOR, True)

    with pytest.raises(LedgerPausedError):
        ledger.submit_prompt(ALICE, rid(1), rid(0xAA))

    ledger.set_paused(OPERATOR, False)
    ledger.submit_prompt(ALICE, rid(1), rid(0xAA))
    assert ledger.total_requests() == 1


def test_pause_is_checked_before_argument_errors(ledger) -> None:
    ledger.set_paused(OPERATOR, True)
    with pytest.raises(LedgerPausedError):
        ledger.submit_prompt(ALICE, ZERO_ID, rid(0xAA))


def test_privileged_identities_may_also_submit(ledger) -> None:
    ledger.submit_prompt(OPERATOR, rid(1), rid(0xAA))
    assert ledger.get_prompt_sender(rid(1)) == OPERATOR


def test_caller_address_is_normalized(ledger) -> None:
    ledger.submit_prompt(ALICE.upper().replace("0X", "0x"), rid(1), rid(0xAA))
    assert ledger.get_prompt_sender(rid(1)) == ALICE


@pytest.mark.parametrize("caller", [ZERO_ADDRESS, "not-an-address", "0x1234"])
def test_invalid_caller_is_rejected(ledger, caller: str) -> None:
    with pytest.raises(InvalidIdentityError):
        ledger.submit_prompt(caller, rid(1), rid(0xAA))


def test_wrong_width_identifier_is_a_value_error(ledger) -> None:
    with pytest.raises(ValueError):
        ledger.submit_prompt(ALICE, b"\x01", rid(0xAA))


def test_absent_prompt_reads_as_defaults(ledger) -> None:
    assert ledger.get_prompt_sender(rid(7)) == ZERO_ADDRESS
    assert ledger.get_prompt_block(rid(7)) == 0
    assert ledger.get_prompt_hash(rid(7)) == ZERO_ID
    assert ledger.get_prompt(rid(7)) is None


def test_request_index_preserves_submission_order(ledger) -> None:
    ids = [rid(30), rid(10), rid(20)]
    for request_id in ids:
        ledger.submit_prompt(ALICE, request_id, rid(0xAA))

    assert [ledger.get_request_at(i) for i in range(3)] == ids


@pytest.mark.parametrize("index", [-1, 2, 3, 100])
def test_request_index_is_bounds_checked(ledger, index: int) -> None:
    ledger.submit_prompt(ALICE, rid(1), rid(0xAA))
    ledger.submit_prompt(ALICE, rid(2), rid(0xAA))

    with pytest.raises(InvalidIndexError):
        ledger.get_request_at(index)


def test_request_index_on_empty_ledger(ledger) -> None:
    with pytest.raises(InvalidIndexError):
        ledger.get_request_at(0)


def test_blocks_advance_once_per_committed_call(ledger) -> None:
    first = ledger.submit_prompt(ALICE, rid(1), rid(0xAA)).block
    with pytest.raises(AlreadySubmittedError):
        ledger.submit_prompt(ALICE, rid(1), rid(0xAA))
    second = ledger.submit_prompt(ALICE, rid(2), rid(0xAA)).block

    assert second == first + 1
