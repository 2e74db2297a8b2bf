"""Tests for single and batch response commitments."""

import pytest

from prompt_ledger.models import LedgerEvent
from prompt_ledger.services.errors import (
    InvalidLengthError,
    ResponseAlreadySetError,
    UnauthorizedError,
    ZeroIdentifierError,
)
from prompt_ledger.services.events import RESPONSE_BATCH_SET, RESPONSE_SET
from prompt_ledger.utils.identifiers import ZERO_ID
from tests.factories import ALICE, MAX_BATCH_SIZE, OPERATOR, SESSION_KEEPER, hexid, rid


def test_response_reads_zero_until_set(ledger) -> None:
    ledger.submit_prompt(ALICE, rid(1), rid(0xAA))
    assert ledger.get_response(rid(1)) == ZERO_ID

    ledger.set_response(OPERATOR, rid(1), rid(0xCC))

    assert ledger.get_response(rid(1)) == rid(0xCC)


def test_response_is_write_once(ledger) -> None:
    ledger.set_response(OPERATOR, rid(1), rid(0xCC))

    with pytest.raises(ResponseAlreadySetError):
        ledger.set_response(OPERATOR, rid(1), rid(0xDD))

    assert ledger.get_response(rid(1)) == rid(0xCC)


def test_response_does_not_require_a_submitted_prompt(ledger) -> None:
    ledger.set_response(OPERATOR, rid(42), rid(0xCC))
    assert ledger.get_response(rid(42)) == rid(0xCC)
    assert ledger.total_requests() == 0


@pytest.mark.parametrize("caller", [ALICE, SESSION_KEEPER])
def test_only_operator_may_set_responses(ledger, caller: str) -> None:
    with pytest.raises(UnauthorizedError):
        ledger.set_response(caller, rid(1), rid(0xCC))
    with pytest.raises(UnauthorizedError):
        ledger.set_response_batch(caller, [rid(1)], [rid(0xCC)])
    assert ledger.get_response(rid(1)) == ZERO_ID


def test_zero_request_id_or_hash_is_rejected(ledger) -> None:
    with pytest.raises(ZeroIdentifierError):
        ledger.set_response(OPERATOR, ZERO_ID, rid(0xCC))
    with pytest.raises(ZeroIdentifierError):
        ledger.set_response(OPERATOR, rid(1), ZERO_ID)
    assert ledger.get_response(rid(1)) == ZERO_ID


def test_operator_can_respond_while_paused(ledger) -> None:
    ledger.submit_prompt(ALICE, rid(1), rid(0xAA))
    ledger.set_paused(OPERATOR, True)

    ledger.set_response(OPERATOR, rid(1), rid(0xCC))
    written = ledger.set_response_batch(OPERATOR, [rid(2)], [rid(0xDD)])

    assert ledger.get_response(rid(1)) == rid(0xCC)
    assert written == 1


def test_single_response_emits_event(ledger, db_session) -> None:
    ledger.set_response(OPERATOR, rid(1), rid(0xCC))

    event = db_session.query(LedgerEvent).filter(LedgerEvent.kind == RESPONSE_SET).one()
    assert event.payload == {"request_id": hexid(1), "response_hash": hexid(0xCC)}
    assert event.block == ledger.current_block()


def test_batch_writes_every_valid_item(ledger) -> None:
    written = ledger.set_response_batch(
        OPERATOR,
        [rid(1), rid(2), rid(3)],
        [rid(0xA1), rid(0xA2), rid(0xA3)],
    )

    assert written == 3
    assert [ledger.get_response(rid(n)) for n in (1, 2, 3)] == [rid(0xA1), rid(0xA2), rid(0xA3)]


def test_batch_skips_zero_and_already_set_items(ledger) -> None:
    ledger.set_response(OPERATOR, rid(2), rid(0xB2))

    written = ledger.set_response_batch(
        OPERATOR,
        [ZERO_ID, rid(2), rid(3), rid(4)],
        [rid(0xA0), rid(0xFF), rid(0xA3), ZERO_ID],
    )

    assert written == 1
    assert ledger.get_response(ZERO_ID) == ZERO_ID
    assert ledger.get_response(rid(2)) == rid(0xB2)
    assert ledger.get_response(rid(3)) == rid(0xA3)
    assert ledger.get_response(rid(4)) == ZERO_ID


def test_batch_keeps_first_of_duplicate_ids(ledger) -> None:
    written = ledger.set_response_batch(
        OPERATOR,
        [rid(5), rid(5)],
        [rid(0xA1), rid(0xA2)],
    )

    assert written == 1
    assert ledger.get_response(rid(5)) == rid(0xA1)


def test_batch_event_carries_nominal_length(ledger, db_session) -> None:
    ledger.set_response(OPERATOR, rid(1), rid(0xB1))
    ledger.set_response_batch(OPERATOR, [rid(1), rid(2)], [rid(0xA1), rid(0xA2)])

    event = db_session.query(LedgerEvent).filter(LedgerEvent.kind == RESPONSE_BATCH_SET).one()
    assert event.payload == {"count": 2}
    assert event.block == ledger.current_block()


@pytest.mark.parametrize(
    ("ids", "hashes"),
    [
        ([rid(1), rid(2)], [rid(0xA1)]),
        ([], []),
        ([rid(n) for n in range(1, MAX_BATCH_SIZE + 2)], [rid(0xA1)] * (MAX_BATCH_SIZE + 1)),
    ],
    ids=["mismatched", "empty", "oversized"],
)
def test_invalid_batch_lengths_write_nothing(ledger, ids, hashes) -> None:
    block_before = ledger.current_block()

    with pytest.raises(InvalidLengthError):
        ledger.set_response_batch(OPERATOR, ids, hashes)

    assert ledger.current_block() == block_before
    assert all(ledger.get_response(request_id) == ZERO_ID for request_id in ids)


def test_batch_at_maximum_size_is_accepted(ledger) -> None:
    ids = [rid(n) for n in range(1, MAX_BATCH_SIZE + 1)]
    written = ledger.set_response_batch(OPERATOR, ids, [rid(0xA1)] * MAX_BATCH_SIZE)
    assert written == MAX_BATCH_SIZE
