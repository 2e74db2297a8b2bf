"""The ledger aggregate.

``Ledger`` owns the prompt, response and session registries together with
the access/lifecycle guard. One instance wraps one database session; every
mutating entry point runs inside the reentry guard, commits on success and
rolls back on any rejection.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar, cast

from sqlalchemy.orm import Session

from prompt_ledger.core.settings import Settings, settings
from prompt_ledger.models import (
    LedgerEvent,
    LedgerSession,
    LedgerState,
    PromptRecord,
    ResponseRecord,
    SessionRequest,
)
from prompt_ledger.services import events as ev
from prompt_ledger.services.errors import (
    AlreadySubmittedError,
    CapacityExceededError,
    InvalidIdentityError,
    InvalidIndexError,
    InvalidLengthError,
    InvalidSessionError,
    LedgerPausedError,
    ResponseAlreadySetError,
    SessionExistsError,
    UnauthorizedError,
    ZeroIdentifierError,
)
from prompt_ledger.services.events import EventBus, Subscriber, get_event_bus
from prompt_ledger.utils.identifiers import (
    IDENTIFIER_BYTES,
    ZERO_ADDRESS,
    ZERO_ID,
    format_identifier,
    is_zero,
    normalize_address,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def guarded(method: F) -> F:
    """Run a mutating ledger method inside the reentry guard.

    The guard lives on the event bus, so it spans every ledger built on that
    bus. It is held for the whole call, including subscriber fan-out, and
    released on every exit path. The transaction commits when the method
    returns and rolls back when it raises.
    """

    @functools.wraps(method)
    def wrapper(self: Ledger, *args: Any, **kwargs: Any) -> Any:
        with self._bus.exclusive(method.__name__):
            self._pending = []
            try:
                result = method(self, *args, **kwargs)
                self._db.commit()
            except Exception:
                self._db.rollback()
                self._pending = []
                raise
            committed, self._pending = self._pending, []
            self._bus.publish(committed)
            return result

    return cast(F, wrapper)


def _check_width(value: bytes, name: str) -> None:
    if not isinstance(value, bytes | bytearray) or len(value) != IDENTIFIER_BYTES:
        raise ValueError(f"{name} must be {IDENTIFIER_BYTES} bytes")


class Ledger:
    """Append-only, access-controlled prompt/response ledger."""

    def __init__(
        self,
        db: Session,
        *,
        operator: str,
        session_keeper: str,
        max_total_requests: int,
        max_session_requests: int,
        max_batch_size: int,
        bus: EventBus | None = None,
    ) -> None:
        self._operator = self._privileged_identity(operator, "operator")
        self._session_keeper = self._privileged_identity(session_keeper, "session keeper")
        for name, limit in (
            ("max_total_requests", max_total_requests),
            ("max_session_requests", max_session_requests),
            ("max_batch_size", max_batch_size),
        ):
            if limit < 1:
                raise ValueError(f"{name} must be at least 1")
        self._db = db
        self._max_total_requests = max_total_requests
        self._max_session_requests = max_session_requests
        self._max_batch_size = max_batch_size
        self._bus = bus if bus is not None else EventBus()
        self._pending: list[LedgerEvent] = []

    # --- Identities and limits ------------------------------------------------------
    @staticmethod
    def _privileged_identity(value: str, role: str) -> str:
        try:
            address = normalize_address(value)
        except (TypeError, ValueError) as err:
            raise InvalidIdentityError(f"Invalid {role} address: {value!r}") from err
        if address == ZERO_ADDRESS:
            raise InvalidIdentityError(f"The {role} address must not be the zero address")
        return address

    @property
    def operator(self) -> str:
        return self._operator

    @property
    def session_keeper(self) -> str:
        return self._session_keeper

    @property
    def max_total_requests(self) -> int:
        return self._max_total_requests

    @property
    def max_session_requests(self) -> int:
        return self._max_session_requests

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback on the shared bus.

        The subscription belongs to the bus, not to this instance, and stays
        in place until the returned function is called.
        """
        return self._bus.subscribe(callback)

    # --- Internal helpers -----------------------------------------------------------
    def _caller(self, caller: str) -> str:
        try:
            address = normalize_address(caller)
        except (TypeError, ValueError) as err:
            raise InvalidIdentityError(f"Invalid caller address: {caller!r}") from err
        if address == ZERO_ADDRESS:
            raise InvalidIdentityError("Caller must not be the zero address")
        return address

    def _require_role(self, caller: str, required: str, role: str, action: str) -> str:
        address = self._caller(caller)
        if address != required:
            logger.warning("Rejected %s from %s: %s role required", action, address, role)
            raise UnauthorizedError(f"Only the {role} may {action}")
        return address

    def _load_state(self) -> LedgerState:
        state = self._db.get(LedgerState, 1)
        if state is None:
            state = LedgerState(
                id=1,
                paused=False,
                block_seq=0,
                request_total=0,
                session_total=0,
            )
            self._db.add(state)
        return state

    @staticmethod
    def _advance_block(state: LedgerState) -> int:
        state.block_seq += 1
        return state.block_seq

    def _emit(self, kind: str, block: int, **payload: Any) -> None:
        self._pending.append(ev.record_event(self._db, kind, block, **payload))

    # --- Prompt registry ------------------------------------------------------------
    @guarded
    def submit_prompt(self, caller: str, request_id: bytes, prompt_hash: bytes) -> PromptRecord:
        """Record a prompt for ``request_id`` on behalf of any caller.

        Raises:
            LedgerPausedError: The ledger is paused.
            ZeroIdentifierError: ``request_id`` is the zero sentinel.
            AlreadySubmittedError: A prompt already exists for ``request_id``.
            CapacityExceededError: The global request index is full.
        """
        sender = self._caller(caller)
        _check_width(request_id, "request_id")
        _check_width(prompt_hash, "prompt_hash")

        state = self._load_state()
        if state.paused:
            raise LedgerPausedError("Ledger is paused; submissions are disabled")
        if is_zero(request_id):
            raise ZeroIdentifierError("request_id must be non-zero")
        if self._db.get(PromptRecord, bytes(request_id)) is not None:
            raise AlreadySubmittedError(
                f"Prompt already submitted for {format_identifier(request_id)}"
            )
        if state.request_total >= self._max_total_requests:
            raise CapacityExceededError(
                f"Request index is full ({self._max_total_requests} requests)"
            )

        block = self._advance_block(state)
        record = PromptRecord(
            request_id=bytes(request_id),
            order_index=state.request_total,
            sender=sender,
            block=block,
            prompt_hash=bytes(prompt_hash),
        )
        self._db.add(record)
        state.request_total += 1
        self._emit(
            ev.PROMPT_SUBMITTED,
            block,
            sender=sender,
            request_id=format_identifier(request_id),
            prompt_hash=format_identifier(prompt_hash),
        )
        logger.debug("Prompt %s submitted by %s at block %d", request_id.hex(), sender, block)
        return record

    # --- Response registry ----------------------------------------------------------
    @guarded
    def set_response(self, caller: str, request_id: bytes, response_hash: bytes) -> ResponseRecord:
        """Write the response for ``request_id`` exactly once.

        Not gated by pause so the operator can drain a backlog.

        Raises:
            UnauthorizedError: The caller is not the operator.
            ZeroIdentifierError: ``request_id`` or ``response_hash`` is zero.
            ResponseAlreadySetError: A response is already recorded.
        """
        self._require_role(caller, self._operator, "operator", "set responses")
        _check_width(request_id, "request_id")
        _check_width(response_hash, "response_hash")

        if is_zero(request_id):
            raise ZeroIdentifierError("request_id must be non-zero")
        # A zero hash would read back as "not yet set".
        if is_zero(response_hash):
            raise ZeroIdentifierError("response_hash must be non-zero")
        if self._db.get(ResponseRecord, bytes(request_id)) is not None:
            raise ResponseAlreadySetError(
                f"Response already set for {format_identifier(request_id)}"
            )

        state = self._load_state()
        block = self._advance_block(state)
        record = ResponseRecord(
            request_id=bytes(request_id),
            response_hash=bytes(response_hash),
            block=block,
        )
        self._db.add(record)
        self._emit(
            ev.RESPONSE_SET,
            block,
            request_id=format_identifier(request_id),
            response_hash=format_identifier(response_hash),
        )
        logger.info("Response set for %s at block %d", request_id.hex(), block)
        return record

    @guarded
    def set_response_batch(
        self,
        caller: str,
        request_ids: Sequence[bytes],
        response_hashes: Sequence[bytes],
    ) -> int:
        """Write many responses, skipping items that cannot be written.

        An item is skipped without error when its request id or hash is zero,
        or when a response already exists (including one written earlier in
        the same batch). The emitted event carries the nominal batch length;
        the return value is the number of responses actually written.

        Raises:
            UnauthorizedError: The caller is not the operator.
            InvalidLengthError: The sequences differ in length, are empty,
                or exceed the maximum batch size. Nothing is written.
        """
        self._require_role(caller, self._operator, "operator", "set responses")
        if len(request_ids) != len(response_hashes):
            raise InvalidLengthError(
                f"Length mismatch: {len(request_ids)} ids, {len(response_hashes)} hashes"
            )
        if not request_ids or len(request_ids) > self._max_batch_size:
            raise InvalidLengthError(
                f"Batch length must be between 1 and {self._max_batch_size}, "
                f"got {len(request_ids)}"
            )
        for request_id, response_hash in zip(request_ids, response_hashes):
            _check_width(request_id, "request_id")
            _check_width(response_hash, "response_hash")

        state = self._load_state()
        block = self._advance_block(state)
        written: set[bytes] = set()
        for request_id, response_hash in zip(request_ids, response_hashes):
            key = bytes(request_id)
            if (
                is_zero(key)
                or is_zero(response_hash)
                or key in written
                or self._db.get(ResponseRecord, key) is not None
            ):
                logger.debug("Skipping batch response for %s", key.hex())
                continue
            self._db.add(
                ResponseRecord(request_id=key, response_hash=bytes(response_hash), block=block)
            )
            written.add(key)

        self._emit(ev.RESPONSE_BATCH_SET, block, count=len(request_ids))
        logger.info(
            "Response batch of %d applied at block %d (%d written)",
            len(request_ids),
            block,
            len(written),
        )
        return len(written)

    # --- Session registry -----------------------------------------------------------
    @guarded
    def create_session(self, caller: str, session_id: bytes) -> LedgerSession:
        """Create an empty session.

        Raises:
            UnauthorizedError: The caller is not the session keeper.
            ZeroIdentifierError: ``session_id`` is zero.
            SessionExistsError: The session already exists.
        """
        self._require_role(caller, self._session_keeper, "session keeper", "create sessions")
        _check_width(session_id, "session_id")
        if is_zero(session_id):
            raise ZeroIdentifierError("session_id must be non-zero")
        if self._db.get(LedgerSession, bytes(session_id)) is not None:
            raise SessionExistsError(f"Session {format_identifier(session_id)} already exists")

        state = self._load_state()
        block = self._advance_block(state)
        session = LedgerSession(
            session_id=bytes(session_id),
            order_index=state.session_total,
            request_count=0,
            block=block,
        )
        self._db.add(session)
        state.session_total += 1
        self._emit(
            ev.SESSION_CREATED,
            block,
            session_id=format_identifier(session_id),
            request_count=0,
        )
        logger.info("Session %s created at block %d", session_id.hex(), block)
        return session

    @guarded
    def append_session_request(
        self, caller: str, session_id: bytes, request_id: bytes
    ) -> SessionRequest:
        """Append ``request_id`` to an existing session.

        The request id is not checked against submitted prompts and may repeat
        or be zero.

        Raises:
            UnauthorizedError: The caller is not the session keeper.
            ZeroIdentifierError: ``session_id`` is zero.
            InvalidSessionError: The session was never created.
            CapacityExceededError: The session is full.
        """
        self._require_role(caller, self._session_keeper, "session keeper", "append to sessions")
        _check_width(session_id, "session_id")
        _check_width(request_id, "request_id")
        if is_zero(session_id):
            raise ZeroIdentifierError("session_id must be non-zero")
        session = self._db.get(LedgerSession, bytes(session_id))
        if session is None:
            raise InvalidSessionError(f"Unknown session {format_identifier(session_id)}")
        if session.request_count >= self._max_session_requests:
            raise CapacityExceededError(
                f"Session {format_identifier(session_id)} is full "
                f"({self._max_session_requests} requests)"
            )

        state = self._load_state()
        block = self._advance_block(state)
        entry = SessionRequest(
            session_id=bytes(session_id),
            position=session.request_count,
            request_id=bytes(request_id),
        )
        self._db.add(entry)
        session.request_count += 1
        self._emit(
            ev.SESSION_REQUEST_APPENDED,
            block,
            session_id=format_identifier(session_id),
            request_id=format_identifier(request_id),
        )
        logger.debug(
            "Appended %s to session %s at position %d",
            request_id.hex(),
            session_id.hex(),
            entry.position,
        )
        return entry

    # --- Lifecycle ------------------------------------------------------------------
    @guarded
    def set_paused(self, caller: str, paused: bool) -> bool:
        """Toggle the pause flag; only prompt submission is gated by it."""
        self._require_role(caller, self._operator, "operator", "pause the ledger")
        state = self._load_state()
        block = self._advance_block(state)
        state.paused = bool(paused)
        self._emit(ev.PAUSE_TOGGLED, block, paused=state.paused)
        logger.info("Ledger %s at block %d", "paused" if state.paused else "unpaused", block)
        return state.paused

    # --- Read views -----------------------------------------------------------------
    def _state_or_none(self) -> LedgerState | None:
        return self._db.get(LedgerState, 1)

    def is_paused(self) -> bool:
        state = self._state_or_none()
        return bool(state and state.paused)

    def current_block(self) -> int:
        state = self._state_or_none()
        return state.block_seq if state else 0

    def total_requests(self) -> int:
        state = self._state_or_none()
        return state.request_total if state else 0

    def session_count(self) -> int:
        state = self._state_or_none()
        return state.session_total if state else 0

    def get_response(self, request_id: bytes) -> bytes:
        """Return the stored response hash, or the zero sentinel if unset."""
        record = self._db.get(ResponseRecord, bytes(request_id))
        return record.response_hash if record else ZERO_ID

    def get_prompt(self, request_id: bytes) -> PromptRecord | None:
        return self._db.get(PromptRecord, bytes(request_id))

    def get_prompt_sender(self, request_id: bytes) -> str:
        record = self.get_prompt(request_id)
        return record.sender if record else ZERO_ADDRESS

    def get_prompt_block(self, request_id: bytes) -> int:
        record = self.get_prompt(request_id)
        return record.block if record else 0

    def get_prompt_hash(self, request_id: bytes) -> bytes:
        record = self.get_prompt(request_id)
        return record.prompt_hash if record else ZERO_ID

    def get_request_at(self, index: int) -> bytes:
        """Return the request id at ``index`` in submission order.

        Raises:
            InvalidIndexError: ``index`` is outside ``[0, total_requests())``.
        """
        total = self.total_requests()
        if index < 0 or index >= total:
            raise InvalidIndexError(f"Request index {index} out of range (length {total})")
        record = (
            self._db.query(PromptRecord)
            .filter(PromptRecord.order_index == index)
            .one()
        )
        return record.request_id

    def get_session(self, session_id: bytes) -> LedgerSession | None:
        return self._db.get(LedgerSession, bytes(session_id))

    def session_exists(self, session_id: bytes) -> bool:
        return self.get_session(session_id) is not None

    def get_session_at(self, index: int) -> bytes:
        """Return the session id at ``index`` in creation order.

        Raises:
            InvalidIndexError: ``index`` is outside ``[0, session_count())``.
        """
        total = self.session_count()
        if index < 0 or index >= total:
            raise InvalidIndexError(f"Session index {index} out of range (length {total})")
        session = (
            self._db.query(LedgerSession)
            .filter(LedgerSession.order_index == index)
            .one()
        )
        return session.session_id

    def get_session_request_count(self, session_id: bytes) -> int:
        session = self._db.get(LedgerSession, bytes(session_id))
        return session.request_count if session else 0

    def get_session_request_at(self, session_id: bytes, index: int) -> bytes:
        """Return the request id stored at ``index`` within a session.

        Raises:
            InvalidIndexError: ``index`` is outside the session's length.
                Unknown sessions have length zero.
        """
        length = self.get_session_request_count(session_id)
        if index < 0 or index >= length:
            raise InvalidIndexError(
                f"Session request index {index} out of range (length {length})"
            )
        entry = self._db.get(SessionRequest, (bytes(session_id), index))
        if entry is None:  # pragma: no cover - count and rows are written together
            raise InvalidIndexError(f"Session request index {index} is missing")
        return entry.request_id

    def events(self, *, after: int = 0, limit: int = 100) -> list[LedgerEvent]:
        return ev.list_events(self._db, after=after, limit=limit)


def build_ledger(
    db: Session,
    config: Settings | None = None,
    bus: EventBus | None = None,
) -> Ledger:
    """Build a ledger for ``db`` from application settings.

    Uses the process-wide event bus unless one is supplied.
    """
    config = config or settings
    return Ledger(
        db,
        operator=config.operator_address,
        session_keeper=config.session_keeper_address,
        max_total_requests=config.max_total_requests,
        max_session_requests=config.max_session_requests,
        max_batch_size=config.max_batch_size,
        bus=bus if bus is not None else get_event_bus(),
    )
