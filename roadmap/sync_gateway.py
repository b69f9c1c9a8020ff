"""Remote sync gateway: try remote, keep local state on failure.

Every logical operation (load answers, load checklist, submit answers,
toggle a checklist item) moves through IDLE -> IN_FLIGHT -> SETTLED or
FAILED. Writes are applied to memory and the local cache before the remote
call is attempted, so a failed or skipped remote write never loses a
local change. Reads leave the last cached state in place on failure.

Each remote call runs as a tracked task tagged with the session epoch it
was started in. A response that arrives after the session changed (logout,
re-login, or a rejected credential) is discarded.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from enum import Enum

from roadmap.catalog import TIMELINE_COMMIT_OPTIONS
from roadmap.errors import AuthRejected, RecordNotFound, SyncError, ValidationFailure
from roadmap.id_translator import (
    UNMAPPED_ID,
    require_backend_id,
    to_answer_key,
    to_backend_id,
    to_question_id,
)
from roadmap.local_cache import (
    ABSENT,
    ANSWERS_KEY,
    COMMITTED_TIMELINE_KEY,
    SAVED_AMOUNT_KEY,
    STEPS_KEY,
    SURVEY_COMPLETED_KEY,
    TOKEN_KEY,
    USER_KEY,
)
from roadmap.remote_client import STATUS_COMPLETED, status_for
from roadmap.schema_validator import validate_cached_steps
from roadmap.session_state import (
    SurveyAnswers,
    answers_from_dict,
    steps_from_list,
    steps_to_list,
)

logger = logging.getLogger(__name__)

OP_LOAD_ANSWERS = "load_answers"
OP_LOAD_CHECKLIST = "load_checklist"
OP_SUBMIT_ANSWERS = "submit_answers"
OP_TOGGLE_ITEM = "toggle_item"

OPERATIONS = [OP_LOAD_ANSWERS, OP_LOAD_CHECKLIST, OP_SUBMIT_ANSWERS, OP_TOGGLE_ITEM]


class OperationStatus(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SETTLED = "settled"
    FAILED = "failed"
    LOCAL_ONLY = "local_only"
    STALE = "stale"


@dataclass
class SyncResult:
    """Outcome of one gateway operation."""

    operation: str
    status: OperationStatus
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status in (OperationStatus.SETTLED, OperationStatus.LOCAL_ONLY)


@dataclass
class PendingToggle:
    """An optimistic toggle already applied locally, awaiting its remote write."""

    step_id: int
    frontend_id: str
    completed: bool
    epoch: int
    authenticated: bool


class StaleResponse(Exception):
    """The session changed while a remote call was in flight."""


class SyncGateway:
    """Owns every mutation of the session state and its cache mirror.

    Args:
        state: The SessionState to mutate.
        cache: The LocalCache mirroring the state.
        remote: A RemoteStore (or any object with the same coroutines).
    """

    def __init__(self, state, cache, remote):
        self.state = state
        self.cache = cache
        self.remote = remote
        self.status = {op: OperationStatus.IDLE for op in OPERATIONS}
        self._inflight: set[asyncio.Task] = set()

    # ---------- Local persistence ----------

    def persist_answers(self) -> None:
        self.cache.save_json(ANSWERS_KEY, self.state.answers.to_dict())

    def persist_steps(self) -> None:
        self.cache.save_json(STEPS_KEY, steps_to_list(self.state.steps))

    def set_saved_amount(self, amount: float) -> None:
        """Record the amount saved so far (local only).

        Raises:
            ValueError: If amount is negative.
        """
        if amount < 0:
            raise ValueError(f"Saved amount must be >= 0, got {amount}")
        self.state.saved_amount = amount
        self.cache.save(SAVED_AMOUNT_KEY, str(amount))

    def set_committed_timeline(self, timeline: str) -> None:
        """Record the timeline the user committed to (local only).

        Raises:
            ValueError: If timeline is not one of TIMELINE_COMMIT_OPTIONS.
        """
        if timeline not in TIMELINE_COMMIT_OPTIONS:
            raise ValueError(
                f"Invalid committed timeline: {timeline}. Must be one of {TIMELINE_COMMIT_OPTIONS}"
            )
        self.state.committed_timeline = timeline
        self.cache.save(COMMITTED_TIMELINE_KEY, timeline)

    def set_survey_completed(self, completed: bool) -> None:
        self.state.survey_completed = completed
        if completed:
            self.cache.save(SURVEY_COMPLETED_KEY, "true")
        else:
            self.cache.remove(SURVEY_COMPLETED_KEY)

    def set_session(self, token: str, user: dict) -> None:
        """Store the credential and user record, in memory and in the cache."""
        self.state.token = token
        self.state.user = dict(user)
        self.cache.save(TOKEN_KEY, token)
        self.cache.save_json(USER_KEY, self.state.user)

    def restore_local_fields(self) -> None:
        """Re-read saved amount and committed timeline from the cache.

        The remote store does not model these, so the cache is their only
        home. Unparseable values are logged and left at their defaults.
        """
        raw_amount = self.cache.load(SAVED_AMOUNT_KEY)
        if raw_amount is not ABSENT:
            try:
                amount = float(raw_amount)
            except ValueError:
                logger.warning("Ignoring unparseable cached saved amount: %r", raw_amount)
            else:
                if amount >= 0:
                    self.state.saved_amount = amount
                else:
                    logger.warning("Ignoring negative cached saved amount: %s", amount)
        timeline = self.cache.load(COMMITTED_TIMELINE_KEY)
        if timeline is not ABSENT:
            if timeline in TIMELINE_COMMIT_OPTIONS:
                self.state.committed_timeline = timeline
            else:
                logger.warning("Ignoring unknown cached committed timeline: %r", timeline)

    def restore_from_cache(self) -> None:
        """Rebuild state from the cache at startup.

        With a stored token the remote is the source of truth for answers
        and checklist, so only the session and local-only fields are read;
        call the load operations afterwards. Without one, the cached answers
        and steps are used as-is.
        """
        token = self.cache.load(TOKEN_KEY)
        if token is not ABSENT and token:
            self.state.token = token
            try:
                user = self.cache.load_json(USER_KEY)
            except json.JSONDecodeError:
                logger.warning("Ignoring unparseable cached user record")
                user = ABSENT
            self.state.user = None if user is ABSENT else user
        self.state.survey_completed = self.cache.load(SURVEY_COMPLETED_KEY) == "true"

        if not self.state.authenticated:
            self.restore_cached_answers()
            self.restore_cached_steps()
        self.restore_local_fields()

    def restore_cached_answers(self) -> None:
        """Load answers from the cache, discarding a malformed entry."""
        try:
            data = self.cache.load_json(ANSWERS_KEY)
            if data is not ABSENT:
                self.state.answers = answers_from_dict(data)
        except (json.JSONDecodeError, ValidationFailure) as e:
            logger.error("Discarding malformed cached survey answers: %s", e)

    def restore_cached_steps(self) -> None:
        """Load the step tree from the cache, discarding a malformed entry."""
        try:
            data = self.cache.load_json(STEPS_KEY)
            if data is not ABSENT:
                self.state.steps = steps_from_list(validate_cached_steps(data))
        except (json.JSONDecodeError, ValidationFailure) as e:
            logger.error("Discarding malformed cached steps: %s", e)

    # ---------- Session control ----------

    def cancel_inflight(self) -> int:
        """Cancel every tracked remote call. Returns how many were cancelled."""
        pending = [t for t in self._inflight if not t.done()]
        for task in pending:
            task.cancel()
        return len(pending)

    def reset_session(self) -> None:
        """Drop the session: cancel in-flight calls, clear the cache, reset memory."""
        cancelled = self.cancel_inflight()
        if cancelled:
            logger.info("Cancelled %d in-flight remote call(s)", cancelled)
        self.cache.clear_all()
        self.state.reset()
        self.status = {op: OperationStatus.IDLE for op in OPERATIONS}

    async def _call(self, epoch: int, rpc, *args):
        """Run one remote call as a tracked task bound to a session epoch.

        Raises:
            StaleResponse: If the session changed before the call started or
                while it was in flight, or the call was cancelled.
        """
        if epoch != self.state.epoch:
            raise StaleResponse()
        task = asyncio.ensure_future(rpc(*args))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        if task.cancelled():
            raise StaleResponse()
        if epoch != self.state.epoch:
            # retrieve the outcome so a failed call is not reported as unhandled
            task.exception()
            raise StaleResponse()
        return task.result()

    def _begin(self, op: str) -> None:
        self.status[op] = OperationStatus.IN_FLIGHT

    def _finish(self, op: str, status: OperationStatus, error: Exception | None = None) -> SyncResult:
        self.status[op] = status
        return SyncResult(operation=op, status=status, error=error)

    def _fail(self, op: str, error: SyncError) -> SyncResult:
        """Log a remote failure, resetting the session if the credential was rejected."""
        if isinstance(error, AuthRejected):
            logger.warning("Credential rejected during %s: %s. Ending session.", op, error)
            self.reset_session()
        elif isinstance(error, ValidationFailure):
            logger.error("%s failed validation: %s", op, error)
        else:
            logger.warning("%s failed: %s. Keeping local state.", op, error)
        return self._finish(op, OperationStatus.FAILED, error)

    def _stale(self, op: str) -> SyncResult:
        logger.info("Discarding %s response from a previous session", op)
        return self._finish(op, OperationStatus.STALE)

    # ---------- Reads ----------

    async def load_answers(self) -> SyncResult:
        """Replace local answers with the remote ones, if the remote has any."""
        op = OP_LOAD_ANSWERS
        if not self.state.authenticated:
            return self._finish(op, OperationStatus.LOCAL_ONLY)
        epoch = self.state.epoch
        self._begin(op)
        try:
            responses = await self._call(epoch, self.remote.get_survey_responses)
            if not responses:
                self.persist_answers()
                return self._finish(op, OperationStatus.SETTLED)
            mapped = {}
            for item in responses:
                key = to_answer_key(item["questionId"])
                if key is None:
                    logger.warning("Ignoring response for unknown question %s", item["questionId"])
                    continue
                mapped[key] = item["response"]
            answers = answers_from_dict(mapped)
        except StaleResponse:
            return self._stale(op)
        except SyncError as e:
            return self._fail(op, e)

        self.state.answers = answers
        self.persist_answers()
        return self._finish(op, OperationStatus.SETTLED)

    async def load_checklist(self) -> SyncResult:
        """Overwrite todo completion with the remote statuses.

        Items the remote holds no record for are incomplete. Items with no
        backend mapping keep their local value and are logged.
        """
        op = OP_LOAD_CHECKLIST
        if not self.state.authenticated:
            return self._finish(op, OperationStatus.LOCAL_ONLY)
        epoch = self.state.epoch
        self._begin(op)
        try:
            records = await self._call(epoch, self.remote.get_user_todos)
        except StaleResponse:
            return self._stale(op)
        except SyncError as e:
            return self._fail(op, e)

        completed_by_id = {r["todoId"]: r["status"] == STATUS_COMPLETED for r in records}
        for step in self.state.steps:
            for todo in step.todos:
                backend_id = to_backend_id(todo.frontend_id)
                if backend_id == UNMAPPED_ID:
                    logger.error("Checklist item %s has no backend mapping; keeping local value",
                                 todo.frontend_id)
                    continue
                todo.completed = completed_by_id.get(backend_id, False)
        self.persist_steps()
        return self._finish(op, OperationStatus.SETTLED)

    # ---------- Writes ----------

    async def submit_answers(self, answers) -> SyncResult:
        """Commit answers locally, then submit the answered ones as one batch.

        The local commit is never rolled back. Unlike the other operations,
        a remote failure is raised so the caller can offer a retry.

        Args:
            answers: SurveyAnswers, or a mapping validated into one.

        Raises:
            ValidationFailure: If a mapping has unknown keys or invalid options
                (raised before anything is committed).
            SyncError: If the remote submission fails.
        """
        op = OP_SUBMIT_ANSWERS
        if not isinstance(answers, SurveyAnswers):
            answers = answers_from_dict(answers)
        self.state.answers = answers
        self.persist_answers()

        if not self.state.authenticated:
            return self._finish(op, OperationStatus.LOCAL_ONLY)
        responses = [
            {"questionId": to_question_id(key), "response": value}
            for key, value in answers.answered().items()
        ]
        if not responses:
            return self._finish(op, OperationStatus.LOCAL_ONLY)

        epoch = self.state.epoch
        self._begin(op)
        try:
            await self._call(epoch, self.remote.submit_survey_responses_batch, responses)
        except StaleResponse:
            return self._stale(op)
        except SyncError as e:
            self._fail(op, e)
            raise
        logger.info("Saved %d survey response(s) remotely", len(responses))
        return self._finish(op, OperationStatus.SETTLED)

    def apply_toggle(self, step_id: int, frontend_id: str) -> PendingToggle:
        """Flip one todo locally and persist it. Never touches the network.

        Raises:
            LookupError: If the step or the todo does not exist.
        """
        step = self.state.find_step(step_id)
        todo = step.find_todo(frontend_id) if step else None
        if todo is None:
            raise LookupError(f"Todo '{frontend_id}' not found in step {step_id}")
        todo.completed = not todo.completed
        self.persist_steps()
        return PendingToggle(
            step_id=step_id,
            frontend_id=frontend_id,
            completed=todo.completed,
            epoch=self.state.epoch,
            authenticated=self.state.authenticated,
        )

    async def push_toggle(self, pending: PendingToggle) -> SyncResult:
        """Write an applied toggle to the remote, creating the record if needed.

        Failures are logged and never raised; the local value stands until
        the next full reload.
        """
        op = OP_TOGGLE_ITEM
        if not pending.authenticated:
            return self._finish(op, OperationStatus.LOCAL_ONLY)
        try:
            backend_id = require_backend_id(pending.frontend_id)
        except ValidationFailure as e:
            logger.error("%s; change kept locally", e)
            return self._finish(op, OperationStatus.FAILED, e)

        status = status_for(pending.completed)
        self._begin(op)
        try:
            try:
                await self._call(pending.epoch, self.remote.update_todo, backend_id, status)
                logger.info("Todo %s status updated remotely", pending.frontend_id)
            except RecordNotFound:
                await self._call(
                    pending.epoch, self.remote.add_todo, backend_id, pending.step_id, status
                )
                logger.info("Todo %s created remotely with status %s", pending.frontend_id, status)
        except StaleResponse:
            return self._stale(op)
        except SyncError as e:
            return self._fail(op, e)
        return self._finish(op, OperationStatus.SETTLED)

    async def toggle_item(self, step_id: int, frontend_id: str) -> SyncResult:
        """Apply a toggle locally, then push it to the remote."""
        pending = self.apply_toggle(step_id, frontend_id)
        return await self.push_toggle(pending)
