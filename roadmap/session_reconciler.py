"""Session transitions: login, account creation and logout.

Login discards whatever anonymous state was built up locally and reloads
answers and checklist from the remote store concurrently. Saved amount and
committed timeline are not modelled remotely, so they are re-read from the
cache once both loads have finished. Logout is local only.
"""

import asyncio
import logging

from roadmap.sync_gateway import OperationStatus

logger = logging.getLogger(__name__)


class SessionReconciler:
    """Drives session transitions through a SyncGateway."""

    def __init__(self, gateway, remote):
        self.gateway = gateway
        self.remote = remote

    @property
    def state(self):
        return self.gateway.state

    async def reload(self):
        """Reset progress and reload everything from the remote store.

        Memory is reset first but the cache is left alone until a load
        settles. A load that fails falls back to the cached copy.

        Returns:
            The (answers, checklist) SyncResult pair, or None when there is
            no session to reload.
        """
        if not self.state.authenticated:
            return None
        epoch = self.state.epoch
        self.state.reset_progress()
        answers_result, checklist_result = await asyncio.gather(
            self.gateway.load_answers(),
            self.gateway.load_checklist(),
        )
        if self.state.epoch != epoch:
            logger.info("Session ended during reload; skipping local field restore")
            return answers_result, checklist_result
        if answers_result.status == OperationStatus.FAILED:
            self.gateway.restore_cached_answers()
        if checklist_result.status == OperationStatus.FAILED:
            self.gateway.restore_cached_steps()
        self.gateway.restore_local_fields()
        return answers_result, checklist_result

    def _start_session(self, auth) -> None:
        # a new session invalidates every response still in flight for the old one
        self.gateway.cancel_inflight()
        self.state.epoch += 1
        # progress cached by the previous session is not carried over
        self.state.reset_progress()
        self.gateway.persist_answers()
        self.gateway.persist_steps()
        self.gateway.set_session(auth.token, auth.user)
        self.gateway.set_survey_completed(False)

    async def login(self, email: str, password: str) -> dict:
        """Authenticate, then reload progress from the remote store.

        Returns:
            Dict with 'user' and 'survey_completed'.

        Raises:
            SyncError: If authentication fails (surfaced to the user).
        """
        auth = await self.remote.login(email, password)
        self._start_session(auth)
        logger.info("Logged in as %s", auth.user.get("username"))

        epoch = self.state.epoch
        result = await self.reload()
        if result is not None and self.state.epoch == epoch:
            answers_result, _ = result
            if answers_result.status == OperationStatus.SETTLED and not self.state.answers.is_empty():
                self.gateway.set_survey_completed(True)
        return {"user": self.state.user, "survey_completed": self.state.survey_completed}

    async def create_account(self, username: str, email: str, password: str) -> dict:
        """Register a new account and start its session from a clean slate.

        Raises:
            SyncError: If registration fails (surfaced to the user).
        """
        auth = await self.remote.register(email, username, password)
        self._start_session(auth)
        logger.info("Created account %s", auth.user.get("username"))
        await self.reload()
        return {"user": self.state.user, "survey_completed": self.state.survey_completed}

    def logout(self) -> None:
        """Clear the cache and reset memory. No remote call is made."""
        username = (self.state.user or {}).get("username")
        self.gateway.reset_session()
        logger.info("Logged out %s", username or "anonymous session")
