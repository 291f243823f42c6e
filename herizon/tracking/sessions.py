"""In-memory intake wizard sessions, one per user.

A session lives from wizard entry until it is submitted or discarded.
Nothing is persisted: restarting the process drops unfinished drafts.
"""

from __future__ import annotations

import logging

from herizon.tracking.client import SubmissionClient
from herizon.tracking.wizard import IntakeWizard

logger = logging.getLogger("herizon.tracking.sessions")


class WizardSessionStore:
    def __init__(self, submission_client: SubmissionClient) -> None:
        self._submission_client = submission_client
        self._sessions: dict[str, IntakeWizard] = {}

    def start(self, user_id: str) -> IntakeWizard:
        """Open a fresh wizard, replacing any unfinished one."""
        if user_id in self._sessions:
            logger.debug("Replacing unfinished intake draft for user %s", user_id)
        wizard = IntakeWizard(self._submission_client)
        self._sessions[user_id] = wizard
        return wizard

    def get(self, user_id: str) -> IntakeWizard | None:
        return self._sessions.get(user_id)

    def discard(self, user_id: str) -> bool:
        wizard = self._sessions.pop(user_id, None)
        if wizard is None:
            return False
        wizard.discard()
        return True

    def finish(self, user_id: str) -> None:
        """Forget a completed wizard."""
        self._sessions.pop(user_id, None)
