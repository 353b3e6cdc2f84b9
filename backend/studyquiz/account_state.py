import logging
from typing import Optional

from studyquiz.storage.base import DocumentStore, Record, Subscription

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


class AccountState:
    """
    Signed-in user and their live credit balance.

    Setting the user never subscribes to anything by itself: the owner asks
    for a credits subscription and decides when to start and stop it.
    """

    def __init__(self, store: DocumentStore):
        self.store = store
        self.user_id: Optional[str] = None
        self.credits = 0

    def set_user(self, user_id: Optional[str]) -> None:
        self.user_id = user_id
        self.credits = 0

    def set_credits(self, credits: int) -> None:
        self.credits = credits

    def watch_credits(self) -> Subscription:
        if self.user_id is None:
            raise RuntimeError("No signed-in user to watch credits for")
        return self.store.subscribe(USERS_COLLECTION, self.user_id, self._on_user_snapshot)

    def _on_user_snapshot(self, snapshot: Optional[Record]) -> None:
        if snapshot is None:
            return
        if snapshot.get("id") != self.user_id:
            # a stale subscription from a previous user
            logger.debug("Ignoring snapshot for %s while signed in as %s", snapshot.get("id"), self.user_id)
            return
        self.credits = snapshot.get("credits") or 0
