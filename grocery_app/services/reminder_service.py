# grocery_app/services/reminder_service.py
import enum
import logging
import threading
from datetime import datetime, timedelta

from sqlmodel import Session

from grocery_app.models.types import utc_now
from grocery_app.schemas.cart import ReminderBatch
from grocery_app.services.cart_service import CartService, to_read

logger = logging.getLogger(__name__)


class ReminderState(str, enum.Enum):
    IDLE = "idle"
    PRESENTING = "presenting"


class ReminderScheduler:
    """
    One-time reminders for urgent entries that have sat in the cart too long.

    Not a background job: `poll` runs once per cart load. All due entries go
    out in a single batch, and no new batch starts until the client
    acknowledges the one it is showing, or until `latch_timeout` has passed
    since it was presented (the client went away without answering).
    """

    def __init__(
        self,
        cart_service: CartService,
        threshold: timedelta,
        latch_timeout: timedelta = timedelta(minutes=5),
    ):
        self.cart_service = cart_service
        self.threshold = threshold
        self.latch_timeout = latch_timeout
        self.state = ReminderState.IDLE
        self.pending_ids: list[int] = []
        self.presented_at: datetime | None = None
        self._lock = threading.Lock()

    def poll(self, session: Session) -> ReminderBatch | None:
        """
        Start presenting a batch if anything is due and none is showing.

        Entries of an abandoned batch were never flagged, so they are
        picked up again by the next batch.
        """
        with self._lock:
            now = utc_now()
            if self.state is ReminderState.PRESENTING:
                if now - self.presented_at < self.latch_timeout:
                    return None
                logger.info("Reminder batch %s was never acknowledged, releasing", self.pending_ids)
                self._reset()

            due = self.cart_service.find_due_for_reminder(session, self.threshold, now)
            if not due:
                return None

            self.state = ReminderState.PRESENTING
            self.pending_ids = [e.id for e in due]
            self.presented_at = now
            ids = list(self.pending_ids)

        names = "\n".join(f"• {e.name}" for e in due)
        logger.info("Presenting urgent reminder for %s entries", len(due))
        return ReminderBatch(
            ids=ids,
            items=[to_read(e) for e in due],
            message=f"You've marked these items as urgent - need to repurchase?\n{names}",
        )

    def acknowledge(self, session: Session, entry_ids: list[int]) -> int:
        """
        Flag the shown entries and go back to idle.

        Only ids of the batch being presented are flagged; anything else
        is ignored, and with no batch showing the call does nothing.
        The latch is released even if saving the flags fails, so the next
        cart load can try again.
        """
        with self._lock:
            if self.state is not ReminderState.PRESENTING:
                logger.info("Reminder acknowledged with no batch showing, ignoring")
                return 0
            shown = set(self.pending_ids)
            ids = [i for i in dict.fromkeys(entry_ids) if i in shown]

        try:
            return self.cart_service.mark_reminded(session, ids)
        finally:
            with self._lock:
                self._reset()

    def _reset(self) -> None:
        self.state = ReminderState.IDLE
        self.pending_ids = []
        self.presented_at = None
