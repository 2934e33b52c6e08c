# src/crossbuy/application/activity.py
"""
Activity Dispatcher - Fire-and-forget user activity recording

Events (view, search, add_to_cart, purchase, click) are handed to a thread
pool and recorded off the caller's path. The caller never waits for the
recorder and never sees its errors; failures are logged and dropped.
Events without a user are skipped.

Files that USE this module:
- crossbuy.application.cart_service (add_to_cart events)
- crossbuy.application.order_service (purchase events)
- crossbuy.app (composition root, shutdown)

Files that this module USES:
- crossbuy.adapters.persistence.base (ActivityRecorder)
- crossbuy.domain.models (ActivityEvent)
"""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from crossbuy.adapters.persistence.base import ActivityRecorder
from crossbuy.config import settings
from crossbuy.domain.models import ActivityEvent

logger = logging.getLogger(__name__)


class ActivityDispatcher:
    def __init__(self, recorder: ActivityRecorder, max_workers: Optional[int] = None):
        self.recorder = recorder
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or settings.activity_workers,
            thread_name_prefix="activity",
        )

    def dispatch(self, event: ActivityEvent) -> Optional[Future]:
        """
        Schedule an event for recording and return immediately.

        Returns:
            The Future of the background task, or None when the event was
            skipped or could not be scheduled
        """
        if not event.user_id:
            return None
        try:
            return self._executor.submit(self._record, event)
        except RuntimeError as e:
            # Executor already shut down.
            logger.warning("Activity %s not scheduled: %s", event.activity_type.value, e)
            return None

    def _record(self, event: ActivityEvent) -> None:
        try:
            self.recorder.record(event)
            logger.debug("Recorded activity: %s for user %s", event.activity_type.value, event.user_id)
        except Exception as e:
            logger.warning("Failed to record activity: %s", e)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting events; with wait=True, flush the ones already queued."""
        self._executor.shutdown(wait=wait)
