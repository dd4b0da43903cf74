"""Fire-and-forget execution of one-shot tasks.

Each task gets its own non-daemon thread, so the process stays alive until
the task has finished.  There is no pool, queue, timeout or cancellation.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


def run_in_background(task: Callable[[], None]) -> threading.Thread:
    name = getattr(task, "name", None) or "deferred-task"
    thread = threading.Thread(target=task, name=name, daemon=False)
    thread.start()
    logger.debug("Started %s", name)
    return thread
