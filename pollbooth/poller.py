import logging
import threading
from typing import Callable, Optional

from pollbooth.config import RESULTS_REFRESH_SECONDS
from pollbooth.errors import VotingError
from pollbooth.models.results_model import ResultsStats

logger = logging.getLogger(__name__)


class ResultsPoller:
    """Refresh results on a fixed interval until stopped.

    Fetches once right away, then every ``interval`` seconds. A failed fetch
    is reported through ``on_error`` and simply retried on the next tick.
    """

    def __init__(
        self,
        fetch: Callable[[], ResultsStats],
        on_update: Callable[[ResultsStats], None],
        on_error: Optional[Callable[[str], None]] = None,
        interval: float = RESULTS_REFRESH_SECONDS,
    ):
        self.fetch = fetch
        self.on_update = on_update
        self.on_error = on_error
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="results-poller", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while True:
            self.tick()
            if self._stop.wait(self.interval):
                break

    def tick(self) -> None:
        try:
            results = self.fetch()
        except VotingError as e:
            logger.warning(f"Failed to load results: {e}")
            if self.on_error:
                self.on_error(str(e))
            return
        except Exception as e:
            logger.exception("Unexpected error while loading results")
            if self.on_error:
                self.on_error(f"Failed to load results: {e}")
            return
        self.on_update(results)
