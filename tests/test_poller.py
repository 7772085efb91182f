import threading
import time

from pollbooth.errors import DatabaseError
from pollbooth.models.results_model import ResultsStats
from pollbooth.poller import ResultsPoller


def test_poller_refreshes_until_stopped():
    updates = []
    done = threading.Event()

    def on_update(stats):
        updates.append(stats)
        if len(updates) >= 3:
            done.set()

    poller = ResultsPoller(
        fetch=lambda: ResultsStats(total_voters=len(updates), results_by_position={}),
        on_update=on_update,
        interval=0.01,
    )
    poller.start()
    assert done.wait(5)
    poller.stop(timeout=5)

    count = len(updates)
    assert count >= 3
    assert updates[0].total_voters == 0
    time.sleep(0.05)
    assert len(updates) == count


def test_failed_fetch_reports_message():
    errors = []

    def fetch():
        raise DatabaseError("load votes", RuntimeError("timed out"))

    poller = ResultsPoller(fetch=fetch, on_update=lambda stats: None, on_error=errors.append)
    poller.tick()

    assert errors == ["Failed to load votes: timed out"]


def test_poller_against_service(service):
    received = []
    poller = ResultsPoller(fetch=service.fetch_results, on_update=received.append)
    poller.tick()

    assert received[0].total_voters == 0
    assert list(received[0].results_by_position) == ["President", "Secretary"]


def test_unexpected_error_does_not_stop_refreshing():
    calls = []
    errors = []
    recovered = threading.Event()

    def fetch():
        calls.append(1)
        if len(calls) == 1:
            raise TypeError("unhashable type: 'list'")
        return ResultsStats(total_voters=0, results_by_position={})

    poller = ResultsPoller(fetch=fetch, on_update=lambda stats: recovered.set(),
                           on_error=errors.append, interval=0.01)
    poller.start()
    assert recovered.wait(5)
    poller.stop(timeout=5)

    assert len(calls) >= 2
    assert errors == ["Failed to load results: unhashable type: 'list'"]
