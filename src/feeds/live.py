"""Live transaction feeds and the analysis engine that reacts to them.

A feed pushes the *full* current list of records for one user and one stream
(expenses or income) every time the store changes. The engine keeps the latest
snapshot of each stream, recomputes every chart frame from the two latest
snapshots on each delivery, and exposes the frame for the selected
granularity.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from analytics.frames import compose_frames, summarize
from core.models import ChartFrame, Granularity, PeriodSummary, Transaction
from logging_setup import get_logger
from normalize import normalize_snapshot

logger = get_logger("finance_tracker.feeds")

Record = Mapping[str, Any]
SnapshotCallback = Callable[[Sequence[Record]], None]
Unsubscribe = Callable[[], None]

EXPENSES = "expenses"
INCOME = "income"


class TransactionFeed(Protocol):
    def subscribe_expenses(self, user_id: str, callback: SnapshotCallback) -> Unsubscribe: ...

    def subscribe_income(self, user_id: str, callback: SnapshotCallback) -> Unsubscribe: ...


@dataclass(eq=False)
class _Subscription:
    callback: SnapshotCallback
    last_version: int = -1
    active: bool = True


class InMemoryFeed:
    """Process-local feed holding one record list per (user, stream).

    Subscribing delivers the current snapshot straight away, like a realtime
    store listener; ``publish_*`` replaces the list and pushes it to every
    subscriber of that user and stream.

    Every snapshot carries a per-key version. Deliveries for one key are
    serialised, and a subscriber never receives a version older than one it
    has already seen, so a callback that publishes again (or a publish racing
    a subscribe) cannot leave a subscriber on a stale snapshot.
    """

    def __init__(self) -> None:
        self._records: Dict[Tuple[str, str], List[Record]] = {}
        self._versions: Dict[Tuple[str, str], int] = defaultdict(int)
        self._subscribers: Dict[Tuple[str, str], List[_Subscription]] = defaultdict(list)
        self._delivery_locks: Dict[Tuple[str, str], threading.RLock] = {}
        self._lock = threading.Lock()

    def _delivery_lock(self, key: Tuple[str, str]) -> threading.RLock:
        with self._lock:
            lock = self._delivery_locks.get(key)
            if lock is None:
                lock = self._delivery_locks[key] = threading.RLock()
            return lock

    @staticmethod
    def _deliver(sub: _Subscription, version: int, snapshot: List[Record]) -> None:
        if not sub.active or version <= sub.last_version:
            return
        sub.last_version = version
        sub.callback(list(snapshot))

    def _subscribe(self, key: Tuple[str, str], callback: SnapshotCallback) -> Unsubscribe:
        sub = _Subscription(callback)

        def unsubscribe() -> None:
            with self._lock:
                sub.active = False
                subs = self._subscribers.get(key, [])
                if sub in subs:
                    subs.remove(sub)

        with self._delivery_lock(key):
            with self._lock:
                self._subscribers[key].append(sub)
                version = self._versions[key]
                current = list(self._records.get(key, []))
            self._deliver(sub, version, current)
        return unsubscribe

    def _publish(self, key: Tuple[str, str], records: Sequence[Record]) -> int:
        with self._delivery_lock(key):
            with self._lock:
                self._versions[key] += 1
                version = self._versions[key]
                self._records[key] = list(records)
                snapshot = list(self._records[key])
                subs = list(self._subscribers.get(key, []))
            for sub in subs:
                self._deliver(sub, version, snapshot)
        return len(subs)

    def subscribe_expenses(self, user_id: str, callback: SnapshotCallback) -> Unsubscribe:
        return self._subscribe((user_id, EXPENSES), callback)

    def subscribe_income(self, user_id: str, callback: SnapshotCallback) -> Unsubscribe:
        return self._subscribe((user_id, INCOME), callback)

    def publish_expenses(self, user_id: str, records: Sequence[Record]) -> int:
        return self._publish((user_id, EXPENSES), records)

    def publish_income(self, user_id: str, records: Sequence[Record]) -> int:
        return self._publish((user_id, INCOME), records)

    def subscriber_count(self, user_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get((user_id, EXPENSES), [])) + len(
                self._subscribers.get((user_id, INCOME), [])
            )


class AnalysisEngine:
    """Reactive holder of the two latest snapshots and the frames built from them.

    Parameters
    ----------
    feed
        Source of expense and income snapshots.
    user_id
        Authenticated user; ``None`` means no user: empty frames, no
        subscriptions, not loading.
    clock
        Returns "now" for each recompute. Defaults to ``datetime.now``.
    period
        Initially selected granularity.
    """

    def __init__(
        self,
        feed: TransactionFeed,
        user_id: Optional[str],
        clock: Optional[Callable[[], datetime]] = None,
        period: Any = Granularity.DAILY,
    ) -> None:
        self._feed = feed
        self._user_id = user_id
        self._clock = clock or datetime.now
        self._selected = Granularity.coerce(period)

        self._lock = threading.Lock()
        self._expenses: Tuple[Transaction, ...] = ()
        self._income: Tuple[Transaction, ...] = ()
        self._seen = {EXPENSES: False, INCOME: False}
        self._generation = 0
        self._published_generation = -1
        self._frames: Dict[Granularity, ChartFrame] = compose_frames((), (), self._clock())
        self._unsubscribes: List[Unsubscribe] = []
        self._listeners: List[Callable[["AnalysisEngine"], None]] = []
        self._started = False
        self._closed = False
        self.recompute_count = 0

    # lifecycle

    def start(self) -> "AnalysisEngine":
        # a closed engine stays closed
        if self._started or self._closed:
            return self
        self._started = True
        if self._user_id is None:
            logger.info("No authenticated user; analysis stays empty")
            self._seen = {EXPENSES: True, INCOME: True}
            self._notify()
            return self
        self._unsubscribes.append(self._feed.subscribe_expenses(self._user_id, self._on_expenses))
        self._unsubscribes.append(self._feed.subscribe_income(self._user_id, self._on_income))
        return self

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            unsubscribes, self._unsubscribes = self._unsubscribes, []
            self._listeners.clear()
        for unsubscribe in unsubscribes:
            unsubscribe()

    def __enter__(self) -> "AnalysisEngine":
        return self.start()

    def __exit__(self, *exc) -> None:
        self.close()

    def add_listener(self, fn: Callable[["AnalysisEngine"], None]) -> None:
        self._listeners.append(fn)

    # feed callbacks

    def _on_expenses(self, records: Sequence[Record]) -> None:
        self._receive(EXPENSES, records)

    def _on_income(self, records: Sequence[Record]) -> None:
        self._receive(INCOME, records)

    def _receive(self, stream: str, records: Sequence[Record]) -> None:
        try:
            now = self._clock()
            snapshot = tuple(normalize_snapshot(records, now, income=(stream == INCOME)))
            with self._lock:
                if self._closed:
                    return
                if stream == INCOME:
                    self._income = snapshot
                else:
                    self._expenses = snapshot
                self._seen[stream] = True
                self._generation += 1
                generation = self._generation
                expenses, income = self._expenses, self._income

            frames = compose_frames(expenses, income, now)

            with self._lock:
                # drop results from a torn-down engine or an older delivery
                if self._closed or generation < self._published_generation:
                    return
                self._frames = frames
                self._published_generation = generation
                self.recompute_count += 1
        except Exception:
            logger.exception("Recomputing %s analysis failed; keeping previous frames", stream)
            return
        self._notify()

    def _notify(self) -> None:
        for fn in list(self._listeners):
            try:
                fn(self)
            except Exception:
                logger.exception("Analysis listener %r failed", fn)

    # presentation surface

    @property
    def loading(self) -> bool:
        with self._lock:
            return not all(self._seen.values())

    @property
    def selected(self) -> Granularity:
        return self._selected

    def select(self, period: Any) -> ChartFrame:
        """Switch the exposed frame; aggregates are not recomputed."""
        self._selected = Granularity.coerce(period)
        return self.frame

    @property
    def frames(self) -> Dict[Granularity, ChartFrame]:
        with self._lock:
            return dict(self._frames)

    @property
    def frame(self) -> ChartFrame:
        with self._lock:
            return self._frames[self._selected]

    @property
    def summary(self) -> PeriodSummary:
        return summarize(self.frame)

    @property
    def has_expenses(self) -> bool:
        with self._lock:
            return any(t.amount > 0 for t in self._expenses)

    @property
    def closed(self) -> bool:
        return self._closed
