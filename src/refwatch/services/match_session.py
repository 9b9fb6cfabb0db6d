# Directory: src/refwatch/services/match_session.py
import asyncio
import logging
from typing import Callable, List, Optional, Union

from refwatch.constants import DEFAULT_TICK_INTERVAL_MS
from refwatch.domain.aggregates.match_aggregate import MatchState, PeriodExpired
from refwatch.domain.events import DEFAULT_STAMPER, EventStamper, display_string
from refwatch.domain.value_objects.enums import CardType, Team
from refwatch.infra.repo.match import MatchRepository
from refwatch.services.ticker import MatchTicker

SnapshotListener = Callable[[MatchState], None]
ExpiryListener = Callable[[PeriodExpired], None]
PersistenceFailureHandler = Callable[[MatchState, Exception], None]


class MatchSession:
    """
    The single owner of one live match.

    Holds the current snapshot and runs every command under one lock, so a
    command's read-modify-write of phase, clock, score and log is atomic for
    every observer. After each accepted command the new snapshot is
    published to subscribers and handed to the repository in the background;
    a failed save is reported, never rolled back.
    """

    def __init__(
        self,
        snapshot: MatchState,
        repository: Optional[MatchRepository] = None,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
        stamper: EventStamper = DEFAULT_STAMPER,
        on_persistence_failure: Optional[PersistenceFailureHandler] = None,
        logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
        ticker_factory: Optional[Callable[["MatchSession", int], MatchTicker]] = None,
    ):
        self._state = snapshot
        self.repository = repository
        self.tick_interval_ms = tick_interval_ms
        self.stamper = stamper
        self.on_persistence_failure = on_persistence_failure
        self.logger = logger or logging.getLogger(__name__)
        self._ticker_factory = ticker_factory or self._default_ticker

        self._lock = asyncio.Lock()
        # newest snapshot not yet handed to the repository; older ones are superseded
        self._latest_unsaved: Optional[MatchState] = None
        self._save_worker: Optional[asyncio.Task] = None
        self._subscribers: List[SnapshotListener] = []
        self._expiry_listeners: List[ExpiryListener] = []

        # Bumped whenever the clock stops or the phase changes; ticks carry it.
        self._clock_epoch = 0
        self._ticker: Optional[MatchTicker] = None

    @property
    def match_id(self) -> str:
        return self._state.match_id

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def clock_epoch(self) -> int:
        return self._clock_epoch

    @property
    def ticking(self) -> bool:
        return self._ticker is not None and self._ticker.active

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Called with every new snapshot. Returns an unsubscribe function."""
        self._subscribers.append(listener)
        return lambda: self._subscribers.remove(listener)

    def on_period_expired(self, listener: ExpiryListener) -> Callable[[], None]:
        """Called once per natural clock expiry (haptics, sounds...)."""
        self._expiry_listeners.append(listener)
        return lambda: self._expiry_listeners.remove(listener)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def confirm_and_start(self) -> MatchState:
        return await self._dispatch("confirm_and_start", lambda s: s.confirm_and_start(self.stamper))

    async def toggle_clock(self) -> MatchState:
        return await self._dispatch("toggle_clock", lambda s: s.toggle_clock())

    async def advance_tick(self, delta_millis: int, epoch: Optional[int] = None) -> MatchState:
        """
        Apply a clock delta. `epoch` is the clock epoch the delta was measured
        under; a tick from an older epoch is stale and ignored.
        """
        async with self._lock:
            if epoch is not None and epoch != self._clock_epoch:
                self.logger.debug(f"Dropping stale tick (epoch {epoch}, current {self._clock_epoch})")
                return self._state

            before = self._state
            after, signal = before.advance_tick(delta_millis, self.stamper)
            self._commit("advance_tick", before, after)

        if signal is not None:
            self.logger.info(f"{signal.ended_phase.readable()} expired -> {signal.new_phase.readable()}")
            self._notify_expired(signal)
        return after

    async def add_goal(self, team: Team) -> MatchState:
        return await self._dispatch("add_goal", lambda s: s.add_goal(team, self.stamper))

    async def add_card(self, team: Team, player_number: int, card_type: CardType) -> MatchState:
        return await self._dispatch(
            "add_card", lambda s: s.add_card(team, player_number, card_type, self.stamper)
        )

    async def advance_early(self) -> MatchState:
        return await self._dispatch("advance_early", lambda s: s.advance_early(self.stamper))

    async def update_settings(self, **changes) -> MatchState:
        return await self._dispatch("update_settings", lambda s: s.update_settings(**changes))

    async def log_note(self, message: str) -> MatchState:
        return await self._dispatch("log_note", lambda s: s.log_note(message, self.stamper))

    async def reset(self) -> MatchState:
        return await self._dispatch("reset", lambda s: s.reset())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def resume(self) -> None:
        """
        Pick up a restored snapshot whose clock was running when the
        previous process died: restart ticking from the saved remaining time.
        """
        async with self._lock:
            if self._state.clock.running and not self.ticking:
                self.logger.info(
                    f"Resuming running clock with {self._state.clock.remaining_millis} ms remaining"
                )
                self._start_ticker()

    async def flush(self) -> None:
        """Wait until the newest snapshot has been saved (or its save has failed)."""
        while self._save_worker is not None and not self._save_worker.done():
            await asyncio.gather(self._save_worker, return_exceptions=True)

    async def close(self) -> None:
        async with self._lock:
            ticker = self._stop_ticker()
        if ticker is not None:
            await ticker.wait_stopped()
        await self.flush()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _dispatch(self, name: str, command: Callable[[MatchState], MatchState]) -> MatchState:
        async with self._lock:
            before = self._state
            after = command(before)
            self._commit(name, before, after)
            return after

    def _commit(self, name: str, before: MatchState, after: MatchState) -> None:
        """Must be called with the command lock held."""
        if after is before:
            self.logger.debug(f"Rejected {name} during {before.current_phase.value}")
            return

        clock_halted = before.clock.running and not after.clock.running
        phase_changed = before.current_phase is not after.current_phase
        if clock_halted or phase_changed:
            # cancel in-flight ticks before the new state becomes visible
            self._stop_ticker()

        self._state = after

        # empty after a reset, which shortens the log
        for evt in after.event_log.since(len(before.event_log)):
            self.logger.info(display_string(evt))

        if after.clock.running and not self.ticking:
            self._start_ticker()

        self._publish(after)
        self._schedule_save(after)

    def _start_ticker(self) -> None:
        self._ticker = self._ticker_factory(self, self._clock_epoch)
        self._ticker.start()

    def _stop_ticker(self) -> Optional[MatchTicker]:
        ticker = self._ticker
        self._clock_epoch += 1
        if ticker is not None:
            ticker.stop()
        self._ticker = None
        return ticker

    def _default_ticker(self, session: "MatchSession", epoch: int) -> MatchTicker:
        return MatchTicker(session, epoch=epoch, interval_ms=self.tick_interval_ms)

    def _publish(self, snapshot: MatchState) -> None:
        for listener in list(self._subscribers):
            try:
                listener(snapshot)
            except Exception as e:
                self.logger.error(f"Snapshot subscriber failed: {e}", exc_info=True)

    def _notify_expired(self, signal: PeriodExpired) -> None:
        for listener in list(self._expiry_listeners):
            try:
                listener(signal)
            except Exception as e:
                self.logger.error(f"Period-expired listener failed: {e}", exc_info=True)

    def _schedule_save(self, snapshot: MatchState) -> None:
        if self.repository is None:
            return
        self._latest_unsaved = snapshot
        if self._save_worker is None or self._save_worker.done():
            self._save_worker = asyncio.get_running_loop().create_task(self._drain_saves())

    async def _drain_saves(self) -> None:
        """
        Single save worker. Snapshots committed while a save is in flight
        collapse into the newest one, so a slow store never builds a backlog
        and saves still land in command order.
        """
        while self._latest_unsaved is not None:
            snapshot, self._latest_unsaved = self._latest_unsaved, None
            try:
                await asyncio.to_thread(self.repository.save, snapshot)
            except Exception as e:
                self.logger.warning(f"Saving snapshot failed, continuing with in-memory state: {e}", exc_info=True)
                if self.on_persistence_failure is not None:
                    self.on_persistence_failure(snapshot, e)
