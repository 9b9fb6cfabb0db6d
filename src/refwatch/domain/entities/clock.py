from dataclasses import dataclass, replace
from typing import Tuple

from refwatch.domain.errors import InvalidArgumentError


@dataclass(frozen=True)
class MatchClock:
    """
    Countdown for the active phase.

    `remaining_millis` counts down, `elapsed_millis` counts up by the same
    amount and stops at the phase duration, so after a reset
    remaining + elapsed always equals the phase's configured length.
    Every operation returns a new clock.
    """
    remaining_millis: int = 0
    elapsed_millis: int = 0
    running: bool = False

    @property
    def expired(self) -> bool:
        return self.remaining_millis == 0

    def start(self, duration_millis: int) -> "MatchClock":
        if self.running or duration_millis <= 0:
            return self
        return replace(self, remaining_millis=duration_millis, running=True)

    def tick(self, elapsed_since_last: int) -> Tuple["MatchClock", bool]:
        """
        Advance by `elapsed_since_last` millis.
        Returns (clock, expired_now); expired_now is True only on the tick
        that brings remaining to zero, which also stops the clock.
        """
        if elapsed_since_last < 0:
            raise InvalidArgumentError(f"Tick delta must be >= 0, got {elapsed_since_last}")
        if not self.running:
            return self, False

        consumed = min(elapsed_since_last, self.remaining_millis)
        remaining = self.remaining_millis - consumed
        ticked = MatchClock(
            remaining_millis=remaining,
            elapsed_millis=self.elapsed_millis + consumed,
            running=remaining > 0,
        )
        return ticked, remaining == 0

    def pause(self) -> "MatchClock":
        if not self.running:
            return self
        return replace(self, running=False)

    def reset_to(self, new_duration_millis: int) -> "MatchClock":
        if new_duration_millis < 0:
            raise InvalidArgumentError(f"Clock duration must be >= 0, got {new_duration_millis}")
        return MatchClock(remaining_millis=new_duration_millis, elapsed_millis=0, running=False)
