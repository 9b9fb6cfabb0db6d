from dataclasses import dataclass
from typing import Iterator, List, Tuple, Type, TypeVar

from refwatch.domain.events import MatchEvent, display_string

E = TypeVar("E", bound=MatchEvent)


@dataclass(frozen=True)
class EventLog:
    """
    Append-only, insertion-ordered audit log of match events.
    Entries are never removed or reordered.
    """
    events: Tuple[MatchEvent, ...] = ()

    def append(self, event: MatchEvent) -> "EventLog":
        return EventLog(self.events + (event,))

    def render_display_strings(self) -> Iterator[str]:
        return (display_string(evt) for evt in self.events)

    def of_type(self, event_type: Type[E]) -> List[E]:
        return [evt for evt in self.events if isinstance(evt, event_type)]

    def since(self, index: int) -> Tuple[MatchEvent, ...]:
        """Events appended after the first `index` entries."""
        return self.events[index:]

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[MatchEvent]:
        return iter(self.events)

    def __getitem__(self, index):
        return self.events[index]
