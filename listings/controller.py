import logging
from enum import Enum
from typing import Callable, Iterator, Optional

from listings.announce import Announcer, results_message
from listings.ee import EventEmitter
from listings.jobs import Job, LoadError, filter_jobs, load_jobs

logger = logging.getLogger(__name__)


class State(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class UnknownAction(KeyError):
    pass


class ActiveFilters:
    """Ordered filter strings.

    Duplicates are rejected by exact string only, so "javascript" and
    "JavaScript" may both be active even though they match the same jobs.
    """

    def __init__(self):
        self._items: list[str] = []

    def add(self, tag: str) -> bool:
        if tag in self._items:
            return False
        self._items.append(tag)
        return True

    def remove(self, tag: str) -> bool:
        if tag not in self._items:
            return False
        self._items = [f for f in self._items if f != tag]
        return True

    def clear(self) -> None:
        self._items = []

    def __contains__(self, tag: object) -> bool:
        return tag in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"ActiveFilters({self._items!r})"


class ListingController:
    """Owns the jobs and active filters of one page view.

    Every change emits ``update`` on ``bus`` so listeners can re-render the
    chip and card regions, and announces a status message.
    """

    def __init__(self, *, bus: Optional[EventEmitter] = None, announce_duration: Optional[float] = None):
        self.jobs: tuple[Job, ...] = ()
        self.filters = ActiveFilters()
        self.state = State.LOADING
        self.error: Optional[str] = None
        self.bus = bus or EventEmitter()
        self.announcer = Announcer(self.bus, duration=announce_duration)
        self._actions: dict[str, Callable[[Optional[str]], None]] = {
            "add-filter": self._add_from_event,
            "remove-filter": self._remove_from_event,
            "clear-filters": lambda _value: self.clear_filters(),
        }

    @property
    def actions(self) -> list[str]:
        return list(self._actions)

    async def load_jobs(self, source: Optional[str] = None) -> tuple[Job, ...]:
        """Load the job list; raises LoadError and leaves the view in ERROR."""
        if self.state is not State.LOADING:
            return self.jobs
        try:
            jobs = await load_jobs(source)
        except LoadError as exc:
            self.state = State.ERROR
            self.error = exc.message
            raise
        self.jobs = tuple(jobs)
        self.state = State.READY
        return self.jobs

    async def start(self, source: Optional[str] = None) -> State:
        try:
            await self.load_jobs(source)
        except LoadError as exc:
            logger.error("Failed to initialize listings: %s", exc.reason)
        return self.state

    def get_filtered_jobs(self) -> list[Job]:
        return filter_jobs(self.jobs, self.filters)

    def add_filter(self, tag: str) -> bool:
        tag = tag.strip()
        if not tag or not self.filters.add(tag):
            return False
        self._changed(f"Added filter: {tag}")
        return True

    def remove_filter(self, tag: str) -> bool:
        if not self.filters.remove(tag):
            return False
        self._changed(f"Removed filter: {tag}")
        return True

    def clear_filters(self) -> None:
        self.filters.clear()
        self._changed("All filters cleared")

    def dispatch(self, action: str, value: Optional[str] = None) -> None:
        try:
            handler = self._actions[action]
        except KeyError:
            raise UnknownAction(action) from None
        handler(value)

    def _add_from_event(self, value: Optional[str]) -> None:
        self.add_filter(value or "")

    def _remove_from_event(self, value: Optional[str]) -> None:
        if value is not None:
            self.remove_filter(value)

    def _changed(self, message: str) -> None:
        self.bus.emit("update")
        count = len(self.get_filtered_jobs())
        if count:
            self.announcer.announce(results_message(count))
        self.announcer.announce(message)


__all__ = ["ActiveFilters", "ListingController", "State", "UnknownAction"]
