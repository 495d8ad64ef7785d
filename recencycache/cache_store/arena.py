"""
Entry arena backing the recency order of the in-memory cache.

Entries live in one flat list and refer to their neighbours by integer
handle, never by object reference. Slots 0 and 1 are permanent sentinels
marking the most-recently-used and least-recently-used ends of the sequence.
"""

from typing import Any, Iterator, List, Optional

import attrs

HEAD = 0
TAIL = 1
_SENTINELS = (HEAD, TAIL)


@attrs.define
class Entry:
    """A key/value pair and its position in the recency order."""

    key: Any = attrs.field(default=None)
    value: Any = attrs.field(default=None)
    prev: int = attrs.field(default=HEAD)
    next: int = attrs.field(default=TAIL)


class EntryArena:
    """
    Growable table of entries linked into a doubly linked recency sequence.

    ``HEAD.next`` is the most recently used entry and ``TAIL.prev`` the least
    recently used one. Released slots go on a free list and are handed out
    again by :meth:`allocate` before the table grows.
    """

    def __init__(self):
        self._slots: List[Entry] = []
        self._free: List[int] = []
        self._live = 0
        self.reset()

    def reset(self) -> None:
        """Drop every entry and return to the empty two-sentinel state."""
        self._slots = [Entry(prev=HEAD, next=TAIL), Entry(prev=HEAD, next=TAIL)]
        self._free = []
        self._live = 0

    def __len__(self) -> int:
        return self._live

    def __getitem__(self, handle: int) -> Entry:
        return self._slots[handle]

    @property
    def slot_count(self) -> int:
        """Total number of slots in the table, sentinels and free slots included."""
        return len(self._slots)

    def allocate(self, key: Any, value: Any) -> int:
        """Create an unlinked entry and return its handle."""
        if self._free:
            handle = self._free.pop()
            entry = self._slots[handle]
            entry.key = key
            entry.value = value
            entry.prev = HEAD
            entry.next = TAIL
        else:
            handle = len(self._slots)
            self._slots.append(Entry(key=key, value=value))
        self._live += 1
        return handle

    def release(self, handle: int) -> None:
        """Return an unlinked entry's slot to the free list."""
        if handle in _SENTINELS:
            raise ValueError("Sentinel slots cannot be released")
        entry = self._slots[handle]
        entry.key = None
        entry.value = None
        self._free.append(handle)
        self._live -= 1

    def push_front(self, handle: int) -> None:
        """Link an entry directly after HEAD, making it the most recently used."""
        head = self._slots[HEAD]
        first = head.next
        entry = self._slots[handle]
        entry.prev = HEAD
        entry.next = first
        self._slots[first].prev = handle
        head.next = handle

    def unlink(self, handle: int) -> None:
        """Splice an entry out of the sequence."""
        entry = self._slots[handle]
        self._slots[entry.prev].next = entry.next
        self._slots[entry.next].prev = entry.prev
        entry.prev = HEAD
        entry.next = TAIL

    def move_to_front(self, handle: int) -> None:
        if self._slots[HEAD].next == handle:
            return
        self.unlink(handle)
        self.push_front(handle)

    def front(self) -> Optional[int]:
        """Handle of the most recently used entry, or None when empty."""
        handle = self._slots[HEAD].next
        return None if handle == TAIL else handle

    def back(self) -> Optional[int]:
        """Handle of the least recently used entry, or None when empty."""
        handle = self._slots[TAIL].prev
        return None if handle == HEAD else handle

    def handles(self) -> Iterator[int]:
        """Iterate live handles from most to least recently used."""
        handle = self._slots[HEAD].next
        while handle != TAIL:
            next_handle = self._slots[handle].next
            yield handle
            handle = next_handle
