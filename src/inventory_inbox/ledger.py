#!/usr/bin/env python3
"""
Inventory Inbox Ledger

Append-only CSV store for parsed items. Each item becomes one
"<quantity>,<name>" line; names containing commas, quotes or line breaks
are quoted by the csv writer so they cannot break the row.

Existing lines are never rewritten. Every record is handed to the OS as a
single O_APPEND write, and a per-store lock keeps one append() batch
contiguous within the process.
"""
import csv
import io
import os
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Union

from .items import InventoryInboxError, Item

StorePath = Union[str, Path]

_locks: Dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


class LedgerWriteError(InventoryInboxError):
    """The store could not be created, opened or written."""

    def __init__(self, path: StorePath, reason: str):
        self.path = Path(path)
        super().__init__(f"Failed to write {self.path}: {reason}")


class LedgerReadError(InventoryInboxError):
    """A stored row could not be turned back into an Item."""


def _store_lock(path: Path) -> threading.Lock:
    key = os.path.realpath(path)
    with _locks_guard:
        if key not in _locks:
            _locks[key] = threading.Lock()
        return _locks[key]


def format_record(item: Item) -> str:
    """Render one item as a complete CSV line, terminator included."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow([item.quantity, item.name])
    return buffer.getvalue()


def _write_all(fd: int, data: bytes) -> None:
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        view = view[written:]


class Ledger:
    """An append-only inventory log stored at `path`."""

    def __init__(self, path: StorePath):
        self.path = Path(path)

    def append(self, items: Iterable[Item]) -> int:
        """
        Append items to the end of the store, in order.

        The store is created if it doesn't exist. Data is fsynced before
        returning.

        Args:
            items: Items to record

        Returns:
            Number of records written

        Raises:
            LedgerWriteError: if the store can't be opened or written, or a
                name can't be encoded as UTF-8 (nothing is written then)
        """
        try:
            lines = [format_record(item).encode('utf-8') for item in items]
        except UnicodeEncodeError as e:
            raise LedgerWriteError(self.path, f"cannot encode item name: {e.reason}") from e

        with _store_lock(self.path):
            try:
                fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o644)
            except OSError as e:
                raise LedgerWriteError(self.path, e.strerror or str(e)) from e

            try:
                for line in lines:
                    _write_all(fd, line)
                os.fsync(fd)
            except OSError as e:
                raise LedgerWriteError(self.path, e.strerror or str(e)) from e
            finally:
                os.close(fd)

        return len(lines)

    def read(self) -> List[Item]:
        """
        Load every record in the store, oldest first.

        A store that doesn't exist yet reads as empty.

        Raises:
            LedgerReadError: if a row isn't "<quantity>,<name>"
        """
        if not self.path.exists():
            return []

        items = []
        with open(self.path, 'r', encoding='utf-8', newline='') as f:
            for row in csv.reader(f):
                if len(row) != 2:
                    raise LedgerReadError(
                        f"{self.path} row {len(items) + 1}: expected 2 fields, got {len(row)}"
                    )
                quantity, name = row
                try:
                    items.append(Item(name=name, quantity=int(quantity)))
                except ValueError:
                    raise LedgerReadError(
                        f"{self.path} row {len(items) + 1}: invalid quantity {quantity!r}"
                    ) from None
        return items


def append_items(store: StorePath, items: Iterable[Item]) -> int:
    """Append items to the store at `store`. See Ledger.append."""
    return Ledger(store).append(items)


def read_items(store: StorePath) -> List[Item]:
    """Load all items from the store at `store`. See Ledger.read."""
    return Ledger(store).read()
