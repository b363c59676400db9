"""
Inventory Inbox - Turn freeform text into inventory records

Features:
- Parse loosely structured lines ("3 boxes of screws", "2x paint brush") into items
- Append items to an append-only CSV inventory log
- Web form and JSON endpoint for submitting text
- CLI tools for parsing, appending, and serving
"""

__version__ = "0.1.0"

from .items import Item, InventoryInboxError
from .parser import (
    TextToItems,
    HeuristicParser,
    parse_items,
    create_parser,
)
from .ledger import (
    Ledger,
    LedgerWriteError,
    LedgerReadError,
    append_items,
    read_items,
)

__all__ = [
    "Item",
    "InventoryInboxError",
    "TextToItems",
    "HeuristicParser",
    "parse_items",
    "create_parser",
    "Ledger",
    "LedgerWriteError",
    "LedgerReadError",
    "append_items",
    "read_items",
]
