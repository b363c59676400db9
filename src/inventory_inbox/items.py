"""
Item records shared by the parser, the ledger and the web front end.
"""
from dataclasses import dataclass
from typing import Any, Dict


class InventoryInboxError(Exception):
    """Base error for this package."""


@dataclass(frozen=True)
class Item:
    """One parsed inventory line: what it is and how many."""
    name: str
    quantity: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "quantity": self.quantity}


def escape_html(text: str) -> str:
    """Escape &, < and > so an item name can be dropped into HTML."""
    return (text.replace('&', '&amp;')
                .replace('<', '&lt;')
                .replace('>', '&gt;'))
