#!/usr/bin/env python3
"""
Inventory Inbox Parser

Turns freeform text ("3 boxes of screws", "2x paint brush", "hammer") into
Item records, one per non-blank line.

The heuristic here is deliberately simple. Parsers share the TextToItems
interface so a model-backed parser can replace it without touching the ledger.
"""
import re
from abc import ABC, abstractmethod
from typing import List, Optional

from .items import Item

# Quantities are stored as signed 32-bit values
MAX_QUANTITY = 2**31 - 1

_TRAILING_NON_DIGITS = re.compile(r'[^0-9]+$')
_QUANTITY_DIGITS = re.compile(r"\+?[0-9]+")

# Unicode White_Space. str.isspace() also counts \x1c-\x1f, which are kept
# as ordinary characters here.
WHITESPACE = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)
_WHITESPACE_RUN = re.compile("[" + WHITESPACE + "]+")


class TextToItems(ABC):
    """Anything that can turn a raw text submission into Items."""

    @abstractmethod
    def parse(self, text: str) -> List[Item]:
        """
        Parse raw text into items, one per line in input order.

        Must never raise for str input; empty input yields an empty list.
        """
        ...


def parse_quantity(token: str) -> Optional[int]:
    """
    Read a quantity from the first token of a line.

    Trailing non-digit characters are stripped first, so "2x" reads as 2.
    Leading characters are left alone: "x2" and "-3" are not quantities,
    while "+3" reads as 3.

    Returns:
        The quantity, or None if the token is not a quantity
    """
    number = _TRAILING_NON_DIGITS.sub('', token)
    if not _QUANTITY_DIGITS.fullmatch(number):
        return None

    quantity = int(number)
    if quantity > MAX_QUANTITY:
        return None
    return quantity


def parse_line(line: str) -> Item:
    """Parse one already-trimmed, non-empty line into an Item."""
    tokens = _WHITESPACE_RUN.split(line)
    quantity = parse_quantity(tokens[0])

    if quantity is None:
        return Item(name=line, quantity=1)

    # A bare number keeps the whole line as its name
    name = ' '.join(tokens[1:])
    return Item(name=name or line, quantity=quantity)


def parse_items(raw_text: str) -> List[Item]:
    """
    Parse a multi-line submission into Items.

    Lines are trimmed and blank lines dropped; every remaining line yields
    exactly one Item, in the order the lines appeared.

    Example:
        >>> parse_items("3 boxes of screws\\n2x paint brush\\nhammer\\n")
        [Item(name='boxes of screws', quantity=3), Item(name='paint brush', quantity=2), Item(name='hammer', quantity=1)]
    """
    items = []
    for line in raw_text.split('\n'):
        line = line.strip(WHITESPACE)
        if not line:
            continue
        items.append(parse_line(line))
    return items


class HeuristicParser(TextToItems):
    """Leading-number heuristic: "<quantity> <name>", quantity defaults to 1."""

    def parse(self, text: str) -> List[Item]:
        return parse_items(text)


PARSERS = {
    'heuristic': HeuristicParser,
}


def create_parser(name: str = 'heuristic') -> TextToItems:
    """Create a parser by name."""
    try:
        parser_class = PARSERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown parser: {name!r} (available: {', '.join(sorted(PARSERS))})"
        ) from None
    return parser_class()
