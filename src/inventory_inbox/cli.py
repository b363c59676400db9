#!/usr/bin/env python3
"""
Command-line interface for Inventory Inbox
"""
import sys
import os
import argparse
from pathlib import Path
from typing import List, Optional

from . import ledger, parser

DEFAULT_STORE = Path('inventory.csv')


def read_text(source: Optional[Path]) -> str:
    """Read a submission from a file, or stdin when source is None or '-'."""
    if source is None or str(source) == '-':
        return sys.stdin.read()
    with open(source, 'r', encoding='utf-8') as f:
        return f.read()


def parse_command(source: Optional[Path] = None) -> int:
    """Parse text and print the items, without saving anything."""
    try:
        text = read_text(source)
    except OSError as e:
        print(f"❌ Error: could not read {source}: {e.strerror}", file=sys.stderr)
        return 1
    except UnicodeDecodeError as e:
        print(f"❌ Error: {source or 'stdin'} is not valid UTF-8: {e.reason} at byte {e.start}", file=sys.stderr)
        return 1

    items = parser.parse_items(text)
    for item in items:
        print(f"{item.quantity} × {item.name}")

    return 0


def add_command(source: Optional[Path] = None, store: Path = DEFAULT_STORE) -> int:
    """Parse text and append the items to the inventory store."""
    try:
        text = read_text(source)
    except OSError as e:
        print(f"❌ Error: could not read {source}: {e.strerror}", file=sys.stderr)
        return 1
    except UnicodeDecodeError as e:
        print(f"❌ Error: {source or 'stdin'} is not valid UTF-8: {e.reason} at byte {e.start}", file=sys.stderr)
        return 1

    items = parser.parse_items(text)
    if not items:
        print("⚠️  No items found in input")

    for item in items:
        print(f"  {item.quantity} × {item.name}")

    try:
        count = ledger.append_items(store, items)
    except ledger.LedgerWriteError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(f"✅ Appended {count} item(s) to {store}")
    return 0


def serve_command(store: Path = DEFAULT_STORE, host: str = "0.0.0.0", port: int = 3000) -> int:
    """Start the web intake server."""
    store = Path(store).resolve()

    if not store.parent.exists():
        print(f"❌ Directory {store.parent} does not exist")
        return 1

    # The server reads its store location at startup
    os.environ["INVENTORY_INBOX_STORE"] = str(store)

    print(f"🚀 Starting Inventory Inbox...")
    print(f"📂 Using inventory: {store}")
    print(f"🌐 Server will run at: http://localhost:{port}")
    print(f"❤️  Health check: http://localhost:{port}/health")
    print(f"Press Ctrl+C to stop\n")

    import uvicorn
    from .server import app

    try:
        uvicorn.run(app, host=host, port=port, log_level="info")
    except KeyboardInterrupt:
        print("\n\n👋 Server stopped")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser_cli = argparse.ArgumentParser(
        prog="inventory-inbox",
        description="Inventory Inbox - Turn freeform text into inventory records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Preview how a message would be parsed
  echo "3 boxes of screws" | inventory-inbox parse

  # Parse a file and append the items to inventory.csv
  inventory-inbox add shopping.txt --store ~/inventory.csv

  # Start the web form on port 3000
  inventory-inbox serve --store ~/inventory.csv
        """
    )

    subparsers = parser_cli.add_subparsers(dest='command', help='Command to run')

    # Parse command
    parse_parser = subparsers.add_parser('parse', help='Parse text and print the items')
    parse_parser.add_argument('file', type=Path, nargs='?', help="Input file (default: stdin, or '-')")

    # Add command
    add_parser = subparsers.add_parser('add', help='Parse text and append the items to the store')
    add_parser.add_argument('file', type=Path, nargs='?', help="Input file (default: stdin, or '-')")
    add_parser.add_argument('--store', '-s', type=Path, default=DEFAULT_STORE,
                            help='Inventory CSV file (default: inventory.csv)')

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Start the web intake server')
    serve_parser.add_argument('--store', '-s', type=Path, default=DEFAULT_STORE,
                              help='Inventory CSV file (default: inventory.csv)')
    serve_parser.add_argument('--host', type=str, default='0.0.0.0', help='Interface to bind (default: 0.0.0.0)')
    serve_parser.add_argument('--port', '-p', type=int, default=3000, help='Port number (default: 3000)')

    args = parser_cli.parse_args(argv)

    if args.command == 'parse':
        return parse_command(args.file)
    elif args.command == 'add':
        return add_command(args.file, args.store)
    elif args.command == 'serve':
        return serve_command(args.store, args.host, args.port)
    else:
        parser_cli.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
