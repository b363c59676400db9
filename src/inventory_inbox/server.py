#!/usr/bin/env python3
"""
FastAPI server for the inventory inbox.

Shows a text box, parses whatever is submitted into items and appends them
to the inventory CSV. Parsing and saving are independent: if the write
fails, the parsed items are still shown.
"""
import os
import json
import sys
from pathlib import Path
from typing import List, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, Form
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from .items import Item, escape_html
from .ledger import LedgerWriteError, append_items
from .parser import HeuristicParser, TextToItems

STORE_ENV_VAR = "INVENTORY_INBOX_STORE"
DEFAULT_STORE = "inventory.csv"

# Global server state
store_path: Optional[Path] = None
text_parser: TextToItems = HeuristicParser()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Resolve the inventory store on startup."""
    global store_path

    store_path = Path(os.environ.get(STORE_ENV_VAR) or Path.cwd() / DEFAULT_STORE)
    if store_path.exists():
        print(f"✅ Appending to existing inventory: {store_path}")
    else:
        print(f"ℹ️  {store_path} not found, it will be created on first submit")

    yield


app = FastAPI(title="Inventory Inbox", lifespan=lifespan)

# Enable CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class SubmitRequest(BaseModel):
    """Raw text submission."""
    text: str


class ItemOut(BaseModel):
    name: str
    quantity: int


class SubmitResponse(BaseModel):
    """Parsed items and whether they made it to the store."""
    items: List[ItemOut]
    saved: bool
    error: Optional[str] = None


class EscapedJSONResponse(JSONResponse):
    """JSON with non-ASCII escaped, so names that aren't valid UTF-8 still render."""

    def render(self, content) -> bytes:
        return json.dumps(content, ensure_ascii=True, allow_nan=False, separators=(",", ":")).encode("ascii")


FORM_PAGE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>Inventory Inbox</title>
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
  </head>
  <body style="font-family: sans-serif; padding: 1rem;">
    <h1>Inventory Inbox</h1>
    <form method="post" action="/submit">
      <label for="text">Speak or paste your message:</label><br>
      <textarea id="text" name="text" rows="8" cols="40" style="width: 100%;"></textarea><br><br>
      <button type="submit">Submit</button>
    </form>
  </body>
</html>"""


def current_store() -> Path:
    """Store path set at startup, or the default if the lifespan hasn't run."""
    return store_path or Path(os.environ.get(STORE_ENV_VAR) or DEFAULT_STORE)


def ingest_text(text: str) -> dict:
    """
    Parse a submission and append the items to the inventory store.

    Returns:
        {'items': [...], 'saved': bool, 'error': str or None}
    """
    items = text_parser.parse(text)

    try:
        append_items(current_store(), items)
    except LedgerWriteError as e:
        print(f"❌ {e}", file=sys.stderr)
        return {"items": items, "saved": False, "error": str(e)}

    return {"items": items, "saved": True, "error": None}


def render_confirmation(items: List[Item]) -> str:
    """Render the confirmation page listing what was parsed."""
    html = [
        '<!doctype html><html><head><meta charset="utf-8"><title>Inventory Saved</title>',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0"></head>'
        '<body style="font-family: sans-serif; padding: 1rem;">',
        '<h1>Parsed Items</h1><ul>',
    ]
    for item in items:
        html.append(f"<li>{item.quantity} &times; {escape_html(item.name)}</li>")
    html.append('</ul>')
    html.append('<p><a href="/">Back</a></p>')
    html.append('</body></html>')
    return ''.join(html)


@app.get("/", response_class=HTMLResponse)
def show_form() -> str:
    """Form with a single textarea."""
    return FORM_PAGE


@app.post("/submit", response_class=HTMLResponse)
def submit(text: str = Form(...)) -> str:
    """Handle the form post and show what was parsed."""
    result = ingest_text(text)
    return render_confirmation(result["items"])


# Older clients post to /ingest
app.add_api_route("/ingest", submit, methods=["POST"], response_class=HTMLResponse)


@app.post("/api/items", response_model=SubmitResponse, response_class=EscapedJSONResponse)
def submit_json(request: SubmitRequest) -> SubmitResponse:
    """JSON variant of /submit."""
    result = ingest_text(request.text)
    return SubmitResponse(
        items=[ItemOut(**item.to_dict()) for item in result["items"]],
        saved=result["saved"],
        error=result["error"],
    )


@app.get("/health")
def health() -> dict:
    """Health check endpoint."""
    store = current_store()
    return {
        "status": "ok",
        "store": str(store),
        "store_exists": store.exists(),
    }


if __name__ == "__main__":
    import uvicorn

    print("🚀 Starting Inventory Inbox...")
    print("📍 Server will run at: http://localhost:3000")
    print()

    uvicorn.run(app, host="0.0.0.0", port=3000)
