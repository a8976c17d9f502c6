# wikigrams/cli/__init__.py
from __future__ import annotations
from wikigrams.cli.generic import app
from wikigrams.cli.store import store_app

app.add_typer(store_app, name="store", help="Inspect a persisted frequency store")

# Expose the main app only
__all__ = ["app"]
