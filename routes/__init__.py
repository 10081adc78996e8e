"""
Route helpers.

Exports:
- get_container(): typed access to app.container
- remix_context(): RemixContext for the current request
- json_body(): request JSON as a dict ({} when absent or not an object)
"""

from __future__ import annotations
from typing import Any, Dict

from flask import current_app, g, request

from service import RemixContext

# ---- Container access ----

def get_container():
    c = getattr(current_app, "container", None)
    if c is None:
        raise RuntimeError("Container not initialized on app")
    return c


def remix_context() -> RemixContext:
    return get_container().context(request_id=g.get("request_id", "-"))


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
