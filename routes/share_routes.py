from __future__ import annotations
from urllib.parse import urlencode

from flask import Blueprint, jsonify

from routes import get_container, json_body

bp = Blueprint("share", __name__, url_prefix="/api")

TWEET_INTENT = "https://twitter.com/intent/tweet"


def tweet_url(text: str, via: str = "") -> str:
    params = {"text": text}
    if via:
        params["via"] = via
    return f"{TWEET_INTENT}?{urlencode(params)}"


@bp.post("/share")
def share():
    """
    { text } -> { url } (tweet intent link)
    """
    data = json_body()
    text = str(data.get("text") or "").strip()
    if not text:
        return jsonify({"error": "Missing text"}), 400
    return jsonify({"url": tweet_url(text, get_container().settings.SHARE_VIA)})
