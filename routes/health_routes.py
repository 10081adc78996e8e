from __future__ import annotations
from flask import Blueprint, current_app, jsonify
from app.config import Settings
from retrieval.storage import StorageError
from routes import get_container

bp = Blueprint("health", __name__)

@bp.get("/health")
def health():
    # lightweight liveness
    return "ok", 200, {"Content-Type": "text/plain; charset=utf-8"}

@bp.get("/version")
def version():
    s: Settings = current_app.config.get("SETTINGS") or get_container().settings
    return jsonify({"service": "remix-tool", "model": s.OPENAI_MODEL})

@bp.get("/ready")
def ready():
    # storage must be readable
    try:
        c = get_container()
        count = len(c.saved.list())
        return jsonify({"ready": True, "saved_responses": count}), 200
    except StorageError as e:
        current_app.logger.error(f"Readiness check failed: {e}")
        return jsonify({"ready": False, "error": str(e)}), 503
