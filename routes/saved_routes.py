from __future__ import annotations
import logging

from flask import Blueprint, jsonify, request

from retrieval.storage import StorageError
from routes import json_body, remix_context
from service.validators import ValidationError, require_fields, sanitize_text

logger = logging.getLogger("Storage")

bp = Blueprint("saved", __name__, url_prefix="/api")


@bp.get("/saved-responses")
def list_saved():
    saved = remix_context().saved
    try:
        return jsonify(saved.list())
    except StorageError:
        logger.exception("listing saved responses failed")
        return jsonify({"error": "Failed to fetch saved responses"}), 500


@bp.post("/saved-responses")
def create_saved():
    """
    { text, style } -> 201 { id, text, style, timestamp }
    """
    saved = remix_context().saved
    data = json_body()
    try:
        require_fields(data, "text", "style", message="Missing text or style")
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    record = {"text": str(data["text"]).strip(), "style": sanitize_text(data["style"], max_len=80)}
    try:
        new_id = saved.store(record)
        return jsonify(saved.get(new_id) or {"id": new_id, **record}), 201
    except StorageError:
        logger.exception("saving response failed")
        return jsonify({"error": "Failed to save response"}), 500


@bp.delete("/saved-responses")
@bp.delete("/saved-responses/<response_id>")
def delete_saved(response_id: str | None = None):
    saved = remix_context().saved
    rid = response_id or request.args.get("id") or ""
    if not rid:
        return jsonify({"error": "Missing id"}), 400
    try:
        removed = saved.remove(rid)
    except StorageError:
        logger.exception("deleting saved response %s failed", rid)
        return jsonify({"error": "Failed to delete response"}), 500
    if not removed:
        return jsonify({"error": "Response not found"}), 404
    return jsonify({"message": "Response deleted successfully"})
