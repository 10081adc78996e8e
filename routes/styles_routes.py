from __future__ import annotations
import logging

from flask import Blueprint, jsonify, request

from retrieval.storage import StorageError
from routes import get_container, json_body
from service.prompt_composer import BASE_TONES
from service.validators import CUSTOM_STYLE_SCHEMA, validate_json

logger = logging.getLogger("Storage")

bp = Blueprint("styles", __name__, url_prefix="/api/styles")

_TONE_IDS = {t["id"] for t in BASE_TONES}


def _check_payload(data):
    ok, err = validate_json(data, schema=CUSTOM_STYLE_SCHEMA)
    if not ok:
        return err
    tone = data.get("baseTone")
    if tone is not None and tone not in _TONE_IDS:
        return f"unknown baseTone: {tone}"
    return None


@bp.get("")
def list_styles():
    """
    ?category=<name|all>&q=<search> -> { builtin: [...], custom: [...], categories: [...] }
    """
    c = get_container()
    try:
        custom = c.styles.list(category=request.args.get("category"), query=request.args.get("q"))
        categories = c.styles.categories()
    except StorageError:
        logger.exception("listing custom styles failed")
        return jsonify({"error": "Failed to fetch styles"}), 500
    return jsonify({"builtin": BASE_TONES, "custom": custom, "categories": categories})


@bp.post("")
def create_style():
    c = get_container()
    data = json_body()
    err = _check_payload(data)
    if err:
        return jsonify({"error": err}), 400
    try:
        return jsonify(c.styles.create(data)), 201
    except StorageError:
        logger.exception("creating custom style failed")
        return jsonify({"error": "Failed to save style"}), 500


@bp.put("/<style_id>")
def update_style(style_id: str):
    c = get_container()
    data = json_body()
    err = _check_payload(data)
    if err:
        return jsonify({"error": err}), 400
    try:
        updated = c.styles.update(style_id, data)
    except StorageError:
        logger.exception("updating custom style %s failed", style_id)
        return jsonify({"error": "Failed to save style"}), 500
    if updated is None:
        return jsonify({"error": "Style not found"}), 404
    return jsonify(updated)


@bp.post("/<style_id>/duplicate")
def duplicate_style(style_id: str):
    c = get_container()
    try:
        dup = c.styles.duplicate(style_id)
    except StorageError:
        logger.exception("duplicating custom style %s failed", style_id)
        return jsonify({"error": "Failed to save style"}), 500
    if dup is None:
        return jsonify({"error": "Style not found"}), 404
    return jsonify(dup), 201


@bp.delete("/<style_id>")
def delete_style(style_id: str):
    c = get_container()
    try:
        removed = c.styles.remove(style_id)
    except StorageError:
        logger.exception("deleting custom style %s failed", style_id)
        return jsonify({"error": "Failed to delete style"}), 500
    if not removed:
        return jsonify({"error": "Style not found"}), 404
    return jsonify({"message": "Style deleted successfully"})
