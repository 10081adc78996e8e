from __future__ import annotations
import logging

from flask import Blueprint, jsonify

from connectors.openai_text import GenerationError
from routes import json_body, remix_context
from service import remix
from service.validators import ValidationError

logger = logging.getLogger("Remix")

bp = Blueprint("remix", __name__, url_prefix="/api")


@bp.post("/remix")
def remix_api():
    """
    Contract (variant picked by "variant", else by body shape):
      single: { text, style }                          -> { success, messages: [{content}] }
      simple: { text, style, numVariations }           -> { success, variations: [...] }
      blend : { text, styles: [{id, weight}], intensity? } -> { success, variations, complete, shortfall }
    Errors:
      single: { success: false, message }   others: { message }
    """
    data = json_body()
    ctx = remix_context()

    try:
        variant = remix.pick_variant(data)
    except ValidationError as e:
        return jsonify({"message": str(e)}), 400

    if variant == "single":
        try:
            content = remix.remix_single(ctx, data.get("text"), data.get("style"))
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except GenerationError as e:
            return jsonify({"success": False, "message": str(e)}), 500
        return jsonify({"success": True, "messages": [{"content": content}]})

    try:
        if variant == "simple":
            result = remix.remix_simple(ctx, data.get("text"), data.get("style"))
            return jsonify({"success": True, "variations": result.variations})

        result = remix.remix_blend(
            ctx,
            data.get("text"),
            styles=data.get("styles"),
            intensity=data.get("intensity"),
            style=data.get("style"),
        )
        return jsonify({
            "success": True,
            "variations": result.variations,
            "complete": result.complete,
            "shortfall": result.shortfall,
        })
    except ValidationError as e:
        return jsonify({"message": str(e)}), 400
    except GenerationError as e:
        return jsonify({"message": str(e)}), 500


@bp.post("/remix/batch")
def remix_batch_api():
    """
    { text, style, count? } -> { success, variations: [count strings] }
    Runs `count` single-style rewrites in parallel; any failure fails the batch.
    """
    data = json_body()
    ctx = remix_context()
    try:
        variations = remix.remix_batch(ctx, data.get("text"), data.get("style"), data.get("count"))
    except ValidationError as e:
        return jsonify({"success": False, "message": str(e)}), 400
    except GenerationError as e:
        return jsonify({"success": False, "message": str(e)}), 500
    return jsonify({"success": True, "variations": variations})
