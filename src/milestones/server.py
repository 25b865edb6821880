"""Flask application serving the milestone JSON API and uploaded images."""
from __future__ import annotations

import json
import math
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request, send_from_directory

from . import config, state, uploads
from .logging_config import logger

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")

app = Flask(__name__)
app.config.update(
    DB_FILE=config.DB_FILE,
    UPLOAD_DIR=config.UPLOAD_DIR,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _db_file() -> Path:
    return Path(app.config["DB_FILE"])


def _upload_dir() -> Path:
    return Path(app.config["UPLOAD_DIR"])


def _raw_fields() -> Dict[str, Any]:
    if request.is_json:
        body = request.get_json(silent=True)
        return body if isinstance(body, dict) else {}
    return request.form.to_dict()


def _extract_metadata() -> Dict[str, Any]:
    """Metadata from the ``event`` field when it holds a JSON object, else the raw fields."""
    fields = _raw_fields()
    event = fields.get(config.METADATA_FIELD)
    if not event:
        return fields
    if isinstance(event, dict):
        return event
    if not isinstance(event, str):
        return fields
    try:
        parsed = json.loads(event)
    except ValueError:
        logger.info("Metadata field is not valid JSON, using raw form fields")
        return fields
    return parsed if isinstance(parsed, dict) else fields


def _coerce_owner(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return config.DEFAULT_OWNER
    if isinstance(value, float) and not math.isfinite(value):
        return config.DEFAULT_OWNER
    if isinstance(value, (int, float)):
        return int(value)
    match = _INT_PREFIX.match(str(value))
    if match is None:
        return config.DEFAULT_OWNER
    return int(match.group(1))


def _build_milestone(metadata: Dict[str, Any], image_urls: List[str]) -> state.Milestone:
    created_at = state.now_iso()
    return {
        "id": str(metadata.get("id") or state.generate_id()),
        "title": metadata.get("title") or config.DEFAULT_TITLE,
        "description": metadata.get("description") or "",
        "date": metadata.get("date") or created_at,
        "owner": _coerce_owner(metadata.get("owner")),
        "images": image_urls,
        "createdAt": created_at,
    }


# ---------------------------------------------------------------------------
# Request hooks
# ---------------------------------------------------------------------------

@app.before_request
def log_request() -> None:
    logger.info("%s %s", request.method, request.path)


@app.after_request
def allow_cross_origin(response):
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


# ---------------------------------------------------------------------------
# API Endpoints
# ---------------------------------------------------------------------------

@app.get("/milestones")
@app.get("/api/milestones")
def api_list_milestones():
    return jsonify(state.load_milestones(_db_file()))


@app.post("/milestones")
@app.post("/api/milestones")
def api_create_milestone():
    try:
        metadata = _extract_metadata()
        upload_dir = _upload_dir()
        image_urls: List[str] = []
        for file in uploads.image_parts(request):
            stored_name = uploads.accept(file, upload_dir)
            logger.info("Stored upload %r as %s", file.filename, stored_name)
            image_urls.append(uploads.url_for(request, stored_name))

        milestone = _build_milestone(metadata, image_urls)
        logger.info("Saving milestone with id %s", milestone["id"])
        state.append_milestone(_db_file(), milestone)
    except Exception as exc:
        logger.exception("Failed to create milestone")
        return jsonify({"error": "Internal server error", "details": str(exc)}), 500

    return (
        jsonify(
            {
                "message": "Milestone created successfully",
                "milestone": milestone,
                "imageUrls": image_urls,
            }
        ),
        201,
    )


@app.delete("/milestones/<milestone_id>")
@app.delete("/api/milestones/<milestone_id>")
def api_delete_milestone(milestone_id: str):
    try:
        logger.info("Delete requested for milestone %s", milestone_id)
        before, after = state.remove_milestone(_db_file(), milestone_id)
        if len(after) == len(before):
            known_ids = [m.get("id") for m in before]
            logger.info("Milestone %s not found; known ids: %s", milestone_id, known_ids)
            return (
                jsonify(
                    {
                        "error": "Milestone not found",
                        "requestedId": milestone_id,
                        "dbIds": known_ids,
                    }
                ),
                404,
            )
    except Exception:
        logger.exception("Failed to delete milestone %s", milestone_id)
        return jsonify({"error": "Internal server error"}), 500

    logger.info("Deleted milestone %s, store size %d -> %d", milestone_id, len(before), len(after))
    return jsonify({"message": "Deleted successfully"})


@app.get(f"{config.UPLOADS_URL_PREFIX}/<path:filename>")
def serve_upload(filename: str):
    return send_from_directory(_upload_dir(), filename)


@app.get("/__health")
def healthcheck() -> dict:
    return {"status": "ok"}


def main(host: Optional[str] = None, port: Optional[int] = None) -> None:
    host = host or config.HOST
    port = port or config.PORT
    uploads.ensure_upload_dir(_upload_dir())
    logger.info("Server is running on http://%s:%d", host, port)
    logger.info("Uploads available at http://%s:%d%s", host, port, config.UPLOADS_URL_PREFIX)
    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":  # pragma: no cover
    from .logging_config import setup_logging

    setup_logging()
    main()
