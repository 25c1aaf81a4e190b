import concurrent.futures
import json

from flask import Blueprint, current_app, jsonify, request

from ..extensions import registry, runner
from ..storage.errors import (
    CorruptCollectionError,
    InvalidCollectionName,
    LockTimeoutError,
    MissingIdentifierError,
)
from ..storage.pipeline import ID_FIELD

bp = Blueprint("collections_api", __name__)


def _json_object():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else None


def _field_matches(value, expected: str) -> bool:
    # Query-string values are strings; non-string fields compare by JSON form (?qty=3, ?active=true)
    if isinstance(value, str):
        return value == expected
    return json.dumps(value) == expected


def _args_predicate(args):
    filters = list(args.items(multi=True))
    if not filters:
        return None
    return lambda record: all(k in record and _field_matches(record[k], v) for k, v in filters)


def _error_response(e: Exception):
    if isinstance(e, (InvalidCollectionName, MissingIdentifierError)):
        return jsonify({"error": str(e)}), 400
    if isinstance(e, LockTimeoutError):
        current_app.logger.warning("Collection busy: %s", e)
        return jsonify({"error": str(e)}), 503
    if isinstance(e, concurrent.futures.TimeoutError):
        current_app.logger.warning("Storage operation exceeded the request timeout")
        return jsonify({"error": "Timed out waiting for the storage operation to finish"}), 504
    if isinstance(e, CorruptCollectionError):
        current_app.logger.error("Corrupt collection: %s", e)
        return jsonify({"error": str(e)}), 500
    current_app.logger.exception("Collection request failed")
    return jsonify({"error": str(e)}), 500


@bp.get("/collections")
def api_collections_list():
    return jsonify({"collections": registry.names()})


@bp.get("/collections/<name>/records")
def api_records_query(name):
    try:
        coll = registry.collection(name)
        records = runner.run(coll.query(_args_predicate(request.args)))
        return jsonify(records)
    except Exception as e:
        return _error_response(e)


@bp.get("/collections/<name>/records/<record_id>")
def api_record_get(name, record_id):
    try:
        coll = registry.collection(name)
        record = runner.run(coll.get(record_id))
    except Exception as e:
        return _error_response(e)
    if record is None:
        return jsonify({"error": "Record not found"}), 404
    return jsonify(record)


@bp.post("/collections/<name>/records")
def api_record_create(name):
    payload = _json_object()
    if payload is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400
    payload.pop(ID_FIELD, None)
    try:
        coll = registry.collection(name)
        created = runner.run(coll.create(payload))
        return jsonify(created), 201
    except Exception as e:
        return _error_response(e)


@bp.put("/collections/<name>/records/<record_id>")
def api_record_update(name, record_id):
    payload = _json_object()
    if payload is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400
    payload[ID_FIELD] = record_id
    try:
        coll = registry.collection(name)
        return jsonify(runner.run(coll.update(payload)))
    except Exception as e:
        return _error_response(e)


@bp.patch("/collections/<name>/records/<record_id>")
def api_record_patch(name, record_id):
    payload = _json_object()
    if payload is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400
    try:
        coll = registry.collection(name)
        patched_id = runner.run(coll.patch(record_id, payload))
        return jsonify({"ok": True, ID_FIELD: patched_id})
    except Exception as e:
        return _error_response(e)


@bp.delete("/collections/<name>/records/<record_id>")
def api_record_delete(name, record_id):
    try:
        coll = registry.collection(name)
        deleted_id = runner.run(coll.delete(record_id))
        return jsonify({"ok": True, ID_FIELD: deleted_id})
    except Exception as e:
        return _error_response(e)
