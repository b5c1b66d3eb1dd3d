# Overview: Flask API routes for sightings and their comments.

from flask import Blueprint, current_app, jsonify, request

from ..db_client import get_client
from ..decorators import handle_api_errors
from ..services import comment_service, sighting_service
from ..services.comment_service import SIGHTING_COMMENTS
from ..validation import json_object


sightings_bp = Blueprint("sightings", __name__, url_prefix="/api/sightings")


@sightings_bp.get("")
@handle_api_errors("fetch sightings")
def list_sightings_route():
    return jsonify(sighting_service.list_sightings(get_client())), 200


@sightings_bp.post("")
@handle_api_errors("create sighting")
def create_sighting_route():
    data = json_object(request.get_json(silent=True))
    sighting = sighting_service.create_sighting(get_client(), data)
    current_app.logger.info("Sighting %s reported by user %s", sighting["id"], sighting["userReportID"])
    return jsonify(sighting), 201


@sightings_bp.get("/<int:sighting_id>")
@handle_api_errors("fetch sighting")
def get_sighting_route(sighting_id: int):
    return jsonify(sighting_service.get_sighting(get_client(), sighting_id)), 200


@sightings_bp.delete("/<int:sighting_id>")
@handle_api_errors("delete sighting")
def delete_sighting_route(sighting_id: int):
    removed = sighting_service.delete_sighting(get_client(), sighting_id)
    return jsonify({"id": sighting_id, "deleted": True, "removed": removed}), 200


@sightings_bp.put("/<int:sighting_id>/ghost-name")
@handle_api_errors("rename sighting ghost")
def rename_ghost_route(sighting_id: int):
    data = json_object(request.get_json(silent=True))
    sighting = sighting_service.rename_sighting_ghost(get_client(), sighting_id, data.get("newName"))
    return jsonify(sighting), 200


@sightings_bp.get("/<int:sighting_id>/comments")
@handle_api_errors("fetch sighting comments")
def list_comments_route(sighting_id: int):
    return jsonify(comment_service.list_comments(get_client(), SIGHTING_COMMENTS, sighting_id)), 200


@sightings_bp.post("/<int:sighting_id>/comments")
@handle_api_errors("post sighting comment")
def post_comment_route(sighting_id: int):
    data = json_object(request.get_json(silent=True))
    comment, created = comment_service.upsert_comment(get_client(), SIGHTING_COMMENTS, sighting_id, data)
    return jsonify({**comment, "status": "created" if created else "updated"}), 201 if created else 200
