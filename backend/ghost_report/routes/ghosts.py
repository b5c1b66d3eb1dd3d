# Overview: Flask API routes for the ghost catalogue, its sightings and comments.

from flask import Blueprint, jsonify, request

from ..db_client import get_client
from ..decorators import handle_api_errors
from ..services import comment_service, ghost_service
from ..services.comment_service import GHOST_COMMENTS
from ..validation import json_object


ghosts_bp = Blueprint("ghosts", __name__, url_prefix="/api/ghosts")


@ghosts_bp.get("")
@handle_api_errors("fetch ghosts")
def list_ghosts_route():
    return jsonify(ghost_service.list_ghosts(get_client())), 200


@ghosts_bp.post("")
@handle_api_errors("create ghost")
def create_ghost_route():
    data = json_object(request.get_json(silent=True))
    return jsonify(ghost_service.create_ghost(get_client(), data)), 201


@ghosts_bp.get("/<int:ghost_id>")
@handle_api_errors("fetch ghost")
def get_ghost_route(ghost_id: int):
    return jsonify(ghost_service.get_ghost(get_client(), ghost_id)), 200


@ghosts_bp.put("/<int:ghost_id>")
@handle_api_errors("update ghost")
def update_ghost_route(ghost_id: int):
    data = json_object(request.get_json(silent=True))
    return jsonify(ghost_service.update_ghost(get_client(), ghost_id, data)), 200


@ghosts_bp.delete("/<int:ghost_id>")
@handle_api_errors("delete ghost")
def delete_ghost_route(ghost_id: int):
    removed = ghost_service.delete_ghost(get_client(), ghost_id)
    return jsonify({"id": ghost_id, "deleted": True, "removed": removed}), 200


@ghosts_bp.get("/<int:ghost_id>/sightings")
@handle_api_errors("fetch ghost sightings")
def list_ghost_sightings_route(ghost_id: int):
    return jsonify(ghost_service.list_ghost_sightings(get_client(), ghost_id)), 200


@ghosts_bp.get("/<int:ghost_id>/comments")
@handle_api_errors("fetch ghost comments")
def list_comments_route(ghost_id: int):
    return jsonify(comment_service.list_comments(get_client(), GHOST_COMMENTS, ghost_id)), 200


@ghosts_bp.post("/<int:ghost_id>/comments")
@handle_api_errors("post ghost comment")
def post_comment_route(ghost_id: int):
    data = json_object(request.get_json(silent=True))
    comment, created = comment_service.upsert_comment(get_client(), GHOST_COMMENTS, ghost_id, data)
    return jsonify({**comment, "status": "created" if created else "updated"}), 201 if created else 200
