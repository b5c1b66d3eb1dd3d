# Overview: Flask API routes for tours, their ghosts and participants.

from flask import Blueprint, jsonify, request

from ..db_client import get_client
from ..decorators import handle_api_errors
from ..services import tour_service
from ..validation import json_object, optional_int


tours_bp = Blueprint("tours", __name__, url_prefix="/api/tours")


def _viewer_id():
    return optional_int(request.args.get("userId"), "userId")


def _membership_payload() -> dict:
    # Leave requests may carry the user in the body or the query string
    data = dict(json_object(request.get_json(silent=True)))
    if "userID" not in data and request.args.get("userId"):
        data["userID"] = request.args.get("userId")
    return data


@tours_bp.get("")
@handle_api_errors("fetch tours")
def list_tours_route():
    return jsonify(tour_service.list_tours(get_client(), viewer_id=_viewer_id())), 200


@tours_bp.post("")
@handle_api_errors("create tour")
def create_tour_route():
    data = json_object(request.get_json(silent=True))
    return jsonify(tour_service.create_tour(get_client(), data)), 201


@tours_bp.get("/<int:tour_id>")
@handle_api_errors("fetch tour")
def get_tour_route(tour_id: int):
    return jsonify(tour_service.get_tour(get_client(), tour_id, viewer_id=_viewer_id())), 200


@tours_bp.delete("/<int:tour_id>")
@handle_api_errors("delete tour")
def delete_tour_route(tour_id: int):
    removed = tour_service.delete_tour(get_client(), tour_id)
    return jsonify({"id": tour_id, "deleted": True, "removed": removed}), 200


@tours_bp.get("/<int:tour_id>/ghosts")
@handle_api_errors("fetch tour ghosts")
def list_tour_ghosts_route(tour_id: int):
    return jsonify(tour_service.list_tour_ghosts(get_client(), tour_id)), 200


@tours_bp.get("/<int:tour_id>/participants")
@handle_api_errors("fetch tour participants")
def list_participants_route(tour_id: int):
    return jsonify(tour_service.list_participants(get_client(), tour_id)), 200


@tours_bp.post("/<int:tour_id>/join")
@handle_api_errors("join tour")
def join_tour_route(tour_id: int):
    return jsonify(tour_service.join_tour(get_client(), tour_id, _membership_payload())), 200


@tours_bp.delete("/<int:tour_id>/leave")
@handle_api_errors("leave tour")
def leave_tour_route(tour_id: int):
    return jsonify(tour_service.leave_tour(get_client(), tour_id, _membership_payload())), 200
