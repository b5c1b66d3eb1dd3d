# Overview: Flask API routes for accounts, profiles and ghost buster state.

from flask import Blueprint, current_app, jsonify, request

from ..db_client import get_client
from ..decorators import handle_api_errors
from ..services import ghost_buster_service, user_service
from ..validation import coerce_bool, json_object, require_fields


users_bp = Blueprint("users", __name__, url_prefix="/api")


@users_bp.post("/register")
@handle_api_errors("register user")
def register_route():
    data = json_object(request.get_json(silent=True))
    user = user_service.register_user(
        get_client(),
        data.get("username"),
        data.get("email"),
        data.get("password"),
        rounds=current_app.config["BCRYPT_ROUNDS"],
    )
    current_app.logger.info("Registered user %s", user["id"])
    return jsonify(user), 201


@users_bp.post("/login")
@handle_api_errors("login user")
def login_route():
    """
    Check credentials and return the public profile.

    Sessions are left to the client; no token is issued.
    """
    data = json_object(request.get_json(silent=True))
    user = user_service.authenticate(get_client(), data.get("username"), data.get("password"))
    return jsonify(user), 200


@users_bp.get("/users/<int:user_id>")
@handle_api_errors("fetch user")
def get_user_route(user_id: int):
    return jsonify(user_service.get_user(get_client(), user_id)), 200


@users_bp.put("/users/<int:user_id>")
@handle_api_errors("update user")
def update_user_route(user_id: int):
    data = json_object(request.get_json(silent=True))
    user = user_service.update_user(
        get_client(),
        user_id,
        data,
        rounds=current_app.config["BCRYPT_ROUNDS"],
    )
    return jsonify(user), 200


@users_bp.delete("/users/<int:user_id>")
@handle_api_errors("delete user")
def delete_user_route(user_id: int):
    removed = user_service.delete_user(get_client(), user_id)
    current_app.logger.info("Deleted user %s (%s)", user_id, removed)
    return jsonify({"id": user_id, "deleted": True, "removed": removed}), 200


@users_bp.get("/users/<int:user_id>/ghost-buster")
@handle_api_errors("fetch ghost buster status")
def get_ghost_buster_route(user_id: int):
    return jsonify(ghost_buster_service.get_status(get_client(), user_id)), 200


@users_bp.put("/users/<int:user_id>/ghost-buster")
@handle_api_errors("update ghost buster status")
def set_ghost_buster_route(user_id: int):
    data = json_object(request.get_json(silent=True))
    require_fields(data, "isGhostBuster")
    status = ghost_buster_service.set_ghost_buster(
        get_client(),
        user_id,
        coerce_bool(data["isGhostBuster"], "isGhostBuster"),
        alias=data.get("alias"),
    )
    return jsonify(status), 200


@users_bp.get("/users/<int:user_id>/fights/<int:ghost_id>")
@handle_api_errors("fetch fight")
def get_fight_route(user_id: int, ghost_id: int):
    return jsonify(ghost_buster_service.get_fight(get_client(), user_id, ghost_id)), 200


@users_bp.put("/users/<int:user_id>/fights/<int:ghost_id>")
@handle_api_errors("update fight")
def set_fight_route(user_id: int, ghost_id: int):
    data = json_object(request.get_json(silent=True))
    require_fields(data, "fighting")
    fight = ghost_buster_service.set_fight(
        get_client(),
        user_id,
        ghost_id,
        coerce_bool(data["fighting"], "fighting"),
    )
    return jsonify(fight), 200


@users_bp.post("/users/<int:user_id>/fights/<int:ghost_id>/bust")
@handle_api_errors("bust ghost")
def bust_ghost_route(user_id: int, ghost_id: int):
    return jsonify(ghost_buster_service.bust_ghost(get_client(), user_id, ghost_id)), 200
