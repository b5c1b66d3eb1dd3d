# backend/ghost_report/__init__.py
from flask import Flask, request

from .config import Config
from .extensions import db, migrate


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    from .bootstrap import bootstrap
    from .db_client import create_client, init_client

    # Schema and seed are in place before the app is handed back
    with app.app_context():
        client = create_client(db.engine)
        init_client(app, client)
        bootstrap(client, seed=app.config["SEED_ON_STARTUP"])
        app.logger.info("Database ready (%s)", client.engine_name)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.users import users_bp
    from .routes.sightings import sightings_bp
    from .routes.ghosts import ghosts_bp
    from .routes.tours import tours_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(sightings_bp)
    app.register_blueprint(ghosts_bp)
    app.register_blueprint(tours_bp)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in app.config["CORS_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
