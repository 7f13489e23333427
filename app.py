import logging
import os

import click
from flask import Flask, jsonify, request
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError

from config import Config, INSTANCE_DIR
from models import db
from models.employee import Employee
from change_requests.fields import validate_registry
from utils.errors import HRISError
from utils.middleware import attach_request_id, echo_request_id
from utils.responses import fail

logger = logging.getLogger("hris")

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///"):
        os.makedirs(INSTANCE_DIR, exist_ok=True)

    # Initialize Extensions
    CORS(app, resources={r"/api/*": {
        "origins": app.config.get("CORS_ORIGINS", "*"),
        "allow_headers": ["Content-Type", "Authorization", "X-Request-ID"],
        "methods": ["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    }})
    db.init_app(app)

    # Field names must line up with the employees table before serving anything
    validate_registry(Employee)

    # Import Blueprints
    from routes.auth import auth_bp
    from routes.employee import employee_bp
    from change_requests import change_requests_bp
    from utils.stabilization import stabilization_bp

    # Register Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(employee_bp, url_prefix="/api")
    app.register_blueprint(change_requests_bp, url_prefix="/api")
    app.register_blueprint(stabilization_bp)

    app.before_request(attach_request_id)
    app.after_request(echo_request_id)
    register_error_handlers(app)
    register_commands(app)

    @app.route("/")
    def home():
        return {
            "endpoints": {
                "auth": {
                    "login": "POST /api/auth/login",
                    "me": "GET /api/auth/me"
                },
                "employees": {
                    "get": "GET /api/employees/<id>",
                    "update": "PATCH /api/employees/<id>",
                    "delete": "DELETE /api/employees/<id>"
                },
                "change_requests": {
                    "list": "GET /api/change-requests",
                    "get": "GET /api/change-requests/<id>",
                    "submit": "POST /api/change-requests",
                    "bulk_submit": "POST /api/change-requests/bulk",
                    "pending_count": "GET /api/change-requests/pending/count",
                    "approve": "PATCH /api/change-requests/<id>/approve",
                    "reject": "PATCH /api/change-requests/<id>/reject",
                    "bulk_approve": "PATCH /api/change-requests/bulk/approve"
                }
            },
            "message": "HRIS API",
            "version": "1.0.0"
        }

    return app

def register_error_handlers(app):
    @app.errorhandler(HRISError)
    def handle_hris_error(error):
        if error.status_code >= 500:
            logger.error("%s %s -> %s", request.method, request.path, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(error):
        db.session.rollback()
        logger.exception("Unhandled database error on %s %s", request.method, request.path)
        return fail("Internal server error", 500)

    @app.errorhandler(404)
    def handle_not_found(error):
        return fail("Not found", 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return fail("Method not allowed", 405)

def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command("seed-demo")
    @click.option("--password", default="demo1234", show_default=True, help="Password for every demo account.")
    def seed_demo_command(password):
        """Create demo employees and users for each role."""
        from seed_hrms import seed_demo
        db.create_all()
        for line in seed_demo(password):
            click.echo(line)

if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
    app.run(debug=True, port=5000)
