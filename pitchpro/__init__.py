"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .constants import (
    DEFAULT_TIMEZONE,
    PERMANENT_SESSIONS_INDEX,
    SESSION_FETCH_BATCH_SIZE,
    SESSIONS_INDEX,
    TRANSACTIONS_INDEX,
)
from .extensions import csrf


def _init_firebase(app):
    """Initialize the Firebase Admin SDK from env, file or default credentials."""
    cred = None
    project_id = app.config.get("FIREBASE_PROJECT_ID")

    # First, try to load from environment variable (for production)
    cred_json = app.config.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id") or project_id
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # If env var fails or is not present, try loading from file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    cred_info = json.load(f)
                project_id = cred_info.get("project_id") or project_id
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    # If both methods fail, fallback to default credentials
    if not cred:
        try:
            cred = credentials.ApplicationDefault()
        except Exception as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    if cred and not firebase_admin._apps:
        firebase_options = {"projectId": project_id} if project_id else None
        try:
            firebase_admin.initialize_app(cred, firebase_options)
        except ValueError:
            # This can happen if the app is already initialized, which is fine.
            app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        FIREBASE_CREDENTIALS_JSON=os.environ.get("FIREBASE_CREDENTIALS_JSON"),
        FIREBASE_PROJECT_ID=os.environ.get("FIREBASE_PROJECT_ID"),
        FIREBASE_WEB_API_KEY=os.environ.get("FIREBASE_WEB_API_KEY"),
        ACCESS_CHECK_URL=os.environ.get("ACCESS_CHECK_URL"),
        ALGOLIA_APP_ID=os.environ.get("ALGOLIA_APP_ID"),
        ALGOLIA_SEARCH_API_KEY=os.environ.get("ALGOLIA_SEARCH_API_KEY"),
        SESSIONS_INDEX=os.environ.get("SESSIONS_INDEX") or SESSIONS_INDEX,
        PERMANENT_SESSIONS_INDEX=os.environ.get("PERMANENT_SESSIONS_INDEX")
        or PERMANENT_SESSIONS_INDEX,
        TRANSACTIONS_INDEX=os.environ.get("TRANSACTIONS_INDEX") or TRANSACTIONS_INDEX,
        DASHBOARD_TIMEZONE=os.environ.get("DASHBOARD_TIMEZONE") or DEFAULT_TIMEZONE,
        SESSION_FETCH_BATCH_SIZE=int(
            os.environ.get("SESSION_FETCH_BATCH_SIZE") or SESSION_FETCH_BATCH_SIZE
        ),
        HTTP_TIMEOUT=float(os.environ.get("HTTP_TIMEOUT") or 10),
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        _init_firebase(app)

    # Initialize extensions
    csrf.init_app(app)

    # Register blueprints
    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import organization as organization_bp

    app.register_blueprint(organization_bp.bp)

    from . import dashboard as dashboard_bp

    app.register_blueprint(dashboard_bp.bp)

    from . import calendar as calendar_bp

    app.register_blueprint(calendar_bp.bp)

    from . import search as search_bp

    app.register_blueprint(search_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.route("/health")
    def health_check():
        """Perform a simple health check."""
        return "OK", 200

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
