"""Classroom board server - Main application entry point.

This module provides the Flask application factory. It handles:
- Quiz catalog backend selection (MongoDB or JSON file) and seeding
- Socket.IO setup and whiteboard relay handler registration
- Route registration and request logging middleware
- Prometheus metrics configuration
"""

import logging
import time
from typing import Optional

from flask import Flask, g, jsonify, request
from flask_cors import CORS
from flask_socketio import SocketIO
from prometheus_client import CollectorRegistry, Gauge
from prometheus_flask_exporter import PrometheusMetrics
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException

from common.catalog import CatalogStore, StorageMode
from common.database import DBController
from common.repositories import FileQuizRepository, QuizRepository
from common.utils.config import Settings, get_settings
from server.models.data_migrator import DataMigrator
from server.models.room_registry import RoomRegistry
from server.routes.health_routes import init_health_routes
from server.routes.quiz_routes import init_quiz_routes
from server.socket_handlers import whiteboard_handlers

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _file_store(settings: Settings) -> CatalogStore:
    logger.info("catalog_backend=file path=%s", settings.quiz_data_file)
    return CatalogStore(
        mode=StorageMode.FILE,
        backend=FileQuizRepository(settings.quiz_data_file),
        enforce_unique_ids=settings.enforce_unique_quiz_ids,
    )


def initialize_catalog(app: Flask, settings: Settings) -> CatalogStore:
    """Pick the catalog backend once, for the lifetime of the process.

    MongoDB is used only when MONGO_URI is set and the server answers a
    ping; otherwise, or if seeding an empty collection fails, the JSON file
    is used. The database is not retried later.
    """
    if not settings.database_configured:
        logger.info("No MONGO_URI provided. Using JSON file fallback.")
        return _file_store(settings)

    logger.info("Connecting to MongoDB...")
    db_controller = DBController(
        settings.mongo_uri,
        db_name=settings.mongo_db_name,
        timeout_ms=settings.mongo_timeout_ms,
    )
    if not db_controller.connect(max_retries=settings.mongo_connect_retries):
        logger.error("Failed to connect to MongoDB, falling back to JSON file")
        return _file_store(settings)

    quiz_repository = QuizRepository(db_controller, settings.mongo_collection)
    try:
        DataMigrator(quiz_repository).seed_and_sync(settings.quiz_seed_file)
    except PyMongoError as exc:
        logger.error("Quiz seeding failed, falling back to JSON file: %s", exc, exc_info=True)
        db_controller.disconnect()
        return _file_store(settings)

    app.extensions["db_controller"] = db_controller
    logger.info("catalog_backend=database collection=%s", settings.mongo_collection)
    return CatalogStore(
        mode=StorageMode.DATABASE,
        backend=quiz_repository,
        enforce_unique_ids=settings.enforce_unique_quiz_ids,
    )


def setup_middleware(app: Flask) -> None:
    """Setup request logging hooks and JSON error responses."""

    @app.before_request
    def before_request() -> None:
        """Log request start and track timing."""
        g.start_time = time.time()
        logger.info(
            "request_started method=%s path=%s remote_addr=%s",
            request.method,
            request.path,
            request.remote_addr,
        )

    @app.after_request
    def after_request(response):
        """Log request completion with duration."""
        if hasattr(g, "start_time"):
            duration = time.time() - g.start_time
            logger.info(
                "request_completed method=%s path=%s status=%s duration_ms=%.2f",
                request.method,
                request.path,
                response.status_code,
                duration * 1000,
            )
        return response

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        if isinstance(exc, HTTPException):
            return exc
        logger.error("unhandled_error path=%s error=%s", request.path, exc, exc_info=True)
        return jsonify({"error": "Internal server error"}), 500


def setup_metrics(app: Flask) -> None:
    """Setup Prometheus metrics and the dependency gauge."""
    registry = CollectorRegistry()
    metrics = PrometheusMetrics(app, registry=registry)
    metrics.info("classboard_info", "Classroom Board Server Info", version="1.0.0")

    dependency_gauge = Gauge(
        "classboard_dependency_health",
        "Health status for external dependencies (1=up, 0=down)",
        ["dependency"],
        registry=registry,
    )

    def _set_dependency_metric(dependency: str, healthy: bool) -> None:
        dependency_gauge.labels(dependency=dependency).set(1 if healthy else 0)

    app.extensions["dependency_metric_setter"] = _set_dependency_metric
    logger.info("Prometheus metrics initialized")


def create_app(
    settings: Optional[Settings] = None,
    catalog_store: Optional[CatalogStore] = None,
) -> Flask:
    """Application factory pattern.

    Args:
        settings: Configuration; read from the environment when omitted.
        catalog_store: Prebuilt store, skipping backend selection.

    Returns:
        Flask: Configured Flask application with its SocketIO server in
        ``app.extensions["socketio"]``.
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level)

    app = Flask(__name__)
    app.config["DEBUG"] = settings.debug

    CORS(app, resources={
        r"/api/*": {
            "origins": list(settings.cors_origins),
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
            "supports_credentials": True
        }
    })

    socketio = SocketIO(
        app,
        cors_allowed_origins=settings.socketio_cors_origins,
        async_mode=settings.socketio_async_mode,
        ping_interval=settings.websocket_ping_interval,
        ping_timeout=settings.websocket_ping_timeout,
    )
    room_registry = RoomRegistry()

    app.extensions["settings"] = settings
    app.extensions["socketio"] = socketio
    app.extensions["room_registry"] = room_registry
    app.extensions["catalog_store"] = catalog_store or initialize_catalog(app, settings)

    setup_middleware(app)
    setup_metrics(app)

    app.register_blueprint(init_health_routes())
    app.register_blueprint(init_quiz_routes())
    whiteboard_handlers.register_handlers(socketio, room_registry)

    logger.info(
        "Application created successfully storage=%s",
        app.extensions["catalog_store"].mode.value,
    )
    return app


if __name__ == "__main__":
    settings = get_settings()
    application = create_app(settings)

    logger.info("=" * 60)
    logger.info("Starting classroom board server on %s:%s", settings.host, settings.port)
    logger.info("=" * 60)

    application.extensions["socketio"].run(
        application, host=settings.host, port=settings.port, debug=settings.debug
    )
