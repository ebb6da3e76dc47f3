"""Health check routes."""

import logging
import time
from typing import Callable, Optional, Tuple

from flask import Blueprint, current_app, jsonify

logger = logging.getLogger(__name__)


def _check_database(db_controller) -> Tuple[bool, str]:
    if db_controller is None:
        return False, "not_configured"

    client = getattr(db_controller, "client", None)
    if client is None:
        return db_controller.db is not None, "connected_no_client"

    try:
        client.admin.command("ping")
        return True, "connected"
    except Exception as exc:  # pragma: no cover - relies on Mongo client
        logger.warning("database_ping_failed error=%s", str(exc))
        return False, "ping_failed"


def init_health_routes():
    """Initialize health check routes."""
    health_bp = Blueprint("health", __name__, url_prefix="/api")

    @health_bp.route("/health", methods=["GET"])
    def health():
        """Liveness check; always ok while the process serves requests."""
        logger.debug("health_check_called")
        store = current_app.extensions["catalog_store"]
        response = {
            "ok": True,
            "ts": int(time.time() * 1000),
            "storage": store.mode.value,
        }

        if store.uses_database:
            healthy, details = _check_database(current_app.extensions.get("db_controller"))
            response["database"] = {"healthy": healthy, "details": details}
            record: Optional[Callable[[str, bool], None]] = current_app.extensions.get(
                "dependency_metric_setter"
            )
            if record:
                record("database", healthy)

        return jsonify(response), 200

    return health_bp
