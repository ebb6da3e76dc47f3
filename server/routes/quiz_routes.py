"""Quiz routes for catalog endpoints.

Routes layer handles HTTP protocol binding only:
- Request/response mapping
- Input validation
- Error to HTTP status code mapping
- Calls the CatalogStore for storage
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from common.catalog import CatalogStore
from common.exceptions import CatalogBackendError, DuplicateQuizError, QuizValidationError
from server.utils.validation import validate_quiz

logger = logging.getLogger(__name__)


def _store() -> CatalogStore:
    return current_app.extensions["catalog_store"]


def init_quiz_routes():
    """Initialize quiz catalog routes."""
    quiz_bp = Blueprint("quiz", __name__, url_prefix="/api")

    @quiz_bp.route("/quizzes", methods=["GET"])
    def list_quizzes_route():
        """List every quiz in the catalog."""
        try:
            quizzes = _store().list()
            logger.info("list_quizzes_route count=%d", len(quizzes))
            return jsonify({"quizzes": quizzes}), 200
        except CatalogBackendError as e:
            logger.error("list_quizzes_failed error=%s", str(e), exc_info=True)
            return jsonify({"error": "Failed to load quizzes"}), 500

    @quiz_bp.route("/quizzes/<quiz_id>", methods=["GET"])
    def get_quiz_route(quiz_id):
        """Get a single quiz by its `id` field."""
        try:
            quiz = _store().get(quiz_id)
        except CatalogBackendError as e:
            logger.error("get_quiz_failed id=%s error=%s", quiz_id, str(e), exc_info=True)
            return jsonify({"error": "Failed to load quiz"}), 500

        if quiz is None:
            logger.info("quiz_not_found id=%s", quiz_id)
            return jsonify({"error": "Not found"}), 404
        return jsonify(quiz), 200

    @quiz_bp.route("/quizzes", methods=["POST"])
    def create_quiz_route():
        """Store a new quiz.

        Expected data: {
            "id": "fractions-basics",
            "title": "Fractions Basics",
            "questions": [
                {"q": "...", "choices": ["a", "b"], "answer": 0, "hint": "..."}
            ]
        }
        """
        data = request.get_json(silent=True)

        try:
            validate_quiz(data)
        except QuizValidationError as e:
            logger.warning("create_quiz_validation_failed error=%s", str(e))
            return jsonify({"error": str(e)}), 400

        try:
            created = _store().create(data)
        except DuplicateQuizError as e:
            logger.warning("create_quiz_duplicate id=%s", e.quiz_id)
            return jsonify({"error": str(e)}), 409
        except CatalogBackendError as e:
            logger.error("create_quiz_failed id=%s error=%s", data.get("id"), str(e), exc_info=True)
            return jsonify({"error": "Failed to save quiz"}), 500

        return jsonify(created), 201

    return quiz_bp
