from flask import Blueprint, jsonify, request, current_app
from pydantic import ValidationError
import logging

from schemas.session_schemas import TestamentChoice
from utils.sessions import get_testament, set_testament

session_bp = Blueprint('session', __name__)
logger = logging.getLogger(__name__)


def _store():
    return current_app.extensions['session_store']


@session_bp.route('/<user_id>/testament', methods=['GET'])
def get_selected_testament(user_id):
    return jsonify({"user_id": user_id, "testament": get_testament(_store(), user_id)})


@session_bp.route('/<user_id>/testament', methods=['PUT'])
def select_testament(user_id):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        choice = TestamentChoice.model_validate(data)
    except ValidationError as e:
        return jsonify({"error": "Invalid testament", "details": e.errors(include_url=False, include_context=False)}), 400

    set_testament(_store(), user_id, choice.testament)
    return jsonify({"user_id": user_id, "testament": choice.testament})


@session_bp.route('/<user_id>/books', methods=['GET'])
def get_session_books(user_id):
    testament = get_testament(_store(), user_id)
    books = current_app.extensions['search_engine'].list_books(testament)
    return jsonify({"testament": testament, "books": books})


@session_bp.route('/<user_id>', methods=['DELETE'])
def reset_session(user_id):
    _store().delete(str(user_id))
    return jsonify({"message": "Session reset"}), 200
