from flask import Blueprint, request, jsonify, current_app
from pydantic import ValidationError
import logging

from schemas.subscriber_schemas import SubscriberCreate, MembershipEvent

logger = logging.getLogger(__name__)
subscribers_bp = Blueprint('subscribers_bp', __name__, url_prefix='/api/subscribers')


def _store():
    return current_app.extensions['subscriber_store']


def _validation_error(e):
    return jsonify({"error": "Invalid payload", "details": e.errors(include_url=False, include_context=False)}), 400


@subscribers_bp.route("/", methods=['GET'])
def list_subscribers():
    try:
        return jsonify(_store().all()), 200
    except Exception as e:
        logger.error(f"Error fetching subscribers: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to fetch subscribers"}), 500


@subscribers_bp.route("/", methods=['POST'])
def create_subscriber():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        payload = SubscriberCreate.model_validate(data)
    except ValidationError as e:
        return _validation_error(e)

    try:
        created = _store().add(payload.destination)
    except Exception as e:
        logger.error(f"Error creating subscriber: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to create subscriber"}), 500

    if not created:
        return jsonify({"error": "Destination already subscribed"}), 409
    return jsonify({"destination": payload.destination}), 201


@subscribers_bp.route("/<destination>", methods=['DELETE'])
def delete_subscriber(destination):
    try:
        removed = _store().remove(destination)
    except Exception as e:
        logger.error(f"Error deleting subscriber {destination}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to delete subscriber"}), 500

    if not removed:
        return jsonify({"error": "Subscriber not found"}), 404
    return jsonify({"message": "Subscriber deleted successfully"}), 200


@subscribers_bp.route("/events", methods=['POST'])
def membership_event():
    """Chat membership updates: joining a chat subscribes it, leaving unsubscribes it."""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        event = MembershipEvent.model_validate(data)
    except ValidationError as e:
        return _validation_error(e)

    try:
        changed = _store().apply_membership(event.destination, event.status)
    except Exception as e:
        logger.error(f"Error applying membership event: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to apply membership event"}), 500
    return jsonify({"destination": event.destination, "status": event.status, "changed": changed}), 200


@subscribers_bp.route("/broadcast", methods=['POST'])
def force_broadcast():
    broadcaster = current_app.extensions.get('broadcaster')
    if broadcaster is None:
        return jsonify({"error": "Broadcast delivery is not configured"}), 503

    futures = broadcaster.broadcast(force=True)
    return jsonify({"queued": len(futures)}), 202
