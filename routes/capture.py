"""
Capture query routes.

Read-only JSON views over the latest parsed airodump-ng dump.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request, Response

from utils.logging import get_logger
from utils.wifi import (
    filter_recent_clients,
    get_snapshot_store,
    parse_window_minutes,
)

logger = get_logger('netnet.routes')

capture_bp = Blueprint('capture', __name__)


@capture_bp.route('/access-points', methods=['GET'])
def get_access_points() -> Response:
    """Get access points from the current snapshot."""
    snapshot = get_snapshot_store().current()
    return jsonify([ap.to_dict() for ap in snapshot.access_points])


@capture_bp.route('/clients', methods=['GET'])
def get_clients() -> Response:
    """
    Get clients from the current snapshot.

    Query params:
        minutes: Only include clients last seen within this many minutes
                 (default from config, 60).
    """
    default = current_app.config.get('DEFAULT_RECENCY_MINUTES', 60)
    minutes = parse_window_minutes(request.args.get('minutes'), default=default)

    snapshot = get_snapshot_store().current()
    clients = filter_recent_clients(snapshot.clients, minutes)
    return jsonify([c.to_dict() for c in clients])


@capture_bp.route('/snapshot', methods=['GET'])
def get_snapshot_summary() -> Response:
    """Get generation and counts for the current snapshot."""
    return jsonify(get_snapshot_store().current().to_summary_dict())
