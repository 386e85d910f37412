"""
Service-level routes that are not part of the versioned API.
"""

from flask import Blueprint, jsonify
from ..services import supabase_client

web_bp = Blueprint("web", __name__)


@web_bp.route("/healthz")
def healthz():
    """Liveness probe for the load balancer."""
    return jsonify({"status": "ok", "database": supabase_client.is_configured()}), 200
