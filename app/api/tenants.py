# app/api/tenants.py
from flask import Blueprint, jsonify, request, current_app
from sqlalchemy.exc import IntegrityError

from app.extensions import db
from app.models import Setting, Tenant
from app.models.setting import SCORE_THRESHOLD_KEY
from app.services.scoring import get_score_threshold

bp = Blueprint("tenants", __name__)


@bp.route("/api/tenants", methods=["POST"])
def create_tenant():
    data = request.get_json(silent=True) or {}
    name = (data.get("name") or "").strip()
    if not name:
        return jsonify({"error": "name is required"}), 400
    tenant = Tenant(name=name)
    db.session.add(tenant)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"error": f"tenant {name!r} already exists"}), 400
    return jsonify(tenant.to_dict()), 201


@bp.route("/api/tenants/<int:tenant_id>/settings", methods=["GET"])
def get_settings(tenant_id):
    db.get_or_404(Tenant, tenant_id)
    return jsonify({"scoreThreshold": get_score_threshold(tenant_id)})


@bp.route("/api/tenants/<int:tenant_id>/settings", methods=["PUT"])
def update_settings(tenant_id):
    db.get_or_404(Tenant, tenant_id)
    data = request.get_json(silent=True) or {}
    threshold = data.get("scoreThreshold")
    if isinstance(threshold, bool) or not isinstance(threshold, int):
        return jsonify({"error": "scoreThreshold must be an integer"}), 400
    Setting.set_value(tenant_id, SCORE_THRESHOLD_KEY, threshold)
    db.session.commit()
    current_app.logger.info('Tenant %s score threshold set to %s', tenant_id, threshold)
    return jsonify({"scoreThreshold": threshold})
