# app/api/applicants.py
import math
from datetime import datetime, timedelta, timezone

from flask import Blueprint, jsonify, request, current_app
from rq import Retry

from app.extensions import db, rq
from app.models import Applicant, Tenant
from app.jobs.process_applicant import process_new_applicant

bp = Blueprint("applicants", __name__)


def _enqueue_processing(applicant_id, force=False):
    retries = int(current_app.config.get('PROCESS_JOB_RETRIES', 3))
    kwargs = {'force': True} if force else {}
    if retries > 0:
        kwargs['retry'] = Retry(max=retries, interval=[10, 60, 300][:retries])
    return rq.enqueue(process_new_applicant, applicant_id, **kwargs)


@bp.route("/api/tenants/<int:tenant_id>/applicants", methods=["POST"])
def submit_application(tenant_id):
    """Public application form submission; scoring runs in the background."""
    db.get_or_404(Tenant, tenant_id)
    data = request.get_json(silent=True) or {}
    answers = data.get('answers')
    if not isinstance(answers, dict):
        return jsonify({"error": "answers must be an object keyed by question id"}), 400

    applicant = Applicant(
        tenant_id=tenant_id,
        answers=answers,
        resume_url=data.get('resumeUrl') or None,
        signature=data.get('signature') or None,
    )
    db.session.add(applicant)
    db.session.commit()
    applicant_id = applicant.id
    current_app.logger.info('Applicant %s submitted for tenant %s', applicant_id, tenant_id)

    _enqueue_processing(applicant_id)
    return jsonify({"id": applicant_id, "status": "New"}), 201


@bp.route("/api/tenants/<int:tenant_id>/applicants", methods=["GET"])
def list_applicants(tenant_id):
    db.get_or_404(Tenant, tenant_id)
    query = Applicant.query.filter_by(tenant_id=tenant_id)
    status = request.args.get("status")
    if status:
        query = query.filter(Applicant.status == status)
    rows = query.order_by(Applicant.score.desc(), Applicant.submitted_at.desc()).all()
    return jsonify({"applicants": [a.to_dict() for a in rows]})


def _get_applicant(tenant_id, applicant_id):
    applicant = db.session.get(Applicant, applicant_id)
    if applicant is None or applicant.tenant_id != tenant_id:
        return None
    return applicant


@bp.route("/api/tenants/<int:tenant_id>/applicants/<int:applicant_id>", methods=["GET"])
def get_applicant(tenant_id, applicant_id):
    applicant = _get_applicant(tenant_id, applicant_id)
    if applicant is None:
        return jsonify({"error": "applicant not found"}), 404
    return jsonify(applicant.to_dict(detail=True))


@bp.route("/api/tenants/<int:tenant_id>/applicants/<int:applicant_id>/rescore", methods=["POST"])
def rescore_applicant(tenant_id, applicant_id):
    """Admin action: recompute the score even if the applicant was already processed."""
    applicant = _get_applicant(tenant_id, applicant_id)
    if applicant is None:
        return jsonify({"error": "applicant not found"}), 404
    _enqueue_processing(applicant_id, force=True)
    return jsonify({"id": applicant_id, "queued": True}), 202


@bp.route("/api/tenants/<int:tenant_id>/stats", methods=["GET"])
def applicant_stats(tenant_id):
    """Dashboard counters for the admin home page."""
    db.get_or_404(Tenant, tenant_id)
    base = Applicant.query.filter_by(tenant_id=tenant_id)
    total = base.count()
    since = datetime.now(timezone.utc) - timedelta(days=7)
    pass_status = current_app.config.get('STATUS_PASS', 'Interview')
    return jsonify({
        "totalApplicants": total,
        "newApplicants": base.filter(Applicant.submitted_at >= since).count(),
        "interviews": base.filter(Applicant.status == pass_status).count(),
        # size of the top 10% by score
        "highScores": math.ceil(total * 0.1),
    })
