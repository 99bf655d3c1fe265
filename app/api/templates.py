# app/api/templates.py
from flask import Blueprint, jsonify, request, current_app

from app.extensions import db
from app.models import Question, QuestionTemplate, Section, Tenant
from app.models.question import new_question_id
from app.api.questions import apply_question_payload, questionnaire_dict

bp = Blueprint("templates", __name__)


def validate_template_sections(raw):
    """Check every question payload in a template the same way the questions API would."""
    if not isinstance(raw, list) or not raw:
        return "sections must be a non-empty list"
    for i, section in enumerate(raw):
        if not isinstance(section, dict) or not isinstance(section.get("questions", []), list):
            return f"section {i} must be an object with a questions list"
        for j, payload in enumerate(section.get("questions", [])):
            if not isinstance(payload, dict):
                return f"section {i} question {j} must be an object"
            err = apply_question_payload(Question(), payload)
            if err:
                return f"section {i} question {j}: {err}"
    return None


@bp.route("/api/templates", methods=["GET"])
def list_templates():
    rows = QuestionTemplate.query.order_by(QuestionTemplate.name).all()
    return jsonify({"templates": [t.to_dict() for t in rows]})


@bp.route("/api/templates/<template_id>", methods=["GET"])
def get_template(template_id):
    template = db.get_or_404(QuestionTemplate, template_id)
    return jsonify(template.to_dict(detail=True))


@bp.route("/api/templates", methods=["POST"])
def create_template():
    data = request.get_json(silent=True) or {}
    tid = data.get("id")
    name = (data.get("name") or "").strip()
    if not isinstance(tid, str) or not tid.strip() or not name:
        return jsonify({"error": "id and name are required"}), 400
    if db.session.get(QuestionTemplate, tid) is not None:
        return jsonify({"error": f"template {tid!r} already exists"}), 400
    err = validate_template_sections(data.get("sections"))
    if err:
        return jsonify({"error": err}), 400
    template = QuestionTemplate(id=tid, name=name, description=data.get("description"),
                                sections=data["sections"])
    db.session.add(template)
    db.session.commit()
    return jsonify(template.to_dict(detail=True)), 201


def copy_template(template, tenant_id):
    """Append the template's sections after the tenant's existing ones, with fresh question ids."""
    start = db.session.query(db.func.max(Section.order)).filter(Section.tenant_id == tenant_id).scalar()
    start = -1 if start is None else start
    created = 0
    for i, raw_section in enumerate(template.sections or []):
        section = Section(tenant_id=tenant_id, title=str(raw_section.get("title") or ""), order=start + 1 + i)
        db.session.add(section)
        db.session.flush()
        for j, payload in enumerate(raw_section.get("questions") or []):
            question = Question(tenant_id=tenant_id, id=new_question_id(), section_id=section.id, order=j)
            err = apply_question_payload(question, {k: v for k, v in payload.items() if k != "order"})
            if err:
                raise ValueError(f"template {template.id} section {i} question {j}: {err}")
            db.session.add(question)
            created += 1
    return created


@bp.route("/api/tenants/<int:tenant_id>/questionnaire/from-template", methods=["POST"])
def create_from_template(tenant_id):
    db.get_or_404(Tenant, tenant_id)
    data = request.get_json(silent=True) or {}
    template = db.session.get(QuestionTemplate, data.get("templateId") or "")
    if template is None:
        return jsonify({"error": "template not found"}), 404
    try:
        created = copy_template(template, tenant_id)
    except ValueError as e:
        db.session.rollback()
        return jsonify({"error": str(e)}), 400
    db.session.commit()
    current_app.logger.info('Copied template %s into tenant %s (%s questions)', template.id, tenant_id, created)
    return jsonify(questionnaire_dict(tenant_id)), 201
