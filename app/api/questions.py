# app/api/questions.py
from flask import Blueprint, jsonify, request

from app.extensions import db
from app.models import Question, Section, Tenant
from app.models.question import AI_TYPE, CHOICE_TYPES, MAX_RUBRIC_TRAITS, QUESTION_TYPES, new_question_id

bp = Blueprint("questions", __name__)


def _coerce_int(val):
    if val is None or val == "" or isinstance(val, bool):
        return None
    try:
        return int(val)
    except (TypeError, ValueError):
        return None


def _validate_options(raw):
    if not isinstance(raw, list) or not raw:
        return None, "options must be a non-empty list"
    options = []
    for opt in raw:
        if not isinstance(opt, dict) or not isinstance(opt.get("value"), str) or not opt["value"]:
            return None, "each option needs a string value"
        points = opt.get("points", 0)
        if _coerce_int(points) is None:
            return None, f"option {opt['value']!r} has non-integer points"
        options.append({"value": opt["value"], "points": _coerce_int(points)})
    return options, None


def _validate_rubric(raw):
    if not isinstance(raw, list) or not raw:
        return None, "scoringRubric must be a non-empty list of trait names"
    if len(raw) > MAX_RUBRIC_TRAITS:
        return None, f"scoringRubric allows at most {MAX_RUBRIC_TRAITS} traits"
    traits = []
    for t in raw:
        if not isinstance(t, str) or not t or any(ch.isspace() for ch in t):
            return None, "trait names must be non-empty and contain no whitespace"
        if t in traits:
            return None, f"duplicate trait {t!r}"
        traits.append(t)
    return traits, None


def apply_question_payload(question, data, partial=False):
    """Copy validated fields from ``data`` onto ``question``; returns an error string or None."""
    qtype = data.get("type", question.type)
    if qtype not in QUESTION_TYPES:
        return f"unknown question type {qtype!r}"
    question.type = qtype

    if "questionText" in data or not partial:
        question.question_text = str(data.get("questionText") or "")
    if "order" in data:
        order = _coerce_int(data.get("order"))
        if order is None:
            return "order must be an integer"
        question.order = order
    if "required" in data:
        question.required = bool(data.get("required"))

    if qtype in CHOICE_TYPES:
        if "options" in data or not question.options:
            options, err = _validate_options(data.get("options"))
            if err:
                return err
            question.options = options
    elif "options" in data:
        question.options = data.get("options")

    if qtype == AI_TYPE:
        if "scoringRubric" in data or not question.scoring_rubric:
            rubric, err = _validate_rubric(data.get("scoringRubric"))
            if err:
                return err
            question.scoring_rubric = rubric
        if "points" in data or question.points is None:
            points = _coerce_int(data.get("points"))
            if points is None or points <= 0:
                return "points must be a positive integer"
            question.points = points
    return None


def _resolve_section(tenant_id, raw):
    """Section a question is placed in; the tenant's first section when none is given."""
    if raw is None:
        return Section.default_for(tenant_id), None
    section_id = _coerce_int(raw)
    section = db.session.get(Section, section_id) if section_id is not None else None
    if section is None or section.tenant_id != tenant_id:
        return None, f"section {raw!r} not found"
    return section, None


def questionnaire_dict(tenant_id):
    sections = Section.query.filter_by(tenant_id=tenant_id).order_by(Section.order, Section.id).all()
    by_section = {s.id: {**s.to_dict(), "questions": []} for s in sections}
    for q in Question.ordered_for_tenant(tenant_id).all():
        if q.section_id in by_section:
            by_section[q.section_id]["questions"].append(q.to_dict())
    return {"sections": list(by_section.values())}


@bp.route("/api/tenants/<int:tenant_id>/questions", methods=["GET"])
def list_questions(tenant_id):
    db.get_or_404(Tenant, tenant_id)
    rows = Question.ordered_for_tenant(tenant_id).all()
    return jsonify({"questions": [q.to_dict() for q in rows]})


@bp.route("/api/tenants/<int:tenant_id>/questionnaire", methods=["GET"])
def get_questionnaire(tenant_id):
    """Sections with their questions nested, as the public form renders them."""
    db.get_or_404(Tenant, tenant_id)
    return jsonify(questionnaire_dict(tenant_id))


@bp.route("/api/tenants/<int:tenant_id>/sections", methods=["POST"])
def create_section(tenant_id):
    db.get_or_404(Tenant, tenant_id)
    data = request.get_json(silent=True) or {}
    order = _coerce_int(data.get("order"))
    if order is None:
        order = Section.query.filter_by(tenant_id=tenant_id).count()
    section = Section(tenant_id=tenant_id, title=str(data.get("title") or ""), order=order)
    db.session.add(section)
    db.session.commit()
    return jsonify(section.to_dict()), 201


@bp.route("/api/tenants/<int:tenant_id>/sections/<int:section_id>", methods=["PATCH"])
def update_section(tenant_id, section_id):
    section, err = _resolve_section(tenant_id, section_id)
    if err:
        return jsonify({"error": err}), 404
    data = request.get_json(silent=True) or {}
    if "title" in data:
        section.title = str(data.get("title") or "")
    if "order" in data:
        order = _coerce_int(data.get("order"))
        if order is None:
            return jsonify({"error": "order must be an integer"}), 400
        section.order = order
    db.session.commit()
    return jsonify(section.to_dict())


@bp.route("/api/tenants/<int:tenant_id>/sections/<int:section_id>", methods=["DELETE"])
def delete_section(tenant_id, section_id):
    section, err = _resolve_section(tenant_id, section_id)
    if err:
        return jsonify({"error": err}), 404
    if Question.query.filter_by(tenant_id=tenant_id, section_id=section.id).count():
        return jsonify({"error": "section still has questions"}), 400
    db.session.delete(section)
    db.session.commit()
    return "", 204


@bp.route("/api/tenants/<int:tenant_id>/questions", methods=["POST"])
def create_question(tenant_id):
    db.get_or_404(Tenant, tenant_id)
    data = request.get_json(silent=True) or {}
    qid = data.get("id")
    if qid is not None:
        if not isinstance(qid, str) or not qid.strip():
            return jsonify({"error": "id must be a non-empty string"}), 400
        if db.session.get(Question, (tenant_id, qid)) is not None:
            return jsonify({"error": f"question {qid!r} already exists"}), 400
    section, err = _resolve_section(tenant_id, data.get("sectionId"))
    if err:
        db.session.rollback()
        return jsonify({"error": err}), 400
    if "order" not in data:
        data["order"] = Question.query.filter_by(tenant_id=tenant_id, section_id=section.id).count()

    question = Question(tenant_id=tenant_id, id=qid or new_question_id(), section_id=section.id)
    err = apply_question_payload(question, data)
    if err:
        db.session.rollback()
        return jsonify({"error": err}), 400
    db.session.add(question)
    db.session.commit()
    return jsonify(question.to_dict()), 201


@bp.route("/api/tenants/<int:tenant_id>/questions/<question_id>", methods=["PATCH"])
def update_question(tenant_id, question_id):
    question = db.session.get(Question, (tenant_id, question_id))
    if question is None:
        return jsonify({"error": "question not found"}), 404
    data = request.get_json(silent=True) or {}
    if "sectionId" in data:
        section, err = _resolve_section(tenant_id, data.get("sectionId"))
        if err:
            return jsonify({"error": err}), 400
        question.section_id = section.id
    err = apply_question_payload(question, data, partial=True)
    if err:
        db.session.rollback()
        return jsonify({"error": err}), 400
    db.session.commit()
    return jsonify(question.to_dict())


@bp.route("/api/tenants/<int:tenant_id>/questions/<question_id>", methods=["DELETE"])
def delete_question(tenant_id, question_id):
    question = db.session.get(Question, (tenant_id, question_id))
    if question is None:
        return jsonify({"error": "question not found"}), 404
    db.session.delete(question)
    db.session.commit()
    return "", 204
