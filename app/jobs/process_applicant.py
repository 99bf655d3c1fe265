from datetime import datetime, timezone

from flask import current_app, has_app_context
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models.applicant import Applicant
from ..models.question import Question
from ..services.ai_dispatch import dispatch_ai_scoring
from ..services.answers import classify_answers
from ..services.errors import SchemaNotFoundError
from ..services.scoring import (
    ai_score_total,
    final_score,
    get_score_threshold,
    manual_score,
    route_status,
)


def load_questions(tenant_id: int):
    """Question schema keyed by id, in form layout order."""
    rows = Question.ordered_for_tenant(tenant_id).all()
    return {q.id: q for q in rows}


def _write_result(applicant_id: int, fields: dict, force: bool = False) -> bool:
    """Apply ``fields`` in one UPDATE; False when another run already processed the row."""
    q = Applicant.query.filter(Applicant.id == applicant_id)
    if not force:
        q = q.filter(Applicant.processed_at.is_(None))
    try:
        updated = q.update(fields, synchronize_session=False)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Failed to write score for applicant %s', applicant_id)
        raise
    return updated == 1


def _run_process_applicant(applicant_id: int, force: bool = False):
    applicant = db.session.get(Applicant, applicant_id)
    if not applicant:
        current_app.logger.warning('Applicant %s not found, nothing to score', applicant_id)
        return None
    if applicant.processed_at is not None and not force:
        current_app.logger.info('Applicant %s already processed at %s, skipping', applicant_id, applicant.processed_at)
        return None

    tenant_id = applicant.tenant_id
    questions = load_questions(tenant_id)
    if not questions:
        current_app.logger.error('No questionnaire for tenant %s; applicant %s left unscored', tenant_id, applicant_id)
        raise SchemaNotFoundError(tenant_id)

    classified = classify_answers(questions, applicant.answers or {})
    manual = manual_score(classified.choice)
    # release the read transaction while the slow oracle calls run
    db.session.commit()

    ai_analysis = dispatch_ai_scoring(classified.ai, applicant_id=applicant_id)
    ai_total = ai_score_total(ai_analysis)
    score = final_score(manual, ai_total)
    threshold = get_score_threshold(tenant_id)
    status = route_status(score, threshold)

    fields = {
        Applicant.score: score,
        Applicant.manual_score: manual,
        Applicant.ai_analysis: ai_analysis,
        Applicant.status: status,
        Applicant.processed_at: datetime.now(timezone.utc),
    }
    for key, value in classified.contact.items():
        fields[getattr(Applicant, key)] = value

    current_app.logger.info(
        'Updating applicant %s with final score: %s (Manual: %s, AI Avg: %.2f, AI questions %s/%s) and status: %s',
        applicant_id, score, manual, ai_total, len(ai_analysis), len(classified.ai), status,
    )
    if not _write_result(applicant_id, fields, force=force):
        current_app.logger.info('Applicant %s was processed concurrently, result discarded', applicant_id)
        return None

    return {
        'applicant_id': applicant_id,
        'score': score,
        'manual_score': manual,
        'ai_score_total': ai_total,
        'ai_analysis': ai_analysis,
        'status': status,
        'threshold': threshold,
        'contact': dict(classified.contact),
    }


def process_new_applicant(applicant_id: int, force: bool = False):
    """Entrypoint that ensures execution inside a Flask app context for workers."""
    if has_app_context():
        return _run_process_applicant(applicant_id, force=force)
    from app import create_app
    app = create_app()
    with app.app_context():
        return _run_process_applicant(applicant_id, force=force)
