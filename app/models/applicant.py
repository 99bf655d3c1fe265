from datetime import datetime, timezone

from ..extensions import db
from .base import TenantScopedMixin, TimestampMixin


STATUS_NEW = "New"


def _utcnow():
    return datetime.now(timezone.utc)


class Applicant(db.Model, TenantScopedMixin, TimestampMixin):
    __tablename__ = "applicants"

    id = db.Column(db.Integer, primary_key=True)
    # TenantScopedMixin: tenant_id
    answers = db.Column(db.JSON, nullable=False, default=dict)  # {question_id: answer}
    status = db.Column(db.String(40), nullable=False, default=STATUS_NEW, index=True)
    submitted_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    # written once by the scoring job
    score = db.Column(db.Integer, nullable=False, default=0)
    manual_score = db.Column(db.Integer)
    ai_analysis = db.Column(db.JSON)     # {question_id: {"trait_scores": {...}, "analysis": {...}}}
    processed_at = db.Column(db.DateTime, index=True)

    # contact fields extracted from short-text answers
    name = db.Column(db.String(200))
    email = db.Column(db.String(254), index=True)
    phone = db.Column(db.String(40))

    resume_url = db.Column(db.Text)
    signature = db.Column(db.Text)

    def to_dict(self, detail=False):
        out = {
            "id": self.id,
            "tenantId": self.tenant_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "status": self.status,
            "score": self.score,
            "manualScore": self.manual_score,
            "submittedAt": self.submitted_at.isoformat() if self.submitted_at else None,
            "processedAt": self.processed_at.isoformat() if self.processed_at else None,
        }
        if detail:
            out.update({
                "answers": self.answers or {},
                "aiAnalysis": self.ai_analysis or {},
                "resumeUrl": self.resume_url,
                "signature": self.signature,
            })
        return out

    def __repr__(self) -> str:
        return f"<Applicant id={self.id} tenant_id={self.tenant_id} status={self.status!r}>"
