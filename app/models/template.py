from ..extensions import db
from .base import TimestampMixin


class QuestionTemplate(db.Model, TimestampMixin):
    """Shared starter questionnaire, copied into a tenant on request.

    ``sections`` holds ``[{"title": ..., "questions": [question payload, ...]}, ...]``
    using the same question payload shape as the questions API.
    """
    __tablename__ = "question_templates"
    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    sections = db.Column(db.JSON, nullable=False, default=list)

    def to_dict(self, detail=False):
        out = {"id": self.id, "name": self.name, "description": self.description}
        if detail:
            out["sections"] = self.sections or []
        return out
