import uuid

from ..extensions import db
from .base import TimestampMixin


QUESTION_TYPES = (
    "short-text",
    "radio",
    "checkbox-group",
    "long-text-ai",
    "description",
    "matrix",
    "signature-block",
    "file-upload",
    "text-group",
    "ranking",
)
CHOICE_TYPES = ("radio", "checkbox-group")
AI_TYPE = "long-text-ai"
MAX_RUBRIC_TRAITS = 10


def new_question_id():
    return uuid.uuid4().hex[:20]


class Question(db.Model, TimestampMixin):
    """One questionnaire item owned by a tenant.

    ``id`` is the stable key applicants' answers are stored under, so it is
    never regenerated once created.
    """
    __tablename__ = "questions"

    tenant_id = db.Column(db.Integer, db.ForeignKey("tenants.id"), primary_key=True)
    id = db.Column(db.String(64), primary_key=True, default=new_question_id)
    section_id = db.Column(db.Integer, db.ForeignKey("sections.id"), index=True)
    question_text = db.Column(db.Text, nullable=False, default="")
    type = db.Column(db.String(40), nullable=False)
    order = db.Column(db.Integer, nullable=False, default=0)
    required = db.Column(db.Boolean, nullable=False, default=False)
    options = db.Column(db.JSON)         # [{"value": "Yes", "points": 5}, ...]
    scoring_rubric = db.Column(db.JSON)  # ["Teamwork", "Initiative"]
    points = db.Column(db.Integer)       # per-trait maximum for long-text-ai

    @classmethod
    def ordered_for_tenant(cls, tenant_id):
        """Questions in form layout order: section order, then question order."""
        from .section import Section
        return (
            cls.query.outerjoin(Section, Section.id == cls.section_id)
            .filter(cls.tenant_id == tenant_id)
            .order_by(db.func.coalesce(Section.order, -1), Section.id, cls.order, cls.id)
        )

    def to_dict(self):
        return {
            "id": self.id,
            "sectionId": self.section_id,
            "questionText": self.question_text,
            "type": self.type,
            "order": self.order,
            "required": self.required,
            "options": self.options or [],
            "scoringRubric": self.scoring_rubric or [],
            "points": self.points,
        }

    def __repr__(self) -> str:
        return f"<Question tenant_id={self.tenant_id} id={self.id!r} type={self.type!r}>"
