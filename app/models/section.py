from ..extensions import db
from .base import TenantScopedMixin, TimestampMixin


DEFAULT_SECTION_TITLE = "General"


class Section(db.Model, TenantScopedMixin, TimestampMixin):
    __tablename__ = "sections"
    id = db.Column(db.Integer, primary_key=True)
    # TenantScopedMixin: tenant_id
    title = db.Column(db.String(200), nullable=False, default="")
    order = db.Column(db.Integer, nullable=False, default=0)

    @classmethod
    def default_for(cls, tenant_id):
        """First section of the tenant's questionnaire, created on demand."""
        section = cls.query.filter_by(tenant_id=tenant_id).order_by(cls.order, cls.id).first()
        if section is None:
            section = cls(tenant_id=tenant_id, title=DEFAULT_SECTION_TITLE, order=0)
            db.session.add(section)
            db.session.flush()
        return section

    def to_dict(self):
        return {"id": self.id, "title": self.title, "order": self.order}

    def __repr__(self) -> str:
        return f"<Section id={self.id} tenant_id={self.tenant_id} title={self.title!r}>"
