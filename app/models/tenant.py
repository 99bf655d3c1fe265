from ..extensions import db
from .base import TimestampMixin

class Tenant(db.Model, TimestampMixin):
    __tablename__ = "tenants"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, unique=True)

    def to_dict(self):
        return {"id": self.id, "name": self.name}
