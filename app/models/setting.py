from ..extensions import db
from .base import TenantScopedMixin, TimestampMixin


SCORE_THRESHOLD_KEY = 'score_threshold'


class Setting(db.Model, TenantScopedMixin, TimestampMixin):
    __tablename__ = 'settings'
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(128), nullable=False, index=True)
    value = db.Column(db.Text, nullable=True)

    __table_args__ = (
        db.UniqueConstraint('tenant_id', 'key', name='uq_settings_tenant_key'),
    )

    @classmethod
    def get_value(cls, tenant_id, key, default=None):
        row = cls.query.filter_by(tenant_id=tenant_id, key=key).first()
        if row is None or row.value is None:
            return default
        return row.value

    @classmethod
    def set_value(cls, tenant_id, key, value):
        row = cls.query.filter_by(tenant_id=tenant_id, key=key).first()
        if row is None:
            row = cls(tenant_id=tenant_id, key=key)
            db.session.add(row)
        row.value = None if value is None else str(value)
        return row

    def __repr__(self):
        return f"<Setting tenant_id={self.tenant_id} key={self.key} value={self.value}>"
