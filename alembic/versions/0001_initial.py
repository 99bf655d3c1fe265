"""Initial schema: tenants, questions, applicants, settings

Revision ID: 0001_initial
Revises: None
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(120), nullable=False, unique=True),
        *_timestamps(),
    )
    op.create_table(
        'questions',
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), primary_key=True),
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('question_text', sa.Text(), nullable=False),
        sa.Column('type', sa.String(40), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('required', sa.Boolean(), nullable=False),
        sa.Column('options', sa.JSON()),
        sa.Column('scoring_rubric', sa.JSON()),
        sa.Column('points', sa.Integer()),
        *_timestamps(),
    )
    op.create_table(
        'applicants',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('answers', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(40), nullable=False),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('manual_score', sa.Integer()),
        sa.Column('ai_analysis', sa.JSON()),
        sa.Column('processed_at', sa.DateTime()),
        sa.Column('name', sa.String(200)),
        sa.Column('email', sa.String(254)),
        sa.Column('phone', sa.String(40)),
        sa.Column('resume_url', sa.Text()),
        sa.Column('signature', sa.Text()),
        *_timestamps(),
    )
    op.create_index('ix_applicants_tenant_id', 'applicants', ['tenant_id'])
    op.create_index('ix_applicants_status', 'applicants', ['status'])
    op.create_index('ix_applicants_processed_at', 'applicants', ['processed_at'])
    op.create_index('ix_applicants_email', 'applicants', ['email'])
    op.create_table(
        'settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('key', sa.String(128), nullable=False),
        sa.Column('value', sa.Text()),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'key', name='uq_settings_tenant_key'),
    )
    op.create_index('ix_settings_tenant_id', 'settings', ['tenant_id'])
    op.create_index('ix_settings_key', 'settings', ['key'])


def downgrade() -> None:
    op.drop_table('settings')
    op.drop_table('applicants')
    op.drop_table('questions')
    op.drop_table('tenants')
