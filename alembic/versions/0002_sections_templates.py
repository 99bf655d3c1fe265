"""Questionnaire sections and shared question templates

Revision ID: 0002_sections_templates
Revises: 0001_initial
Create Date: 2026-10-20 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0002_sections_templates'
down_revision = '0001_initial'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'sections',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_sections_tenant_id', 'sections', ['tenant_id'])
    op.create_table(
        'question_templates',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('sections', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )
    with op.batch_alter_table('questions') as batch:
        batch.add_column(sa.Column('section_id', sa.Integer(), nullable=True))
        batch.create_foreign_key('fk_questions_section_id', 'sections', ['section_id'], ['id'])
        batch.create_index('ix_questions_section_id', ['section_id'])


def downgrade() -> None:
    with op.batch_alter_table('questions') as batch:
        batch.drop_index('ix_questions_section_id')
        batch.drop_constraint('fk_questions_section_id', type_='foreignkey')
        batch.drop_column('section_id')
    op.drop_table('question_templates')
    op.drop_table('sections')
