"""initial HireTrack schema

Revision ID: a1f3c9d2e7b4
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa


revision = 'a1f3c9d2e7b4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('username', sa.String(50), nullable=False, unique=True, index=True),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('linkedin_profile', sa.String(500)),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.Column('last_login_at', sa.DateTime()),
        sa.Column('deleted_at', sa.DateTime(), index=True),
    )
    op.create_table(
        'clients',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('author_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), index=True),
        sa.Column('company', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100)),
        sa.Column('last_name', sa.String(100)),
        sa.Column('position', sa.String(255)),
        sa.Column('email', sa.String(255)),
        sa.Column('phone', sa.String(50)),
        sa.Column('location', sa.String(255)),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.Column('deleted_at', sa.DateTime(), index=True),
    )
    op.create_table(
        'joborder',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('author_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), index=True),
        sa.Column('client_id', sa.String(36), sa.ForeignKey('clients.id', ondelete='SET NULL'), index=True),
        sa.Column('job_title', sa.String(255), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, index=True),
        sa.Column('priority', sa.String(10), nullable=False, index=True, server_default='Mid'),
        sa.Column('archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('schedule', sa.String(255)),
        sa.Column('client_budget', sa.String(255)),
        sa.Column('responsibilities_requirements', sa.Text()),
        sa.Column('updates', sa.Text()),
        sa.Column('job_description', sa.String(500)),
        sa.Column('sourcing_preference', sa.Text()),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.Column('deleted_at', sa.DateTime(), index=True),
    )
    op.create_table(
        'joborder_favorites',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('joborder_id', sa.String(36), sa.ForeignKey('joborder.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime()),
        sa.UniqueConstraint('user_id', 'joborder_id', name='uq_joborder_favorites_user_joborder'),
    )
    op.create_table(
        'applicants',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('author_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), index=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, index=True),
        sa.Column('phone', sa.String(50)),
        sa.Column('location', sa.String(255)),
        sa.Column('linkedin_profile', sa.String(500)),
        sa.Column('cv_link', sa.String(1000)),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.Column('deleted_at', sa.DateTime(), index=True),
    )
    op.create_table(
        'joborder_applicant',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('joborder_id', sa.String(36), sa.ForeignKey('joborder.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('client_id', sa.String(36), sa.ForeignKey('clients.id', ondelete='SET NULL'), index=True),
        sa.Column('applicant_id', sa.String(36), sa.ForeignKey('applicants.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('author_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), index=True),
        sa.Column('application_stage', sa.String(50), nullable=False, index=True),
        sa.Column('application_status', sa.String(20), nullable=False),
        sa.Column('asking_salary', sa.Numeric(12, 2)),
        sa.Column('interview_notes', sa.Text()),
        sa.Column('client_feedback', sa.Text()),
        sa.Column('candidate_start_date', sa.Date()),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
    )
    op.create_table(
        'joborder_commission',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'joborder_applicant_id', sa.String(36),
            sa.ForeignKey('joborder_applicant.id', ondelete='CASCADE'),
            nullable=False, unique=True,
        ),
        sa.Column('current_commission', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('received_commission', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('commission_details', sa.Text()),
        sa.Column('status', sa.String(50)),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.Column('deleted_at', sa.DateTime(), index=True),
    )
    op.create_table(
        'pipeline_cards',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('author_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_table(
        'pipeline_card_applicants',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('card_id', sa.String(36), sa.ForeignKey('pipeline_cards.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('applicant_id', sa.String(36), sa.ForeignKey('applicants.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('added_at', sa.DateTime()),
        sa.UniqueConstraint('card_id', 'applicant_id', name='uq_pipeline_card_applicants_card_applicant'),
    )
    op.create_table(
        'system_logs',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), index=True),
        sa.Column('action', sa.String(20), nullable=False),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.String(36)),
        sa.Column('details', sa.Text()),
        sa.Column('created_at', sa.DateTime(), index=True),
    )
    op.create_index('idx_system_logs_entity', 'system_logs', ['entity_type', 'entity_id'])
    op.create_table(
        'log_access_control',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), index=True),
    )


def downgrade():
    op.drop_table('log_access_control')
    op.drop_index('idx_system_logs_entity', table_name='system_logs')
    op.drop_table('system_logs')
    op.drop_table('pipeline_card_applicants')
    op.drop_table('pipeline_cards')
    op.drop_table('joborder_commission')
    op.drop_table('joborder_applicant')
    op.drop_table('applicants')
    op.drop_table('joborder_favorites')
    op.drop_table('joborder')
    op.drop_table('clients')
    op.drop_table('users')
