"""Create onboarding tables

Revision ID: a7c3e9f1b2d4
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = 'a7c3e9f1b2d4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, applications, documents, audit, notification and activity tables."""

    profile_role = postgresql.ENUM('candidate', 'admin', name='profilerole')
    profile_role.create(op.get_bind(), checkfirst=True)

    op.create_table(
        'profiles',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('role', postgresql.ENUM('candidate', 'admin', name='profilerole', create_type=False),
                  nullable=False, server_default='candidate'),
        sa.Column('avatar_path', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_profiles_id', 'profiles', ['id'])
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=True)
    op.create_index('ix_profiles_role', 'profiles', ['role'])

    op.create_table(
        'candidate_applications',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('post_applied_for', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('father_or_husband_name', sa.String(length=255), nullable=True),
        sa.Column('permanent_address', sa.Text(), nullable=True),
        sa.Column('communication_address', sa.Text(), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('sex', sa.String(length=10), nullable=True),
        sa.Column('nationality', sa.String(length=100), nullable=True),
        sa.Column('marital_status', sa.String(length=20), nullable=True),
        sa.Column('religion', sa.String(length=100), nullable=True),
        sa.Column('mobile_no', sa.String(length=20), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('bank_name', sa.String(length=255), nullable=True),
        sa.Column('account_no', sa.String(length=50), nullable=True),
        sa.Column('ifsc_code', sa.String(length=20), nullable=True),
        sa.Column('branch', sa.String(length=255), nullable=True),
        sa.Column('pan_no', sa.String(length=20), nullable=True),
        sa.Column('aadhar_no', sa.String(length=20), nullable=True),
        sa.Column('education', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('declaration_place', sa.String(length=255), nullable=True),
        sa.Column('declaration_date', sa.Date(), nullable=True),
        sa.Column('declaration_accepted', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('status', sa.String(length=25), nullable=False, server_default='draft'),
        sa.Column('progress_percent', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('required_document_types', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reviewed_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.ForeignKeyConstraint(['reviewed_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "status IN ('draft', 'submitted', 'under_review', 'accepted', 'rejected', "
            "'documents_pending', 'completed')",
            name='ck_candidate_applications_status'
        ),
        sa.CheckConstraint(
            "status <> 'rejected' OR length(trim(coalesce(rejection_reason, ''))) > 0",
            name='ck_candidate_applications_rejection_reason'
        ),
        sa.CheckConstraint(
            'progress_percent BETWEEN 0 AND 100',
            name='ck_candidate_applications_progress'
        ),
    )
    op.create_index('ix_candidate_applications_id', 'candidate_applications', ['id'])
    op.create_index('ix_candidate_applications_user_id', 'candidate_applications', ['user_id'])
    op.create_index('ix_candidate_applications_status', 'candidate_applications', ['status'])
    op.create_index('ix_candidate_applications_submitted_at', 'candidate_applications', ['submitted_at'])
    op.create_index('ix_candidate_applications_reviewed_by', 'candidate_applications', ['reviewed_by'])
    op.create_index('ix_candidate_applications_created_at', 'candidate_applications', ['created_at'])

    op.create_table(
        'documents',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('application_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('document_type', sa.String(length=50), nullable=False),
        sa.Column('file_name', sa.String(length=255), nullable=False),
        sa.Column('file_type', sa.String(length=50), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False),
        sa.Column('storage_path', sa.String(length=500), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('verified_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['application_id'], ['candidate_applications.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.ForeignKeyConstraint(['verified_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "status IN ('pending', 'uploaded', 'verified', 'rejected')",
            name='ck_documents_status'
        ),
    )
    op.create_index('ix_documents_id', 'documents', ['id'])
    op.create_index('ix_documents_application_id', 'documents', ['application_id'])
    op.create_index('ix_documents_user_id', 'documents', ['user_id'])
    op.create_index('ix_documents_document_type', 'documents', ['document_type'])
    op.create_index('ix_documents_status', 'documents', ['status'])
    op.create_index('ix_documents_created_at', 'documents', ['created_at'])

    op.create_table(
        'admin_actions_log',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('admin_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('application_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('details', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['admin_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_admin_actions_log_id', 'admin_actions_log', ['id'])
    op.create_index('ix_admin_actions_log_admin_id', 'admin_actions_log', ['admin_id'])
    op.create_index('ix_admin_actions_log_application_id', 'admin_actions_log', ['application_id'])
    op.create_index('ix_admin_actions_log_created_at', 'admin_actions_log', ['created_at'])

    op.create_table(
        'notifications',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False, server_default='info'),
        sa.Column('link', sa.String(length=255), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_notifications_id', 'notifications', ['id'])
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_is_read', 'notifications', ['is_read'])
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])

    op.create_table(
        'activity_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('application_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('activity_type', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('performed_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('metadata', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['application_id'], ['candidate_applications.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['performed_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_activity_logs_id', 'activity_logs', ['id'])
    op.create_index('ix_activity_logs_application_id', 'activity_logs', ['application_id'])
    op.create_index('ix_activity_logs_created_at', 'activity_logs', ['created_at'])


def downgrade() -> None:
    """Drop every onboarding table."""
    op.drop_table('activity_logs')
    op.drop_table('notifications')
    op.drop_table('admin_actions_log')
    op.drop_table('documents')
    op.drop_table('candidate_applications')
    op.drop_table('profiles')
    postgresql.ENUM(name='profilerole').drop(op.get_bind(), checkfirst=True)
