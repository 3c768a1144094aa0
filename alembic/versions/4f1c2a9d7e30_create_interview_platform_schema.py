"""create_interview_platform_schema

Creates the interview platform tables:
1. users (admin/candidate accounts, persisted password reset tokens)
2. candidates, invitations
3. interviews (with optimistic lock version), answers, evaluations
4. app_settings (admin-selected AI provider)

Revision ID: 4f1c2a9d7e30
Revises:
Create Date: 2026-10-19 09:12:40.118342

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4f1c2a9d7e30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all interview platform tables."""

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False, index=True),
        sa.Column('email', sa.String(), nullable=False, unique=True, index=True),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.Enum('admin', 'candidate', name='userrole'), nullable=False, server_default='candidate'),
        sa.Column('reset_token', sa.String(), nullable=True, unique=True, index=True),
        sa.Column('reset_token_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'candidates',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False, index=True),
        sa.Column('name', sa.String(), nullable=False, server_default='Not specified'),
        sa.Column('email', sa.String(), nullable=False, index=True),
        sa.Column('phone', sa.String(), nullable=False, server_default='Not specified'),
        sa.Column('job_role', sa.String(), nullable=False),
        sa.Column('resume_text', sa.Text(), nullable=False, server_default=''),
        sa.Column('invited', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('disqualified', sa.Boolean(), nullable=False, server_default='false', index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'invitations',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False, index=True),
        sa.Column('candidate_id', sa.Integer(), nullable=True, index=True),
        sa.Column('email', sa.String(), nullable=False, index=True),
        sa.Column('token', sa.String(), nullable=False, unique=True, index=True),
        sa.Column('job_role', sa.String(), nullable=False),
        sa.Column('skillset', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('status', sa.Enum('pending', 'accepted', name='invitationstatus'), nullable=False, server_default='pending'),
        sa.Column('candidate_info', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidates.id'], ondelete='CASCADE'),
    )

    op.create_table(
        'interviews',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False, index=True),
        sa.Column('candidate_id', sa.Integer(), nullable=False, index=True),
        sa.Column('questions', postgresql.JSONB(), nullable=False),
        sa.Column('current_question_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.Enum('in-progress', 'completed', name='interviewstatus'), nullable=False, server_default='in-progress', index=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidates.id'], ondelete='CASCADE'),
    )

    op.create_table(
        'answers',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False, index=True),
        sa.Column('interview_id', sa.Integer(), nullable=False, index=True),
        sa.Column('question_index', sa.Integer(), nullable=False),
        sa.Column('question_text', sa.Text(), nullable=False),
        sa.Column('answer_text', sa.Text(), nullable=False),
        sa.Column('score', sa.Float(), nullable=False),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['interview_id'], ['interviews.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('interview_id', 'question_index', name='uq_answers_interview_question'),
    )

    op.create_table(
        'evaluations',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False, index=True),
        sa.Column('interview_id', sa.Integer(), nullable=False, unique=True, index=True),
        sa.Column('overall_score', sa.Integer(), nullable=False, index=True),
        sa.Column('technical_score', sa.Integer(), nullable=False),
        sa.Column('behavioral_score', sa.Integer(), nullable=False),
        sa.Column('strengths', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('improvement_areas', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('recommendation', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['interview_id'], ['interviews.id'], ondelete='CASCADE'),
    )

    op.create_table(
        'app_settings',
        sa.Column('key', sa.String(), primary_key=True, nullable=False),
        sa.Column('value', sa.String(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    """Drop all interview platform tables."""
    op.drop_table('app_settings')
    op.drop_table('evaluations')
    op.drop_table('answers')
    op.drop_table('interviews')
    op.drop_table('invitations')
    op.drop_table('candidates')
    op.drop_table('users')

    op.execute('DROP TYPE IF EXISTS interviewstatus')
    op.execute('DROP TYPE IF EXISTS invitationstatus')
    op.execute('DROP TYPE IF EXISTS userrole')
