"""Initial marketplace schema: api keys, call logs, jobs, proposals, profiles, listings

Revision ID: 3f9c1a7e2b10
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1a7e2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

job_status = sa.Enum('OPEN', 'ASSIGNED', 'IN_PROGRESS', 'REVIEW', 'COMPLETED', 'CANCELLED', name='jobstatus')
payment_type = sa.Enum('FIXED', 'HOURLY', name='paymenttype')
proposal_status = sa.Enum('PENDING', 'ACCEPTED', 'REJECTED', 'WITHDRAWN', name='proposalstatus')
user_role = sa.Enum('HUMAN', 'AGENT', name='userrole')
listing_status = sa.Enum('DRAFT', 'ACTIVE', 'PAUSED', name='listingstatus')


def upgrade() -> None:
    op.create_table(
        'api_keys',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('agent_id', sa.String(), nullable=False),
        sa.Column('key_hash', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(op.f('ix_api_keys_agent_id'), 'api_keys', ['agent_id'], unique=False)
    op.create_index(op.f('ix_api_keys_key_hash'), 'api_keys', ['key_hash'], unique=True)
    op.create_index(op.f('ix_api_keys_is_active'), 'api_keys', ['is_active'], unique=False)
    op.create_index(op.f('ix_api_keys_created_at'), 'api_keys', ['created_at'], unique=False)

    op.create_table(
        'api_call_logs',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('api_key_id', sa.String(), nullable=False),
        sa.Column('agent_id', sa.String(), nullable=False),
        sa.Column('endpoint', sa.String(), nullable=False),
        sa.Column('method', sa.String(length=10), nullable=False),
        sa.Column('status_code', sa.Integer(), nullable=False),
        sa.Column('response_time', sa.Float(), nullable=False),
        sa.Column('request_body', sa.JSON(), nullable=True),
        sa.Column('request_id', sa.String(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(op.f('ix_api_call_logs_api_key_id'), 'api_call_logs', ['api_key_id'], unique=False)
    op.create_index(op.f('ix_api_call_logs_agent_id'), 'api_call_logs', ['agent_id'], unique=False)
    op.create_index(op.f('ix_api_call_logs_status_code'), 'api_call_logs', ['status_code'], unique=False)
    op.create_index(op.f('ix_api_call_logs_request_id'), 'api_call_logs', ['request_id'], unique=False)
    op.create_index(op.f('ix_api_call_logs_timestamp'), 'api_call_logs', ['timestamp'], unique=False)

    op.create_table(
        'jobs',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('payment_type', payment_type, nullable=False),
        sa.Column('budget_min', sa.Float(), nullable=True),
        sa.Column('budget_max', sa.Float(), nullable=True),
        sa.Column('currency', sa.String(length=8), nullable=False),
        sa.Column('status', job_status, nullable=False),
        sa.Column('client_id', sa.String(), nullable=False),
        sa.Column('freelancer_id', sa.String(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('requirements', sa.JSON(), nullable=True),
        sa.Column('permissions', sa.JSON(), nullable=True),
        sa.Column('attachments', sa.JSON(), nullable=True),
        sa.Column('deadline', sa.DateTime(timezone=True), nullable=True),
        sa.Column('proposal_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(op.f('ix_jobs_category'), 'jobs', ['category'], unique=False)
    op.create_index(op.f('ix_jobs_status'), 'jobs', ['status'], unique=False)
    op.create_index(op.f('ix_jobs_client_id'), 'jobs', ['client_id'], unique=False)
    op.create_index(op.f('ix_jobs_freelancer_id'), 'jobs', ['freelancer_id'], unique=False)
    op.create_index(op.f('ix_jobs_created_at'), 'jobs', ['created_at'], unique=False)

    op.create_table(
        'proposals',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('job_id', sa.String(length=36), sa.ForeignKey('jobs.id'), nullable=False),
        sa.Column('client_id', sa.String(), nullable=False),
        sa.Column('freelancer_id', sa.String(), nullable=False),
        sa.Column('freelancer_name', sa.String(), nullable=False),
        sa.Column('freelancer_avatar', sa.String(), nullable=True),
        sa.Column('cover_letter', sa.Text(), nullable=False),
        sa.Column('bid_amount', sa.Float(), nullable=False),
        sa.Column('estimated_duration', sa.String(), nullable=False),
        sa.Column('status', proposal_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(op.f('ix_proposals_job_id'), 'proposals', ['job_id'], unique=False)
    op.create_index(op.f('ix_proposals_client_id'), 'proposals', ['client_id'], unique=False)
    op.create_index(op.f('ix_proposals_freelancer_id'), 'proposals', ['freelancer_id'], unique=False)
    op.create_index(op.f('ix_proposals_status'), 'proposals', ['status'], unique=False)
    op.create_index(op.f('ix_proposals_created_at'), 'proposals', ['created_at'], unique=False)

    op.create_table(
        'user_profiles',
        sa.Column('uid', sa.String(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('display_name', sa.String(), nullable=False),
        sa.Column('photo_url', sa.String(), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('skills', sa.JSON(), nullable=True),
        sa.Column('hourly_rate', sa.Float(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('agent_identifier', sa.String(), nullable=True),
        sa.Column('rating', sa.Float(), nullable=False, server_default='0'),
        sa.Column('review_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('jobs_completed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(op.f('ix_user_profiles_role'), 'user_profiles', ['role'], unique=False)
    op.create_index(op.f('ix_user_profiles_created_at'), 'user_profiles', ['created_at'], unique=False)

    op.create_table(
        'agent_listings',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('agent_id', sa.String(), nullable=False),
        sa.Column('agent_identifier', sa.String(), nullable=False),
        sa.Column('agent_name', sa.String(), nullable=False),
        sa.Column('agent_avatar', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('tiers', sa.JSON(), nullable=False),
        sa.Column('use_tiers', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('main_image', sa.String(), nullable=False),
        sa.Column('gallery', sa.JSON(), nullable=False),
        sa.Column('video_url', sa.String(), nullable=True),
        sa.Column('rating', sa.Float(), nullable=False, server_default='5'),
        sa.Column('review_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('order_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', listing_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(op.f('ix_agent_listings_agent_id'), 'agent_listings', ['agent_id'], unique=False)
    op.create_index(op.f('ix_agent_listings_category'), 'agent_listings', ['category'], unique=False)
    op.create_index(op.f('ix_agent_listings_status'), 'agent_listings', ['status'], unique=False)
    op.create_index(op.f('ix_agent_listings_created_at'), 'agent_listings', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_table('agent_listings')
    op.drop_table('user_profiles')
    op.drop_table('proposals')
    op.drop_table('jobs')
    op.drop_table('api_call_logs')
    op.drop_table('api_keys')

    bind = op.get_bind()
    for enum_type in (listing_status, user_role, proposal_status, payment_type, job_status):
        enum_type.drop(bind, checkfirst=True)
