"""initial survey schema

Revision ID: 4a1d2c9e7b10
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '4a1d2c9e7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('issuer_value', sa.String(length=1000), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('issuer_value'),
    )
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('object_id', sa.String(length=38), nullable=False),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('tenant_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_object_id', 'users', ['object_id'], unique=True)
    op.create_table(
        'surveys',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=True),
        sa.Column('tenant_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=True),
        sa.Column('published', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id']),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_surveys_owner_id', 'surveys', ['owner_id'], unique=False)
    op.create_index('idx_surveys_tenant_published', 'surveys', ['tenant_id', 'published'], unique=False)
    op.create_table(
        'questions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('survey_id', sa.Integer(), nullable=False),
        sa.Column('text', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('possible_answers', sa.Text(), nullable=True),
        sa.CheckConstraint("type in ('SimpleText','MultiLineText','FiveStars')", name='ck_questions_type'),
        sa.ForeignKeyConstraint(['survey_id'], ['surveys.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_questions_survey_id', 'questions', ['survey_id'], unique=False)
    op.create_table(
        'survey_contributors',
        sa.Column('survey_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['survey_id'], ['surveys.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('survey_id', 'user_id'),
    )
    op.create_index('idx_survey_contributors_user_id', 'survey_contributors', ['user_id'], unique=False)
    op.create_table(
        'contributor_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('survey_id', sa.Integer(), nullable=False),
        sa.Column('email_address', sa.String(length=320), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['survey_id'], ['surveys.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_contributor_requests_email_address', 'contributor_requests', ['email_address'], unique=False)
    op.create_table(
        'user_token_caches',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_object_id', sa.String(length=38), nullable=False),
        sa.Column('client_id', sa.String(length=64), nullable=False),
        sa.Column('cache_bits', sa.LargeBinary(), nullable=True),
        sa.Column('last_write', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_object_id', 'client_id', name='uq_user_token_caches_user_client'),
    )


def downgrade() -> None:
    op.drop_table('user_token_caches')
    op.drop_index('ix_contributor_requests_email_address', table_name='contributor_requests')
    op.drop_table('contributor_requests')
    op.drop_index('idx_survey_contributors_user_id', table_name='survey_contributors')
    op.drop_table('survey_contributors')
    op.drop_index('idx_questions_survey_id', table_name='questions')
    op.drop_table('questions')
    op.drop_index('idx_surveys_tenant_published', table_name='surveys')
    op.drop_index('idx_surveys_owner_id', table_name='surveys')
    op.drop_table('surveys')
    op.drop_index('ix_users_object_id', table_name='users')
    op.drop_table('users')
    op.drop_table('tenants')
