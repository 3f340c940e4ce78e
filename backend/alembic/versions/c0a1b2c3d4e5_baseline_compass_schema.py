"""baseline_compass_schema

Revision ID: c0a1b2c3d4e5
Revises: 
Create Date: 2026-03-02 00:00:00.000000

Baseline: users, profiles, catalog, recommendations, assessments, AI analyses
and implementation progress. analytics_events follows in its own migration.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'c0a1b2c3d4e5'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        DO $$
        BEGIN
            IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = 'assessmenttype') THEN
                CREATE TYPE assessmenttype AS ENUM ('personal_productivity', 'business_transformation', 'cfo');
            END IF;
        END
        $$;
    """)

    op.execute("""
        DO $$
        BEGIN
            IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = 'aianalysistype') THEN
                CREATE TYPE aianalysistype AS ENUM ('consulting', 'organization', 'strategy');
            END IF;
        END
        $$;
    """)

    # Create users table
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('auth_user_id', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_auth_user_id'), 'users', ['auth_user_id'], unique=True)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=False)

    # Create profiles table
    op.create_table(
        'profiles',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=True),
        sa.Column('industry', sa.String(), nullable=True),
        sa.Column('company_size', sa.String(), nullable=True),
        sa.Column('ai_experience', sa.String(), nullable=True),
        sa.Column('goals', postgresql.JSONB(), nullable=True),
        sa.Column('primary_focus_areas', postgresql.JSONB(), nullable=True),
        sa.Column('time_availability', sa.String(), nullable=True),
        sa.Column('implementation_timeline', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id')
    )

    # Create categories table
    op.create_table(
        'categories',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(), nullable=True),
        sa.Column('icon', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    # Create tools table
    op.create_table(
        'tools',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('pricing_model', sa.String(), nullable=True),
        sa.Column('pricing_amount', sa.Float(), nullable=True),
        sa.Column('website_url', sa.String(), nullable=True),
        sa.Column('logo_url', sa.String(), nullable=True),
        sa.Column('setup_difficulty', sa.String(), nullable=True),
        sa.Column('time_to_value', sa.String(), nullable=True),
        sa.Column('target_roles', postgresql.JSONB(), nullable=True),
        sa.Column('target_industries', postgresql.JSONB(), nullable=True),
        sa.Column('target_company_sizes', postgresql.JSONB(), nullable=True),
        sa.Column('features', postgresql.JSONB(), nullable=True),
        sa.Column('integrations', postgresql.JSONB(), nullable=True),
        sa.Column('pros', postgresql.JSONB(), nullable=True),
        sa.Column('cons', postgresql.JSONB(), nullable=True),
        sa.Column('user_rating', sa.Float(), nullable=True),
        sa.Column('expert_rating', sa.Float(), nullable=True),
        sa.Column('popularity_score', sa.Float(), nullable=True),
        sa.Column('implementation_guide', sa.Text(), nullable=True),
        sa.Column('video_tutorial_url', sa.String(), nullable=True),
        sa.Column('status', sa.String(), server_default='active', nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tools_name'), 'tools', ['name'], unique=False)
    op.create_index(op.f('ix_tools_status'), 'tools', ['status'], unique=False)

    # Create tool_recommendations table (derived cache, replaced per scoring run)
    op.create_table(
        'tool_recommendations',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('tool_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('recommendation_score', sa.Float(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('status', sa.String(), server_default='active', nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['tool_id'], ['tools.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tool_recommendations_user_id'), 'tool_recommendations', ['user_id'], unique=False)

    # Create assessments table
    op.create_table(
        'assessments',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('assessment_type', postgresql.ENUM('personal_productivity', 'business_transformation', 'cfo', name='assessmenttype', create_type=False), nullable=False),
        sa.Column('assessment_data', postgresql.JSONB(), nullable=False),
        sa.Column('assessment_score', sa.Float(), nullable=True),
        sa.Column('status', sa.String(), server_default='completed', nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_assessments_user_id'), 'assessments', ['user_id'], unique=False)
    op.create_index(op.f('ix_assessments_assessment_type'), 'assessments', ['assessment_type'], unique=False)
    op.create_index(op.f('ix_assessments_created_at'), 'assessments', ['created_at'], unique=False)

    # Create ai_analyses table
    op.create_table(
        'ai_analyses',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('analysis_type', postgresql.ENUM('consulting', 'organization', 'strategy', name='aianalysistype', create_type=False), nullable=False),
        sa.Column('input_profile', postgresql.JSONB(), nullable=False),
        sa.Column('specific_context', postgresql.JSONB(), nullable=True),
        sa.Column('recommendations', postgresql.JSONB(), nullable=True),
        sa.Column('related_questions', postgresql.JSONB(), nullable=True),
        sa.Column('confidence_score', sa.Float(), nullable=True),
        sa.Column('raw_response', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_ai_analyses_user_id'), 'ai_analyses', ['user_id'], unique=False)

    # Create implementation_progress table
    op.create_table(
        'implementation_progress',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('tool_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('status', sa.String(), server_default='interested', nullable=False),
        sa.Column('time_invested_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['tool_id'], ['tools.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'tool_id', name='uq_implementation_progress_user_tool')
    )
    op.create_index(op.f('ix_implementation_progress_user_id'), 'implementation_progress', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_implementation_progress_user_id'), table_name='implementation_progress')
    op.drop_table('implementation_progress')
    op.drop_index(op.f('ix_ai_analyses_user_id'), table_name='ai_analyses')
    op.drop_table('ai_analyses')
    op.drop_index(op.f('ix_assessments_created_at'), table_name='assessments')
    op.drop_index(op.f('ix_assessments_assessment_type'), table_name='assessments')
    op.drop_index(op.f('ix_assessments_user_id'), table_name='assessments')
    op.drop_table('assessments')
    op.drop_index(op.f('ix_tool_recommendations_user_id'), table_name='tool_recommendations')
    op.drop_table('tool_recommendations')
    op.drop_index(op.f('ix_tools_status'), table_name='tools')
    op.drop_index(op.f('ix_tools_name'), table_name='tools')
    op.drop_table('tools')
    op.drop_table('categories')
    op.drop_table('profiles')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_auth_user_id'), table_name='users')
    op.drop_table('users')
    op.execute("DROP TYPE IF EXISTS aianalysistype")
    op.execute("DROP TYPE IF EXISTS assessmenttype")
