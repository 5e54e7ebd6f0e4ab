"""evaluation and ranking schema

Revision ID: 0001_evaluation_schema
Revises: None
Create Date: 2026-10-18 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_evaluation_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(50)),
        *_timestamps(),
    )

    op.create_table(
        "institutions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("year", sa.Integer, nullable=False, index=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("available_spots", sa.Integer, nullable=False, server_default="0"),
        sa.Column("filled_spots", sa.Integer, nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("available_spots >= 0", name="ck_institutions_available_spots"),
        sa.CheckConstraint("filled_spots >= 0", name="ck_institutions_filled_spots"),
    )

    op.create_table(
        "applications",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("year", sa.Integer, nullable=False, index=True),
        sa.Column("candidate_id", sa.String(8), nullable=False),
        sa.Column("email", sa.String(254)),
        sa.Column("selected_institution_id", sa.Integer, sa.ForeignKey("institutions.id"), index=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft", index=True),
        sa.Column("validity_status", sa.String(20)),
        sa.Column("gpa", sa.Float),
        sa.Column("submitted_at", sa.DateTime),
        sa.Column("objective_score", sa.Float, nullable=False, server_default="0"),
        sa.Column("interview_score", sa.Float),
        sa.Column("external_score", sa.Float),
        sa.Column("total_score", sa.Float, nullable=False, server_default="0"),
        sa.Column("scores_updated_at", sa.DateTime),
        sa.Column("rank_position", sa.Integer),
        sa.Column("advancing_to_interview", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("ranking_published_at", sa.DateTime),
        *_timestamps(),
        sa.UniqueConstraint("year", "candidate_id", name="uq_applications_year_candidate"),
    )

    op.create_table(
        "criteria",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("year", sa.Integer, nullable=False, index=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("display_name", sa.String(200)),
        sa.Column("max_points", sa.Float, nullable=False, server_default="10"),
        sa.Column("weight", sa.Float, nullable=False, server_default="1"),
        sa.Column("category", sa.String(20), nullable=False, server_default="objective"),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("year", "name", name="uq_criteria_year_name"),
        sa.CheckConstraint("max_points >= 0", name="ck_criteria_max_points"),
        sa.CheckConstraint("weight >= 0", name="ck_criteria_weight"),
        sa.CheckConstraint("category IN ('objective', 'subjective')", name="ck_criteria_category"),
    )

    op.create_table(
        "interviewers",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("year", sa.Integer, nullable=False, index=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column("institution", sa.String(200)),
        sa.Column("specialty", sa.String(200)),
        sa.Column("access_token", sa.String(64), unique=True, index=True),
        sa.Column("token_issued_at", sa.DateTime),
        sa.Column("token_expires_at", sa.DateTime),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("deactivated_at", sa.DateTime),
        *_timestamps(),
    )

    op.create_table(
        "evaluations",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("application_id", sa.Integer, sa.ForeignKey("applications.id"), nullable=False, index=True),
        sa.Column("criterion_id", sa.Integer, sa.ForeignKey("criteria.id"), nullable=False),
        sa.Column("score", sa.Float, nullable=False),
        sa.Column("notes", sa.Text),
        sa.Column("evaluator", sa.String(255)),
        sa.Column("scored_at", sa.DateTime, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("application_id", "criterion_id", name="uq_evaluations_application_criterion"),
    )

    op.create_table(
        "interview_scores",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("application_id", sa.Integer, sa.ForeignKey("applications.id"), nullable=False, index=True),
        sa.Column("interviewer_id", sa.Integer, sa.ForeignKey("interviewers.id"), nullable=False),
        sa.Column("score", sa.Float, nullable=False),
        sa.Column("notes", sa.Text),
        sa.Column("scored_at", sa.DateTime, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("application_id", "interviewer_id", name="uq_interview_scores_application_interviewer"),
    )

    op.create_table(
        "criterion_scores",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("application_id", sa.Integer, sa.ForeignKey("applications.id"), nullable=False, index=True),
        sa.Column("criterion_id", sa.Integer, sa.ForeignKey("criteria.id"), nullable=False),
        sa.Column("evaluator_id", sa.Integer, sa.ForeignKey("interviewers.id"), nullable=False),
        sa.Column("score", sa.Float, nullable=False),
        sa.Column("scored_at", sa.DateTime, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("application_id", "criterion_id", "evaluator_id", name="uq_criterion_scores_key"),
    )

    op.create_table(
        "magic_link_accesses",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("interviewer_id", sa.Integer, sa.ForeignKey("interviewers.id"), nullable=False, index=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("application_id", sa.Integer, sa.ForeignKey("applications.id")),
        sa.Column("remote_addr", sa.String(64)),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("application_id", sa.Integer, sa.ForeignKey("applications.id"), index=True),
        sa.Column("interviewer_id", sa.Integer, sa.ForeignKey("interviewers.id")),
        sa.Column("type", sa.String(50)),
        sa.Column("sent_to", sa.String(255)),
        sa.Column("subject", sa.String(255)),
        sa.Column("body", sa.Text),
        sa.Column("provider_message_id", sa.String(255)),
        sa.Column("sent_at", sa.DateTime),
        *_timestamps(),
    )


def downgrade():
    for name in (
        "notifications", "magic_link_accesses", "criterion_scores", "interview_scores",
        "evaluations", "interviewers", "criteria", "applications", "institutions", "users",
    ):
        op.drop_table(name)
