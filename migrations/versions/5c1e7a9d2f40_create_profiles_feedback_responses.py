"""create users, profiles, feedback, admin_responses

Revision ID: 5c1e7a9d2f40
Revises:
Create Date: 2026-10-18 09:12:44.318205

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5c1e7a9d2f40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ux_users_email_lower", "users", [sa.text("lower(email)")], unique=True)

    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["id"], ["users.id"], name="fk_profiles_user", ondelete="CASCADE"),
        sa.CheckConstraint("role IN ('admin','trainee')", name="ck_profiles_role_valid"),
    )

    op.create_table(
        "feedback",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("trainee_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.ForeignKeyConstraint(["trainee_id"], ["profiles.id"], name="feedback_trainee_id_fkey", ondelete="CASCADE"),
    )
    op.create_index("ix_feedback_trainee_id", "feedback", ["trainee_id"])
    op.create_index("ix_feedback_trainee_created_at", "feedback", ["trainee_id", "created_at"])

    op.create_table(
        "admin_responses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("feedback_id", sa.Integer(), nullable=False),
        sa.Column("admin_id", sa.Integer(), nullable=False),
        sa.Column("response_text", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="replied"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.ForeignKeyConstraint(["feedback_id"], ["feedback.id"], name="fk_admin_responses_feedback", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["admin_id"], ["profiles.id"], name="fk_admin_responses_admin", ondelete="CASCADE"),
        # One response per feedback, enforced by the store
        sa.UniqueConstraint("feedback_id", name="uq_admin_responses_feedback"),
        sa.CheckConstraint("status IN ('replied','acknowledged')", name="ck_admin_responses_status_valid"),
    )
    op.create_index("ix_admin_responses_admin_id", "admin_responses", ["admin_id"])


def downgrade():
    op.drop_index("ix_admin_responses_admin_id", table_name="admin_responses")
    op.drop_table("admin_responses")
    op.drop_index("ix_feedback_trainee_created_at", table_name="feedback")
    op.drop_index("ix_feedback_trainee_id", table_name="feedback")
    op.drop_table("feedback")
    op.drop_table("profiles")
    op.drop_index("ux_users_email_lower", table_name="users")
    op.drop_table("users")
