"""initial_schema

Create the access control schema for Rolo:
- Communities (handle unique case-insensitively, one owner)
- Collaborators (one membership per user and community)
- Invites (single-use email tokens with expiry)
- Subscription plans (seeded with free, starter, professional, enterprise)
- Community subscriptions (at most one per community)
- Audit logs (append-only, outlive deleted communities)

Revision ID: 3c1f9a2d7b40
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from rolo.persistence.seed import DEFAULT_PLANS


# revision identifiers, used by Alembic.
revision: str = "3c1f9a2d7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENUMS = {
    "collaborator_role": ("owner", "admin", "limited_admin", "viewer"),
    "collaborator_status": ("pending", "approved", "rejected"),
    "invite_status": ("pending", "accepted", "expired"),
    "subscription_status": (
        "free",
        "trialing",
        "active",
        "past_due",
        "unpaid",
        "canceled",
    ),
    "billing_cycle": ("monthly", "yearly"),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    # gen_random_uuid()
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    # Create ENUM types (idempotent)
    for name, values in ENUMS.items():
        labels = ", ".join(f"'{value}'" for value in values)
        op.execute(f"""
            DO $$ BEGIN
                CREATE TYPE {name} AS ENUM ({labels});
            EXCEPTION
                WHEN duplicate_object THEN null;
            END $$;
        """)

    # ========================================================================
    # COMMUNITIES table
    # ========================================================================
    op.create_table(
        "communities",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("handle", sa.String(63), nullable=False),  # Stored lowercase
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(32), nullable=False),
        sa.Column("tax_id", sa.String(64), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("city", sa.String(255), nullable=True),
        sa.Column("state", sa.String(255), nullable=True),
        sa.Column("zip", sa.String(32), nullable=True),
        sa.Column("country", sa.String(255), nullable=True),
        sa.Column("logo_url", sa.Text(), nullable=True),
        sa.Column("owner_id", sa.UUID(), nullable=False),  # Identity provider user id
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "char_length(handle) BETWEEN 3 AND 63", name="handle_length"
        ),
    )
    op.create_index(
        "idx_communities_handle_lower",
        "communities",
        [sa.text("lower(handle)")],
        unique=True,
    )
    op.create_index("idx_communities_owner_id", "communities", ["owner_id"])

    # ========================================================================
    # COLLABORATORS table
    # ========================================================================
    op.create_table(
        "collaborators",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("community_id", sa.UUID(), nullable=False),
        sa.Column(
            "role",
            _enum("collaborator_role"),
            nullable=False,
            server_default="viewer",
        ),
        sa.Column(
            "status",
            _enum("collaborator_status"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("invited_by", sa.UUID(), nullable=True),
        sa.Column("joined_at", sa.TIMESTAMP(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["community_id"], ["communities.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "community_id", name="uq_collaborator_user_community"
        ),
    )
    op.create_index("idx_collaborators_user_id", "collaborators", ["user_id"])
    op.create_index(
        "idx_collaborators_community_status_role",
        "collaborators",
        ["community_id", "status", "role"],
    )

    # ========================================================================
    # INVITES table
    # ========================================================================
    op.create_table(
        "invites",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("community_id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),  # Stored lowercase
        sa.Column("role", _enum("collaborator_role"), nullable=False),
        sa.Column("token", sa.String(255), nullable=False),
        sa.Column(
            "status",
            _enum("invite_status"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("invited_by", sa.UUID(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("accepted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("accepted_by_user_id", sa.UUID(), nullable=True),
        sa.ForeignKeyConstraint(
            ["community_id"], ["communities.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token", name="uq_invite_token"),
        sa.CheckConstraint("role <> 'owner'", name="invite_role_not_owner"),
    )
    op.create_index(
        "idx_invites_community_email_status",
        "invites",
        ["community_id", "email", "status"],
    )
    op.create_index(
        "idx_invites_status_expires_at", "invites", ["status", "expires_at"]
    )

    # ========================================================================
    # SUBSCRIPTION_PLANS table
    # ========================================================================
    op.create_table(
        "subscription_plans",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "price_monthly", sa.Numeric(10, 2), nullable=False, server_default="0"
        ),
        sa.Column(
            "price_yearly", sa.Numeric(10, 2), nullable=False, server_default="0"
        ),
        sa.Column("max_team_members", sa.Integer(), nullable=False),  # -1 = unlimited
        sa.Column("max_viewers", sa.Integer(), nullable=False),  # -1 = unlimited
        sa.Column(
            "features",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_subscription_plan_name"),
        sa.CheckConstraint("max_team_members >= -1", name="max_team_members_valid"),
        sa.CheckConstraint("max_viewers >= -1", name="max_viewers_valid"),
    )

    # ========================================================================
    # COMMUNITY_SUBSCRIPTIONS table
    # ========================================================================
    op.create_table(
        "community_subscriptions",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("community_id", sa.UUID(), nullable=False),
        sa.Column("plan_id", sa.UUID(), nullable=False),
        sa.Column(
            "status",
            _enum("subscription_status"),
            nullable=False,
            server_default="free",
        ),
        sa.Column(
            "billing_cycle",
            _enum("billing_cycle"),
            nullable=False,
            server_default="monthly",
        ),
        sa.Column(
            "current_period_start",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("current_period_end", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "cancel_at_period_end",
            sa.Boolean(),
            nullable=False,
            server_default="false",
        ),
        sa.Column("canceled_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("stripe_subscription_id", sa.String(255), nullable=True),
        sa.Column("stripe_customer_id", sa.String(255), nullable=True),
        sa.Column("payment_method_id", sa.String(255), nullable=True),
        sa.Column(
            "has_payment_method",
            sa.Boolean(),
            nullable=False,
            server_default="false",
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["community_id"], ["communities.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["plan_id"], ["subscription_plans.id"], ondelete="RESTRICT"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("community_id", name="uq_community_subscription"),
    )
    op.create_index(
        "idx_community_subscriptions_plan_id", "community_subscriptions", ["plan_id"]
    )

    # ========================================================================
    # AUDIT_LOGS table (append-only, no foreign keys)
    # ========================================================================
    op.create_table(
        "audit_logs",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("actor_id", sa.UUID(), nullable=True),  # NULL for system actions
        sa.Column("community_id", sa.UUID(), nullable=True),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("table_name", sa.String(64), nullable=False),
        sa.Column("record_id", sa.String(255), nullable=True),
        sa.Column("old_values", postgresql.JSONB(), nullable=True),
        sa.Column("new_values", postgresql.JSONB(), nullable=True),
        sa.Column("ip_address", postgresql.INET(), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_audit_logs_community_created_at",
        "audit_logs",
        ["community_id", sa.text("created_at DESC")],
    )
    op.create_index("idx_audit_logs_actor_id", "audit_logs", ["actor_id"])
    op.create_index("idx_audit_logs_created_at", "audit_logs", ["created_at"])

    # Seed default plans
    plans_table = sa.table(
        "subscription_plans",
        sa.column("name", sa.String),
        sa.column("display_name", sa.String),
        sa.column("description", sa.Text),
        sa.column("price_monthly", sa.Numeric),
        sa.column("price_yearly", sa.Numeric),
        sa.column("max_team_members", sa.Integer),
        sa.column("max_viewers", sa.Integer),
        sa.column("features", postgresql.JSONB),
    )
    op.bulk_insert(plans_table, DEFAULT_PLANS)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("audit_logs")
    op.drop_table("community_subscriptions")
    op.drop_table("subscription_plans")
    op.drop_table("invites")
    op.drop_table("collaborators")
    op.drop_table("communities")

    for name in reversed(list(ENUMS)):
        op.execute(f"DROP TYPE IF EXISTS {name}")
