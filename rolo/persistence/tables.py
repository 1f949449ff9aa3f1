"""SQLAlchemy table definitions for Rolo.

These table definitions are used with SQLAlchemy Core and hand-written
mappers. They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import INET, JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

ROLE_ENUM = Enum(
    "owner", "admin", "limited_admin", "viewer", name="collaborator_role", create_type=False
)

# ============================================================================
# COMMUNITIES TABLE
# ============================================================================
communities_table = Table(
    "communities",
    metadata,
    Column("id", UUID, primary_key=True, server_default=func.gen_random_uuid()),
    Column("handle", String(63), nullable=False),  # Stored lowercase
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False),
    Column("phone_number", String(32), nullable=False),
    Column("tax_id", String(64), nullable=True),
    Column("address", Text, nullable=True),
    Column("city", String(255), nullable=True),
    Column("state", String(255), nullable=True),
    Column("zip", String(32), nullable=True),
    Column("country", String(255), nullable=True),
    Column("logo_url", Text, nullable=True),
    Column("owner_id", UUID, nullable=False),  # Identity provider user id
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    ),
    CheckConstraint("char_length(handle) BETWEEN 3 AND 63", name="handle_length"),
)

# Case-insensitive handle uniqueness
Index("idx_communities_handle_lower", func.lower(communities_table.c.handle), unique=True)
Index("idx_communities_owner_id", communities_table.c.owner_id)

# ============================================================================
# COLLABORATORS TABLE
# ============================================================================
collaborators_table = Table(
    "collaborators",
    metadata,
    Column("id", UUID, primary_key=True, server_default=func.gen_random_uuid()),
    Column("user_id", UUID, nullable=False),
    Column(
        "community_id",
        UUID,
        ForeignKey("communities.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("role", ROLE_ENUM, nullable=False, server_default="viewer"),
    Column(
        "status",
        Enum(
            "pending",
            "approved",
            "rejected",
            name="collaborator_status",
            create_type=False,
        ),
        nullable=False,
        server_default="pending",
    ),
    Column("invited_by", UUID, nullable=True),
    Column("joined_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    ),
    UniqueConstraint("user_id", "community_id", name="uq_collaborator_user_community"),
)

Index("idx_collaborators_user_id", collaborators_table.c.user_id)
# Seat counts filter on community, status and role
Index(
    "idx_collaborators_community_status_role",
    collaborators_table.c.community_id,
    collaborators_table.c.status,
    collaborators_table.c.role,
)

# ============================================================================
# INVITES TABLE
# ============================================================================
invites_table = Table(
    "invites",
    metadata,
    Column("id", UUID, primary_key=True, server_default=func.gen_random_uuid()),
    Column(
        "community_id",
        UUID,
        ForeignKey("communities.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("email", String(255), nullable=False),  # Stored lowercase
    Column("role", ROLE_ENUM, nullable=False),
    Column("token", String(255), nullable=False, unique=True),  # URL-safe token
    Column(
        "status",
        Enum("pending", "accepted", "expired", name="invite_status", create_type=False),
        nullable=False,
        server_default="pending",
    ),
    Column("invited_by", UUID, nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    ),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("accepted_at", TIMESTAMP(timezone=True), nullable=True),
    Column("accepted_by_user_id", UUID, nullable=True),
    CheckConstraint("role <> 'owner'", name="invite_role_not_owner"),
)

Index(
    "idx_invites_community_email_status",
    invites_table.c.community_id,
    invites_table.c.email,
    invites_table.c.status,
)
# Expiry sweep
Index("idx_invites_status_expires_at", invites_table.c.status, invites_table.c.expires_at)

# ============================================================================
# SUBSCRIPTION PLANS TABLE
# ============================================================================
subscription_plans_table = Table(
    "subscription_plans",
    metadata,
    Column("id", UUID, primary_key=True, server_default=func.gen_random_uuid()),
    Column("name", String(50), nullable=False, unique=True),
    Column("display_name", String(100), nullable=False),
    Column("description", Text, nullable=True),
    Column("price_monthly", Numeric(10, 2), nullable=False, server_default="0"),
    Column("price_yearly", Numeric(10, 2), nullable=False, server_default="0"),
    Column("max_team_members", Integer, nullable=False),  # -1 = unlimited
    Column("max_viewers", Integer, nullable=False),  # -1 = unlimited
    Column("features", JSONB, nullable=False, server_default="{}"),
    Column("is_active", Boolean, nullable=False, server_default="true"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    ),
    CheckConstraint("max_team_members >= -1", name="max_team_members_valid"),
    CheckConstraint("max_viewers >= -1", name="max_viewers_valid"),
)

# ============================================================================
# COMMUNITY SUBSCRIPTIONS TABLE
# ============================================================================
community_subscriptions_table = Table(
    "community_subscriptions",
    metadata,
    Column("id", UUID, primary_key=True, server_default=func.gen_random_uuid()),
    Column(
        "community_id",
        UUID,
        ForeignKey("communities.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column(
        "plan_id",
        UUID,
        ForeignKey("subscription_plans.id", ondelete="RESTRICT"),
        nullable=False,
    ),
    Column(
        "status",
        Enum(
            "free",
            "trialing",
            "active",
            "past_due",
            "unpaid",
            "canceled",
            name="subscription_status",
            create_type=False,
        ),
        nullable=False,
        server_default="free",
    ),
    Column(
        "billing_cycle",
        Enum("monthly", "yearly", name="billing_cycle", create_type=False),
        nullable=False,
        server_default="monthly",
    ),
    Column(
        "current_period_start",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
    Column("current_period_end", TIMESTAMP(timezone=True), nullable=True),
    Column("cancel_at_period_end", Boolean, nullable=False, server_default="false"),
    Column("canceled_at", TIMESTAMP(timezone=True), nullable=True),
    Column("stripe_subscription_id", String(255), nullable=True),
    Column("stripe_customer_id", String(255), nullable=True),
    Column("payment_method_id", String(255), nullable=True),
    Column("has_payment_method", Boolean, nullable=False, server_default="false"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    ),
)

Index("idx_community_subscriptions_plan_id", community_subscriptions_table.c.plan_id)

# ============================================================================
# AUDIT LOGS TABLE (append-only)
# ============================================================================
audit_logs_table = Table(
    "audit_logs",
    metadata,
    Column("id", UUID, primary_key=True, server_default=func.gen_random_uuid()),
    Column("actor_id", UUID, nullable=True),  # NULL for system actions
    # No foreign key: entries outlive deleted communities
    Column("community_id", UUID, nullable=True),
    Column("action", String(64), nullable=False),
    Column("table_name", String(64), nullable=False),
    Column("record_id", String(255), nullable=True),
    Column("old_values", JSONB, nullable=True),
    Column("new_values", JSONB, nullable=True),
    Column("ip_address", INET, nullable=True),
    Column("user_agent", Text, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    ),
)

Index(
    "idx_audit_logs_community_created_at",
    audit_logs_table.c.community_id,
    audit_logs_table.c.created_at.desc(),
)
Index("idx_audit_logs_actor_id", audit_logs_table.c.actor_id)
Index("idx_audit_logs_created_at", audit_logs_table.c.created_at)
