"""Initial Realty CRM schema.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-16

"""
from alembic import op
import sqlalchemy as sa

revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _id():
    return sa.Column("id", sa.Uuid(), primary_key=True)


def _timestamps(updated: bool = True):
    cols = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now())]
    if updated:
        cols.append(sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()))
    return cols


def _user_fk(name: str, nullable: bool = False, ondelete: str = "CASCADE"):
    return sa.Column(name, sa.Uuid(), sa.ForeignKey("app_user.id", ondelete=ondelete), nullable=nullable)


def upgrade() -> None:
    # Agents
    op.create_table(
        "app_user",
        _id(),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(200)),
        sa.Column("first_name", sa.String(100)),
        sa.Column("last_name", sa.String(100)),
        sa.Column("phone", sa.String(50)),
        sa.Column("brokerage_name", sa.String(200)),
        sa.Column("address", sa.String(255)),
        sa.Column("city", sa.String(100)),
        sa.Column("state", sa.String(50)),
        sa.Column("zip_code", sa.String(20)),
        sa.Column("profile_image", sa.Text),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index("ix_app_user_email", "app_user", ["email"])

    op.create_table(
        "user_settings",
        _id(),
        _user_fk("user_id"),
        sa.Column("google_calendar_token", sa.JSON),
        sa.Column("google_calendar_connected", sa.Boolean, server_default=sa.false()),
        sa.Column("google_calendar_sync_status", sa.JSON),
        *_timestamps(),
        sa.UniqueConstraint("user_id", name="uq_user_settings_user_id"),
    )
    op.create_index("ix_user_settings_user_id", "user_settings", ["user_id"])

    # Contact
    op.create_table(
        "contact",
        _id(),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("phone", sa.String(50)),
        sa.Column("address", sa.String(255)),
        sa.Column("city", sa.String(100)),
        sa.Column("state", sa.String(50)),
        sa.Column("zip_code", sa.String(20)),
        sa.Column("property_preferences", sa.JSON),
        sa.Column("budget_min", sa.Float),
        sa.Column("budget_max", sa.Float),
        sa.Column("timeline", sa.String(100)),
        sa.Column("contact_type", sa.String(20), server_default="lead"),
        sa.Column("lead_source", sa.String(100)),
        sa.Column("lead_score", sa.Integer, server_default="0"),
        sa.Column("status", sa.String(20), server_default="new"),
        _user_fk("assigned_agent_id", nullable=True, ondelete="SET NULL"),
        sa.Column("notes", sa.Text),
        *_timestamps(),
    )
    op.create_index("ix_contact_email", "contact", ["email"])
    op.create_index("ix_contact_assigned_agent_id", "contact", ["assigned_agent_id"])
    op.create_index("ix_contact_agent_status", "contact", ["assigned_agent_id", "status"])

    # Deal
    op.create_table(
        "deal",
        _id(),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("status", sa.String(20), server_default="prospect"),
        sa.Column("deal_type", sa.String(20), server_default="buying"),
        sa.Column("property_address", sa.String(255)),
        sa.Column("price", sa.Float),
        sa.Column("commission", sa.Float),
        sa.Column("probability", sa.Integer),
        sa.Column("expected_close_date", sa.Date),
        _user_fk("assigned_agent_id"),
        sa.Column("contact_id", sa.Uuid(), sa.ForeignKey("contact.id", ondelete="SET NULL")),
        *_timestamps(),
    )
    op.create_index("ix_deal_status", "deal", ["status"])
    op.create_index("ix_deal_assigned_agent_id", "deal", ["assigned_agent_id"])
    op.create_index("ix_deal_contact_id", "deal", ["contact_id"])

    op.create_table(
        "deal_document",
        _id(),
        sa.Column("deal_id", sa.Uuid(), sa.ForeignKey("deal.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(500), nullable=False),
        sa.Column("file_size", sa.Integer),
        sa.Column("mime_type", sa.String(100)),
        sa.Column("uploaded_by", sa.Uuid()),
        *_timestamps(),
    )
    op.create_index("ix_deal_document_deal_id", "deal_document", ["deal_id"])

    # Task
    op.create_table(
        "task",
        _id(),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("due_date", sa.DateTime(timezone=True)),
        sa.Column("priority", sa.String(20), server_default="medium"),
        sa.Column("status", sa.String(20), server_default="pending"),
        sa.Column("type", sa.String(100)),
        sa.Column("contact_id", sa.Uuid(), sa.ForeignKey("contact.id", ondelete="SET NULL")),
        sa.Column("deal_id", sa.Uuid(), sa.ForeignKey("deal.id", ondelete="SET NULL")),
        _user_fk("assigned_user_id"),
        sa.Column("sort_order", sa.Integer, server_default="0"),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("google_calendar_event_id", sa.String(255)),
        *_timestamps(),
    )
    op.create_index("ix_task_status", "task", ["status"])
    op.create_index("ix_task_contact_id", "task", ["contact_id"])
    op.create_index("ix_task_deal_id", "task", ["deal_id"])
    op.create_index("ix_task_assigned_user_id", "task", ["assigned_user_id"])
    op.create_index("ix_task_google_calendar_event_id", "task", ["google_calendar_event_id"])

    op.create_table(
        "custom_task_type",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        _user_fk("user_id"),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "name", name="uq_task_type_user_name"),
    )
    op.create_index("ix_custom_task_type_user_id", "custom_task_type", ["user_id"])

    # Appointments
    op.create_table(
        "appointment",
        _id(),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("start_datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_datetime", sa.DateTime(timezone=True)),
        sa.Column("location", sa.String(255)),
        sa.Column("appointment_type", sa.String(100)),
        sa.Column("status", sa.String(20), server_default="scheduled"),
        sa.Column("priority", sa.String(20)),
        sa.Column("contact_id", sa.Uuid(), sa.ForeignKey("contact.id", ondelete="SET NULL")),
        sa.Column("deal_id", sa.Uuid(), sa.ForeignKey("deal.id", ondelete="SET NULL")),
        _user_fk("assigned_user_id"),
        sa.Column("notes", sa.Text),
        sa.Column("reminder_minutes", sa.Integer),
        sa.Column("is_recurring", sa.Boolean, server_default=sa.false()),
        sa.Column("recurring_pattern", sa.String(50)),
        sa.Column("recurring_end_date", sa.Date),
        sa.Column("google_calendar_event_id", sa.String(255)),
        *_timestamps(),
    )
    op.create_index("ix_appointment_assigned_user_id", "appointment", ["assigned_user_id"])
    op.create_index("ix_appointment_user_start", "appointment", ["assigned_user_id", "start_datetime"])

    op.create_table(
        "appointment_type",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("color", sa.String(20), server_default="#3B82F6"),
        sa.Column("is_default", sa.Boolean, server_default=sa.false()),
        _user_fk("user_id", nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_appointment_type_user_id", "appointment_type", ["user_id"])

    # Properties
    op.create_table(
        "property",
        _id(),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("address", sa.String(255), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("state", sa.String(50), nullable=False),
        sa.Column("zip_code", sa.String(20)),
        sa.Column("country", sa.String(50), server_default="USA"),
        sa.Column("property_type", sa.String(100), nullable=False),
        sa.Column("listing_type", sa.String(20), server_default="my_listing"),
        sa.Column("status", sa.String(20), server_default="active"),
        sa.Column("bedrooms", sa.Integer),
        sa.Column("bathrooms", sa.Float),
        sa.Column("square_feet", sa.Integer),
        sa.Column("lot_size_sqft", sa.Integer),
        sa.Column("year_built", sa.Integer),
        sa.Column("garage_spaces", sa.Integer),
        sa.Column("list_price", sa.Float),
        sa.Column("sale_price", sa.Float),
        sa.Column("estimated_value", sa.Float),
        sa.Column("hoa_fees", sa.Float),
        sa.Column("property_taxes", sa.Float),
        sa.Column("mls_number", sa.String(50)),
        sa.Column("features", sa.JSON),
        sa.Column("amenities", sa.JSON),
        sa.Column("notes", sa.Text),
        sa.Column("contact_id", sa.Uuid(), sa.ForeignKey("contact.id", ondelete="SET NULL")),
        sa.Column("deal_id", sa.Uuid(), sa.ForeignKey("deal.id", ondelete="SET NULL")),
        sa.Column("assigned_agent_id", sa.Uuid()),
        _user_fk("user_id"),
        *_timestamps(),
    )
    op.create_index("ix_property_user_id", "property", ["user_id"])
    op.create_index("ix_property_contact_id", "property", ["contact_id"])
    op.create_index("ix_property_deal_id", "property", ["deal_id"])
    op.create_index("ix_property_user_status", "property", ["user_id", "status"])

    op.create_table(
        "property_image",
        _id(),
        sa.Column("property_id", sa.Uuid(), sa.ForeignKey("property.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("image_url", sa.String(500), nullable=False),
        sa.Column("image_name", sa.String(255)),
        sa.Column("image_type", sa.String(20), server_default="other"),
        sa.Column("caption", sa.Text),
        sa.Column("alt_text", sa.String(255)),
        sa.Column("file_size", sa.Integer),
        sa.Column("width", sa.Integer),
        sa.Column("height", sa.Integer),
        sa.Column("is_primary", sa.Boolean, server_default=sa.false()),
        sa.Column("sort_order", sa.Integer, server_default="0"),
        sa.Column("storage_key", sa.String(500)),
        *_timestamps(),
    )
    op.create_index("ix_property_image_property_id", "property_image", ["property_id"])
    op.create_index("ix_property_image_user_id", "property_image", ["user_id"])

    op.create_table(
        "property_type",
        _id(),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("category", sa.String(20), server_default="residential"),
        sa.Column("description", sa.Text),
        sa.Column("is_default", sa.Boolean, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer, server_default="0"),
        *_timestamps(),
    )

    # Communications & activities
    op.create_table(
        "communication",
        _id(),
        sa.Column("contact_id", sa.Uuid(), sa.ForeignKey("contact.id", ondelete="CASCADE"), nullable=False),
        _user_fk("user_id"),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("direction", sa.String(10), nullable=False),
        sa.Column("subject", sa.String(300)),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("metadata", sa.JSON),
        *_timestamps(updated=False),
    )
    op.create_index("ix_communication_contact_id", "communication", ["contact_id"])
    op.create_index("ix_communication_user_id", "communication", ["user_id"])

    op.create_table(
        "activity",
        _id(),
        sa.Column("contact_id", sa.Uuid(), sa.ForeignKey("contact.id", ondelete="CASCADE")),
        _user_fk("user_id"),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("direction", sa.String(10), server_default="none"),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("notes", sa.Text),
        sa.Column("occurred_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        *_timestamps(),
    )
    op.create_index("ix_activity_contact_id", "activity", ["contact_id"])
    op.create_index("ix_activity_user_id", "activity", ["user_id"])


def downgrade() -> None:
    for table in (
        "activity", "communication", "property_type", "property_image", "property",
        "appointment_type", "appointment", "custom_task_type", "task",
        "deal_document", "deal", "contact", "user_settings", "app_user",
    ):
        op.drop_table(table)
