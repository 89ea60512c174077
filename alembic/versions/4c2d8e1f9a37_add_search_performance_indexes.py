"""add_search_performance_indexes

Revision ID: 4c2d8e1f9a37
Revises:
Create Date: 2026-10-19 10:12:31.204118

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c2d8e1f9a37"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema with search performance indexes."""

    # Reservation listing, availability and occupancy queries
    op.create_index(
        "idx_reservations_property_dates",
        "reservations",
        ["property_id", "check_in_date", "check_out_date"],
    )
    op.create_index(
        "idx_reservations_status_check_in", "reservations", ["status", "check_in_date"]
    )
    op.create_index("idx_reservations_platform", "reservations", ["platform"])
    op.create_index(
        "idx_reservations_guest_search",
        "reservations",
        [sa.text("LOWER(guest_name)")],
    )

    # Property and owner search
    op.create_index("idx_properties_owner_active", "properties", ["owner_id", "active"])
    op.create_index("idx_owners_email_search", "owners", [sa.text("LOWER(email)")])

    # Financial documents
    op.create_index(
        "idx_financial_documents_type_status", "financial_documents", ["type", "status"]
    )
    op.create_index(
        "idx_financial_documents_entity",
        "financial_documents",
        ["entity_type", "entity_id"],
    )
    op.create_index("idx_financial_documents_date", "financial_documents", ["date"])

    # Quotations, maintenance and activity history
    op.create_index(
        "idx_quotations_status_created", "quotations", ["status", "created_at"]
    )
    op.create_index(
        "idx_maintenance_tasks_property_status",
        "maintenance_tasks",
        ["property_id", "status"],
    )
    op.create_index(
        "idx_activities_entity", "activities", ["entity_type", "entity_id"]
    )
    op.create_index("idx_activities_created_at", "activities", ["created_at"])


def downgrade() -> None:
    """Downgrade schema by removing search performance indexes."""

    op.drop_index("idx_activities_created_at", table_name="activities")
    op.drop_index("idx_activities_entity", table_name="activities")
    op.drop_index(
        "idx_maintenance_tasks_property_status", table_name="maintenance_tasks"
    )
    op.drop_index("idx_quotations_status_created", table_name="quotations")

    op.drop_index("idx_financial_documents_date", table_name="financial_documents")
    op.drop_index("idx_financial_documents_entity", table_name="financial_documents")
    op.drop_index(
        "idx_financial_documents_type_status", table_name="financial_documents"
    )

    op.drop_index("idx_owners_email_search", table_name="owners")
    op.drop_index("idx_properties_owner_active", table_name="properties")

    op.drop_index("idx_reservations_guest_search", table_name="reservations")
    op.drop_index("idx_reservations_platform", table_name="reservations")
    op.drop_index("idx_reservations_status_check_in", table_name="reservations")
    op.drop_index("idx_reservations_property_dates", table_name="reservations")
