"""Create listing, room inventory, review log and banner tables

Revision ID: 3f1c2a9b7d40
Revises:
Create Date: 2026-10-18 09:12:31.418207

"""

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "3f1c2a9b7d40"
down_revision = None
branch_labels = None
depends_on = None

STATUS = sa.Enum(
    "DRAFT", "PENDING", "APPROVED", "REJECTED", "OFFLINE",
    name="listingstatus", native_enum=False, length=16,
)
JSON_LIST = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "listings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("name_zh", sa.String(200), nullable=False),
        sa.Column("name_en", sa.String(200), nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("star_level", sa.Integer(), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("min_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("status", STATUS, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_listings_owner_id", "listings", ["owner_id"])
    op.create_index("ix_listings_city", "listings", ["city"])
    op.create_index("ix_listings_status", "listings", ["status"])

    op.create_table(
        "listing_images",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "listing_id",
            sa.Integer(),
            sa.ForeignKey("listings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("url", sa.String(1000), nullable=False),
        sa.Column("sort", sa.Integer(), nullable=False),
        sa.Column("is_cover", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_listing_images_listing_id", "listing_images", ["listing_id"])

    op.create_table(
        "nearby_spots",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "listing_id",
            sa.Integer(),
            sa.ForeignKey("listings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "type",
            sa.Enum("SCENIC", "TRANSPORT", "SHOPPING", name="nearbyspottype", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("distance", sa.String(50), nullable=False),
    )
    op.create_index("ix_nearby_spots_listing_id", "nearby_spots", ["listing_id"])

    op.create_table(
        "promotions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "listing_id",
            sa.Integer(),
            sa.ForeignKey("listings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "type",
            sa.Enum("DISCOUNT", "REDUCTION", name="promotiontype", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("discount_rate", sa.Float(), nullable=True),
        sa.Column("reduce_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("min_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
    )
    op.create_index("ix_promotions_listing_id", "promotions", ["listing_id"])

    op.create_table(
        "room_types",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "listing_id",
            sa.Integer(),
            sa.ForeignKey("listings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column(
            "bed_type",
            sa.Enum("SINGLE", "DOUBLE", "TWIN", "KING", "SUITE", name="bedtype", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("area", sa.Float(), nullable=False),
        sa.Column("max_guests", sa.Integer(), nullable=False),
        sa.Column("base_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("facilities", JSON_LIST, nullable=False),
        sa.Column("images", JSON_LIST, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_room_types_listing_id", "room_types", ["listing_id"])

    op.create_table(
        "price_rules",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "room_type_id",
            sa.Integer(),
            sa.ForeignKey("room_types.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "type",
            sa.Enum("WEEKEND", "HOLIDAY", "CUSTOM", name="priceruletype", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
    )
    op.create_index("ix_price_rules_room_type_id", "price_rules", ["room_type_id"])

    op.create_table(
        "review_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("listing_id", sa.Integer(), sa.ForeignKey("listings.id"), nullable=False),
        sa.Column("reviewer_id", sa.Integer(), nullable=False),
        sa.Column("from_status", STATUS, nullable=False),
        sa.Column("to_status", STATUS, nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_review_logs_listing_id", "review_logs", ["listing_id"])

    op.create_table(
        "banners",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("image_url", sa.String(1000), nullable=False),
        sa.Column(
            "listing_id",
            sa.Integer(),
            sa.ForeignKey("listings.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("sort", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("TRUE"), nullable=False),
    )
    op.create_index("ix_banners_listing_id", "banners", ["listing_id"])


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        "banners",
        "review_logs",
        "price_rules",
        "room_types",
        "promotions",
        "nearby_spots",
        "listing_images",
        "listings",
    ):
        op.drop_table(table)
