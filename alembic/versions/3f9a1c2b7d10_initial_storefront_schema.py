"""Initial storefront schema

Revision ID: 3f9a1c2b7d10
Revises:
Create Date: 2026-10-18 09:12:44.120381

"""
from datetime import datetime, timezone
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    # ---- Users ----
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("full_name", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("password", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("role", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("can_login", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_email"), "user", ["email"], unique=True)

    # ---- Products ----
    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("category", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("jenis", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("design", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("packages", sa.JSON(), nullable=True),
        sa.Column("image_url", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("demo_url", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # ---- Bank accounts ----
    op.create_table(
        "bankaccount",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("bank_name", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("account_number", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("account_name", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bankaccount_is_active"), "bankaccount", ["is_active"])

    # ---- Discount codes ----
    discount_table = op.create_table(
        "discountcode",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("code", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("percentage", sa.Integer(), nullable=True),
        sa.Column("fixed_amount", sa.Integer(), nullable=True),
        sa.Column("valid_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("usage_limit", sa.Integer(), nullable=True),
        sa.Column("used_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_discountcode_code"), "discountcode", ["code"], unique=True)

    # ---- Orders ----
    op.create_table(
        "order",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("invoice_number", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("product_name", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("package_name", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("package_price", sa.Integer(), nullable=False),
        sa.Column("package_details", sa.JSON(), nullable=True),
        sa.Column("customer_name", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("customer_email", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("customer_phone", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("subtotal", sa.Integer(), nullable=False),
        sa.Column("discount_code", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("discount_amount", sa.Integer(), nullable=False),
        sa.Column("tax", sa.Integer(), nullable=False),
        sa.Column("total", sa.Integer(), nullable=False),
        sa.Column("payment_method", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("payment_bank_id", sa.Integer(), nullable=True),
        sa.Column("payment_bank", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("payment_status", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("payment_proof_url", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("payment_deadline", sa.DateTime(timezone=True), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["product_id"], ["product.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["payment_bank_id"], ["bankaccount.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_order_invoice_number"), "order", ["invoice_number"], unique=True)
    op.create_index(op.f("ix_order_customer_email"), "order", ["customer_email"])
    op.create_index(op.f("ix_order_payment_status"), "order", ["payment_status"])
    op.create_index(op.f("ix_order_created_at"), "order", ["created_at"])

    # ---- Launch discount codes ----
    now = datetime.now(timezone.utc)
    op.bulk_insert(
        discount_table,
        [
            {"code": "HEMAT10", "percentage": 10, "used_count": 0, "is_active": True, "created_at": now},
            {"code": "HEMAT20", "percentage": 20, "used_count": 0, "is_active": True, "created_at": now},
        ],
    )


def downgrade():
    op.drop_index(op.f("ix_order_created_at"), table_name="order")
    op.drop_index(op.f("ix_order_payment_status"), table_name="order")
    op.drop_index(op.f("ix_order_customer_email"), table_name="order")
    op.drop_index(op.f("ix_order_invoice_number"), table_name="order")
    op.drop_table("order")

    op.drop_index(op.f("ix_discountcode_code"), table_name="discountcode")
    op.drop_table("discountcode")

    op.drop_index(op.f("ix_bankaccount_is_active"), table_name="bankaccount")
    op.drop_table("bankaccount")

    op.drop_table("product")

    op.drop_index(op.f("ix_user_email"), table_name="user")
    op.drop_table("user")
