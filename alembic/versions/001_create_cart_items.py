"""001: updated_at trigger function and cart_items table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Used by every table that carries updated_at (cart_items, orders, merchant_analytics)
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp() RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at := NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)

    op.execute("""
        CREATE TABLE cart_items (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL,
            product_id      INT             NOT NULL,
            variant_id      VARCHAR(64)     NOT NULL,
            merchant_id     VARCHAR(64)     NOT NULL,
            quantity        INT             NOT NULL,
            price           NUMERIC(14, 2)  NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_cart_items_user_product_variant UNIQUE (user_id, product_id, variant_id),
            CONSTRAINT ck_cart_items_quantity            CHECK (quantity >= 1),
            CONSTRAINT ck_cart_items_price               CHECK (price >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_cart_items_user ON cart_items (user_id, id);")
    op.execute("""
        CREATE TRIGGER trg_cart_items_updated_at
            BEFORE UPDATE ON cart_items
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE cart_items IS 'Per-user cart lines; deleted on checkout or removal';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS cart_items CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
