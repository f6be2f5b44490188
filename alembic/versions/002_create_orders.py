"""002: create orders and order_items tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id              VARCHAR(32)     PRIMARY KEY,
            order_number    VARCHAR(64)     NOT NULL,
            user_id         VARCHAR(64)     NOT NULL,
            status          VARCHAR(20)     NOT NULL DEFAULT 'CONFIRMED',
            total_amount    NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_orders_order_number UNIQUE (order_number),
            CONSTRAINT ck_orders_total        CHECK (total_amount >= 0),
            CONSTRAINT ck_orders_status       CHECK (
                status IN ('CONFIRMED', 'SHIPPED', 'DELIVERED', 'CANCELLED')
            )
        );
    """)
    op.execute("CREATE INDEX idx_orders_user_created ON orders (user_id, created_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    # Append-only: no updated_at, lines are never modified after checkout
    op.execute("""
        CREATE TABLE order_items (
            id              BIGSERIAL       PRIMARY KEY,
            order_id        VARCHAR(32)     NOT NULL REFERENCES orders (id) ON DELETE CASCADE,
            product_id      INT             NOT NULL,
            variant_id      VARCHAR(64)     NOT NULL,
            merchant_id     VARCHAR(64)     NOT NULL,
            merchant_name   VARCHAR(255)    NOT NULL DEFAULT '',
            quantity        INT             NOT NULL,
            price           NUMERIC(14, 2)  NOT NULL,
            image_url       TEXT            NOT NULL DEFAULT '',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_order_items_quantity CHECK (quantity >= 1),
            CONSTRAINT ck_order_items_price    CHECK (price >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_order_items_order ON order_items (order_id, id);")
    op.execute("COMMENT ON TABLE order_items IS 'Checkout snapshots of price, merchant name and image';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS order_items CASCADE;")
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
