"""003: create merchant_analytics table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE merchant_analytics (
            id              BIGSERIAL       PRIMARY KEY,
            merchant_id     VARCHAR(64)     NOT NULL,
            product_id      INT             NOT NULL,
            variant_id      VARCHAR(64)     NOT NULL,
            units_sold      BIGINT          NOT NULL DEFAULT 0,
            revenue         NUMERIC(16, 2)  NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_merchant_analytics_key UNIQUE (merchant_id, product_id, variant_id),
            CONSTRAINT ck_merchant_analytics_units   CHECK (units_sold >= 0),
            CONSTRAINT ck_merchant_analytics_revenue CHECK (revenue >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_merchant_analytics_updated_at
            BEFORE UPDATE ON merchant_analytics
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS merchant_analytics CASCADE;")
