from __future__ import annotations

from alembic import op

revision = "0001_wallet_core"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # gen_random_uuid()
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto;")

    op.execute(
        """
        CREATE TABLE IF NOT EXISTS budgets (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL,
            category TEXT NOT NULL,
            budget_limit NUMERIC(18,2) NOT NULL DEFAULT 0,
            emoji VARCHAR(16) NOT NULL DEFAULT '',
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_budgets_user_category UNIQUE (user_id, category)
        );
        """
    )
    op.execute("CREATE INDEX IF NOT EXISTS ix_budgets_user_id ON budgets (user_id);")

    op.execute(
        """
        CREATE TABLE IF NOT EXISTS transactions (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL,
            category TEXT NOT NULL,
            amount NUMERIC(18,2) NOT NULL,
            note TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
        """
    )
    op.execute("CREATE INDEX IF NOT EXISTS ix_transactions_user_id ON transactions (user_id);")
    # Month-to-date spend scans
    op.execute("CREATE INDEX IF NOT EXISTS ix_transactions_user_created ON transactions (user_id, created_at DESC);")

    op.execute(
        """
        CREATE TABLE IF NOT EXISTS notifications (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL,
            type VARCHAR(32) NOT NULL,
            title TEXT NOT NULL,
            message TEXT NOT NULL,
            category TEXT,
            is_read BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT ck_notifications_type CHECK (type IN ('budget_warning', 'budget_alert', 'motivational'))
        );
        """
    )
    op.execute("CREATE INDEX IF NOT EXISTS ix_notifications_user_id ON notifications (user_id);")
    op.execute("CREATE INDEX IF NOT EXISTS ix_notifications_unread ON notifications (user_id) WHERE is_read = FALSE;")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS notifications;")
    op.execute("DROP TABLE IF EXISTS transactions;")
    op.execute("DROP TABLE IF EXISTS budgets;")
