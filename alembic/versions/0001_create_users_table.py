"""Create users table

Revision ID: 0001
Revises:
Create Date: 2026-10-05 09:12:00.000000

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE users (
            id BIGSERIAL PRIMARY KEY,
            email VARCHAR(255) NOT NULL,
            name VARCHAR(50) NOT NULL,
            avatar_url TEXT,
            role VARCHAR(20) NOT NULL
                CHECK (role IN ('DEVELOPER', 'DESIGNER', 'PRODUCT_OWNER', 'STAKEHOLDER')),
            oauth_provider VARCHAR(50),
            oauth_id VARCHAR(255),
            oauth_username VARCHAR(255),
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()
        );

        -- Emails are stored as entered but unique regardless of case
        CREATE UNIQUE INDEX idx_users_email_lower ON users (LOWER(email));
        CREATE UNIQUE INDEX idx_users_oauth_identity
            ON users (oauth_provider, oauth_id)
            WHERE oauth_provider IS NOT NULL AND oauth_id IS NOT NULL;

        CREATE OR REPLACE FUNCTION set_updated_at()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;

        CREATE TRIGGER users_updated_at_trigger
            BEFORE UPDATE ON users
            FOR EACH ROW
            EXECUTE FUNCTION set_updated_at();
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("""
        DROP TRIGGER IF EXISTS users_updated_at_trigger ON users;
        DROP FUNCTION IF EXISTS set_updated_at();
        DROP TABLE IF EXISTS users CASCADE;
    """)
