"""Create projects table

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-05 09:40:00.000000

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, Sequence[str], None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE projects (
            id BIGSERIAL PRIMARY KEY,
            name VARCHAR(100) NOT NULL,
            description TEXT CHECK (char_length(description) <= 500),
            status VARCHAR(20) NOT NULL DEFAULT 'ACTIVE'
                CHECK (status IN ('ACTIVE', 'ARCHIVED', 'DELETED')),
            created_by BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            github_repo_url TEXT,
            github_repo_owner VARCHAR(255),
            github_repo_name VARCHAR(255),
            figma_file_url TEXT,
            figma_file_key VARCHAR(255),
            is_public BOOLEAN NOT NULL DEFAULT FALSE,
            max_members INTEGER NOT NULL DEFAULT 10 CHECK (max_members >= 1),
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()
        );

        CREATE UNIQUE INDEX idx_projects_name_lower ON projects (LOWER(name));
        CREATE INDEX idx_projects_created_by ON projects (created_by);

        CREATE TRIGGER projects_updated_at_trigger
            BEFORE UPDATE ON projects
            FOR EACH ROW
            EXECUTE FUNCTION set_updated_at();
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("""
        DROP TRIGGER IF EXISTS projects_updated_at_trigger ON projects;
        DROP TABLE IF EXISTS projects CASCADE;
    """)
