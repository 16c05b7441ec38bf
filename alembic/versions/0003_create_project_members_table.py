"""Create project_members table

Revision ID: 0003
Revises: 0002
Create Date: 2026-10-05 10:05:00.000000

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0003"
down_revision: Union[str, Sequence[str], None] = "0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE project_members (
            id BIGSERIAL PRIMARY KEY,
            project_id BIGINT NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            project_role VARCHAR(20) NOT NULL
                CHECK (project_role IN ('DEVELOPER', 'DESIGNER', 'PRODUCT_OWNER', 'STAKEHOLDER')),
            status VARCHAR(20) NOT NULL DEFAULT 'ACTIVE'
                CHECK (status IN ('ACTIVE', 'LEFT', 'SUSPENDED')),
            join_method VARCHAR(20) NOT NULL DEFAULT 'DIRECT'
                CHECK (join_method IN ('DIRECT', 'INVITED', 'OAUTH_SYNC')),
            invited_by BIGINT REFERENCES users(id) ON DELETE SET NULL,
            joined_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW(),
            left_at TIMESTAMP WITH TIME ZONE,
            CONSTRAINT uq_project_members_project_user UNIQUE (project_id, user_id)
        );

        CREATE INDEX idx_project_members_user_id ON project_members (user_id);
        CREATE INDEX idx_project_members_project_status
            ON project_members (project_id, status);
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("""
        DROP TABLE IF EXISTS project_members CASCADE;
    """)
