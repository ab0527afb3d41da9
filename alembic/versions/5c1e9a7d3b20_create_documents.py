"""create documents table

Revision ID: 5c1e9a7d3b20
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e9a7d3b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add documents table holding issue collections and the cache collection."""
    op.create_table('documents',
        sa.Column('collection', sa.String(length=255), nullable=False),
        sa.Column('doc_id', sa.String(length=1024), nullable=False),
        sa.Column('owner', sa.String(length=100), nullable=False),
        sa.Column('repo', sa.String(length=100), nullable=False),
        sa.Column('body', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('collection', 'doc_id')
    )
    # Cache lookups filter on collection + source
    op.create_index('ix_documents_collection_owner_repo', 'documents', ['collection', 'owner', 'repo'])


def downgrade() -> None:
    """Remove documents table."""
    op.drop_index('ix_documents_collection_owner_repo', table_name='documents')
    op.drop_table('documents')
