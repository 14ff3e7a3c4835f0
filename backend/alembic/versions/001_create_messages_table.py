"""Create messages table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `messages` table used by the durable message store.
How:   Integer auto-increment primary key plus a NOT NULL text column;
       portable across SQLite and PostgreSQL.

Rollback: downgrade() drops the table and every stored message.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "messages",
        sa.Column(
            "id",
            sa.Integer(),
            autoincrement=True,
            nullable=False,
            comment="Store-assigned identifier, increasing with creation order",
        ),
        sa.Column(
            "text",
            sa.Text(),
            nullable=False,
            comment="Message body exactly as submitted",
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("messages")
