"""Create fahrer, fahrzeuge, touren and stopps tables

Revision ID: 001
Revises: None
Create Date: 2024-03-01 00:00:00.000000+00:00

What:  Initial schema: drivers, vehicles, tours per driver and date, and the
       ordered stops of each tour.
How:   Foreign keys carry the delete semantics:
         touren.fahrer_id   → fahrer    ON DELETE CASCADE
         touren.fahrzeug_id → fahrzeuge ON DELETE SET NULL
         stopps.tour_id     → touren    ON DELETE CASCADE

Rollback: downgrade() drops all four tables (destructive).
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
        "fahrer",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        # Natural key for the demo seed's upsert
        sa.UniqueConstraint("name", name="uq_fahrer_name"),
    )

    op.create_table(
        "fahrzeuge",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("kennzeichen", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("kennzeichen", name="uq_fahrzeuge_kennzeichen"),
    )

    op.create_table(
        "touren",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("fahrer_id", sa.Integer(), nullable=False),
        sa.Column("fahrzeug_id", sa.Integer(), nullable=True),
        sa.Column("datum", sa.Date(), nullable=False),
        sa.Column("bemerkung", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["fahrer_id"], ["fahrer.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["fahrzeug_id"], ["fahrzeuge.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    # Lookup path for GET /touren/{fahrer_id}/{datum}
    op.create_index("idx_touren_fahrer_datum", "touren", ["fahrer_id", "datum"])

    op.create_table(
        "stopps",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tour_id", sa.Integer(), nullable=False),
        sa.Column("adresse", sa.Text(), nullable=False),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        sa.Column("reihenfolge", sa.Integer(), nullable=False),
        sa.Column("kunde", sa.Text(), nullable=True),
        sa.Column("kommission", sa.Text(), nullable=True),
        sa.Column("telefon", sa.Text(), nullable=True),
        sa.Column("hinweis", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'pending'"),
        ),
        sa.Column("erledigt_am", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("foto_url", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["tour_id"], ["touren.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_stopps_tour_reihenfolge", "stopps", ["tour_id", "reihenfolge"])


def downgrade() -> None:
    """Drop all tour tables, children first. All data is lost."""
    op.drop_index("idx_stopps_tour_reihenfolge", table_name="stopps")
    op.drop_table("stopps")
    op.drop_index("idx_touren_fahrer_datum", table_name="touren")
    op.drop_table("touren")
    op.drop_table("fahrzeuge")
    op.drop_table("fahrer")
