"""Create reference tables: countries, provinces, styles.

Tables:
- countries
- provinces (unique name, FK to countries, row_version)
- styles (row_version)
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_reference_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "countries",
        sa.Column("country_code", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("country_code", name="pk_countries"),
    )

    op.create_table(
        "provinces",
        sa.Column("province_code", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("country_code", sa.Text(), nullable=False),
        sa.Column("sales_tax_code", sa.Text(), nullable=True),
        sa.Column("sales_tax", sa.Numeric(9, 5), nullable=True),
        sa.Column("includes_federal_tax", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("first_postal_letter", sa.Text(), nullable=True),
        sa.Column("row_version", sa.Integer(), nullable=False, server_default="1"),
        sa.PrimaryKeyConstraint("province_code", name="pk_provinces"),
        sa.UniqueConstraint("name", name="uq_provinces_name"),
        sa.ForeignKeyConstraint(
            ["country_code"],
            ["countries.country_code"],
            name="fk_provinces_country_code_countries",
            ondelete="RESTRICT",
        ),
    )
    op.create_index("ix_provinces_country_code", "provinces", ["country_code"])

    op.create_table(
        "styles",
        sa.Column("style_name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("row_version", sa.Integer(), nullable=False, server_default="1"),
        sa.PrimaryKeyConstraint("style_name", name="pk_styles"),
    )


def downgrade() -> None:
    op.drop_table("styles")
    op.drop_index("ix_provinces_country_code", table_name="provinces")
    op.drop_table("provinces")
    op.drop_table("countries")
