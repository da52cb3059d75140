"""create ebooks

Revision ID: 5b1e0c7d2a41
Revises:
Create Date: 2026-10-19 10:12:44.120391

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '5b1e0c7d2a41'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'ebooks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('author', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('language', sa.String(length=32), nullable=False),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('categories', sa.Text(), nullable=False),
        sa.Column('cover_path', sa.String(length=512), nullable=True),
        sa.Column('pdf_path', sa.String(length=512), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('price_cents >= 0', name=op.f('ck_ebooks_price_cents_non_negative')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_ebooks')),
        sqlite_autoincrement=True,
    )
    op.create_index(op.f('ix_ebooks_id'), 'ebooks', ['id'], unique=False)
    op.create_index('ix_ebooks_created_at_id', 'ebooks', ['created_at', 'id'], unique=False)

def downgrade():
    op.drop_index('ix_ebooks_created_at_id', table_name='ebooks')
    op.drop_index(op.f('ix_ebooks_id'), table_name='ebooks')
    op.drop_table('ebooks')
