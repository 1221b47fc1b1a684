"""Initial feed schema

Revision ID: 5d1e7a2c4b90
Revises:
Create Date: 2026-10-12 09:30:41.118204+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5d1e7a2c4b90'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('products',
    sa.Column('id', sa.String(length=64), nullable=False),
    sa.Column('title', sa.Text(), nullable=False),
    sa.Column('price', sa.Float(), nullable=False),
    sa.Column('currency', sa.String(length=8), nullable=False),
    sa.Column('image_url', sa.Text(), nullable=True),
    sa.Column('link', sa.Text(), nullable=True),
    sa.Column('category', sa.String(length=64), nullable=False),
    sa.Column('is_best_seller', sa.Boolean(), nullable=False),
    sa.Column('rating', sa.Float(), nullable=False),
    sa.Column('reviews', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    schema='feed'
    )
    op.create_index('ix_products_category', 'products', ['category'], unique=False, schema='feed')
    op.create_index('ix_products_price', 'products', ['price'], unique=False, schema='feed')

    op.create_table('category_scores',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('user_id', sa.String(length=255), nullable=False),
    sa.Column('category', sa.String(length=64), nullable=False),
    sa.Column('score', sa.Float(), nullable=False),
    sa.Column('likes', sa.Integer(), nullable=False),
    sa.Column('dislikes', sa.Integer(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('user_id', 'category', name='uq_category_scores_user_category'),
    schema='feed'
    )
    op.create_index(op.f('ix_feed_category_scores_user_id'), 'category_scores', ['user_id'], unique=False, schema='feed')

    op.create_table('rejections',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('user_id', sa.String(length=255), nullable=False),
    sa.Column('product_id', sa.String(length=64), nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('user_id', 'product_id', name='uq_rejections_user_product'),
    schema='feed'
    )
    op.create_index(op.f('ix_feed_rejections_user_id'), 'rejections', ['user_id'], unique=False, schema='feed')

    op.create_table('wishlist_items',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('user_id', sa.String(length=255), nullable=False),
    sa.Column('product_id', sa.String(length=64), nullable=False),
    sa.Column('title', sa.Text(), nullable=False),
    sa.Column('price', sa.Float(), nullable=False),
    sa.Column('currency', sa.String(length=8), nullable=False),
    sa.Column('image_url', sa.Text(), nullable=True),
    sa.Column('link', sa.Text(), nullable=True),
    sa.Column('category', sa.String(length=64), nullable=False),
    sa.Column('is_best_seller', sa.Boolean(), nullable=True),
    sa.Column('rating', sa.Float(), nullable=True),
    sa.Column('reviews', sa.Integer(), nullable=True),
    sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('user_id', 'product_id', name='uq_wishlist_user_product'),
    schema='feed'
    )
    op.create_index(op.f('ix_feed_wishlist_items_user_id'), 'wishlist_items', ['user_id'], unique=False, schema='feed')


def downgrade() -> None:
    op.drop_index(op.f('ix_feed_wishlist_items_user_id'), table_name='wishlist_items', schema='feed')
    op.drop_table('wishlist_items', schema='feed')
    op.drop_index(op.f('ix_feed_rejections_user_id'), table_name='rejections', schema='feed')
    op.drop_table('rejections', schema='feed')
    op.drop_index(op.f('ix_feed_category_scores_user_id'), table_name='category_scores', schema='feed')
    op.drop_table('category_scores', schema='feed')
    op.drop_index('ix_products_price', table_name='products', schema='feed')
    op.drop_index('ix_products_category', table_name='products', schema='feed')
    op.drop_table('products', schema='feed')
