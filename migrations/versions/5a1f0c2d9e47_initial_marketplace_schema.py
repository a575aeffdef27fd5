"""initial marketplace schema

Revision ID: 5a1f0c2d9e47
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '5a1f0c2d9e47'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('phone', sa.String(30)),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('district', sa.String(100)),
        sa.Column('reset_token', sa.String(64), unique=True),
        sa.Column('reset_token_expiry', sa.DateTime()),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
    )
    op.create_index('ix_user_email', 'user', ['email'], unique=True)
    op.create_index('ix_user_district', 'user', ['district'])

    op.create_table(
        'vendor_shop',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('vendor_id', sa.String(36), sa.ForeignKey('user.id'), nullable=False, unique=True),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('district', sa.String(100)),
        sa.Column('logo', sa.String(255)),
        sa.Column('is_approved', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_rejected', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('rejected_at', sa.DateTime()),
        sa.Column('rejected_by', sa.String(36), sa.ForeignKey('user.id')),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
    )
    op.create_index('ix_vendor_shop_district', 'vendor_shop', ['district'])

    op.create_table(
        'category',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('description', sa.String(500)),
        sa.Column('image', sa.String(255)),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
    )

    op.create_table(
        'product',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('vendor_id', sa.String(36), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('shop_id', sa.String(36), sa.ForeignKey('vendor_shop.id')),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('category', sa.String(100)),
        sa.Column('category_id', sa.String(36), sa.ForeignKey('category.id')),
        sa.Column('size', sa.String(50)),
        sa.Column('color', sa.String(50)),
        sa.Column('material', sa.String(100)),
        sa.Column('brand', sa.String(100)),
        sa.Column('stock_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('in_stock', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('images', sa.JSON()),
        sa.Column('rating', sa.Float()),
        sa.Column('reviews', sa.Integer()),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
    )
    op.create_index('ix_product_vendor_id', 'product', ['vendor_id'])

    op.create_table(
        'cart_item',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('product_id', sa.String(36), sa.ForeignKey('product.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('added_at', sa.DateTime()),
        sa.Column('last_updated', sa.DateTime()),
        sa.UniqueConstraint('user_id', 'product_id', name='uq_cart_user_product'),
    )
    op.create_index('ix_cart_item_user_id', 'cart_item', ['user_id'])

    op.create_table(
        'wishlist',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('customer_id', sa.String(36), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('product_id', sa.String(36), sa.ForeignKey('product.id'), nullable=False),
        sa.Column('created_at', sa.DateTime()),
        sa.UniqueConstraint('customer_id', 'product_id', name='uq_wishlist_customer_product'),
    )
    op.create_index('ix_wishlist_customer_id', 'wishlist', ['customer_id'])

    op.create_table(
        'order',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('order_number', sa.String(20), nullable=False, unique=True),
        sa.Column('customer_id', sa.String(36), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        sa.Column('shipping_cost', sa.Numeric(12, 2), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('shipping_address', sa.Text(), nullable=False),
        sa.Column('district', sa.String(100)),
        sa.Column('shipping_method', sa.String(50)),
        sa.Column('payment_method', sa.String(30)),
        sa.Column('special_instructions', sa.Text()),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
    )
    op.create_index('ix_order_customer_status', 'order', ['customer_id', 'status'])

    op.create_table(
        'order_item',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('order_id', sa.String(36), sa.ForeignKey('order.id'), nullable=False),
        sa.Column('product_id', sa.String(36), sa.ForeignKey('product.id'), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
    )
    op.create_index('ix_order_item_order_id', 'order_item', ['order_id'])


def downgrade():
    op.drop_index('ix_order_item_order_id', table_name='order_item')
    op.drop_table('order_item')
    op.drop_index('ix_order_customer_status', table_name='order')
    op.drop_table('order')
    op.drop_index('ix_wishlist_customer_id', table_name='wishlist')
    op.drop_table('wishlist')
    op.drop_index('ix_cart_item_user_id', table_name='cart_item')
    op.drop_table('cart_item')
    op.drop_index('ix_product_vendor_id', table_name='product')
    op.drop_table('product')
    op.drop_table('category')
    op.drop_index('ix_vendor_shop_district', table_name='vendor_shop')
    op.drop_table('vendor_shop')
    op.drop_index('ix_user_district', table_name='user')
    op.drop_index('ix_user_email', table_name='user')
    op.drop_table('user')
