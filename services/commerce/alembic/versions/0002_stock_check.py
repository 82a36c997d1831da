from alembic import op

revision = '0002_stock_check'
down_revision = '0001_init'
branch_labels = None
depends_on = None

def upgrade():
    # Stock can never be driven below zero, whatever path writes it
    op.create_check_constraint('ck_products_stock_non_negative', 'products', 'stock_quantity >= 0')
    op.create_check_constraint('ck_products_price_non_negative', 'products', 'price >= 0')
    op.create_check_constraint('ck_orders_quantity_positive', 'orders', 'quantity >= 1')
    op.create_index('idx_orders_tenant_product', 'orders', ['tenant_id', 'product_id'])

def downgrade():
    op.drop_index('idx_orders_tenant_product', table_name='orders')
    op.drop_constraint('ck_orders_quantity_positive', 'orders', type_='check')
    op.drop_constraint('ck_products_price_non_negative', 'products', type_='check')
    op.drop_constraint('ck_products_stock_non_negative', 'products', type_='check')
