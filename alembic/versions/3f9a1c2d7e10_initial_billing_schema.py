"""initial_billing_schema

Revision ID: 3f9a1c2d7e10
Revises:
Create Date: 2026-10-19 09:12:41.503112

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f9a1c2d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('users',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('hashed_password', sa.String(length=255), nullable=True),
        sa.Column('avatar', sa.String(length=500), nullable=True),
        sa.Column('role', sa.String(length=20), server_default='USER', nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('deleted', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_deleted'), 'users', ['deleted'], unique=False)

    # Membership catalog
    op.create_table('membership_levels',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('level', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('yearly_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('monthly_quota', sa.Integer(), nullable=False),
        sa.Column('max_resolution', sa.String(length=20), nullable=False),
        sa.Column('priority', sa.Integer(), server_default='0', nullable=False),
        sa.Column('commercial_use', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('watermark', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('features', sa.Text(), server_default='[]', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('level')
    )
    op.create_index(op.f('ix_membership_levels_id'), 'membership_levels', ['id'], unique=False)
    op.create_index('idx_membership_level_active_sort', 'membership_levels', ['is_active', 'sort_order'], unique=False)

    op.create_table('subscriptions',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('plan', sa.String(length=50), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('current_period_start', sa.DateTime(timezone=True), nullable=False),
        sa.Column('current_period_end', sa.DateTime(timezone=True), nullable=False),
        sa.Column('cancel_at_period_end', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_subscriptions_id'), 'subscriptions', ['id'], unique=False)
    op.create_index(op.f('ix_subscriptions_user_id'), 'subscriptions', ['user_id'], unique=True)
    op.create_index(op.f('ix_subscriptions_status'), 'subscriptions', ['status'], unique=False)
    op.create_index('idx_subscription_period_end', 'subscriptions', ['current_period_end'], unique=False)

    # Orders and payments
    op.create_table('orders',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('order_no', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('currency', sa.String(length=10), server_default='CNY', nullable=False),
        sa.Column('status', sa.String(length=20), server_default='PENDING', nullable=False),
        sa.Column('pay_status', sa.String(length=20), server_default='PENDING', nullable=False),
        sa.Column('membership_id', sa.BigInteger(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('quota_amount', sa.Integer(), nullable=True),
        sa.Column('expire_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('pay_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('pay_trade_no', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.CheckConstraint(
            "(type = 'MEMBERSHIP' AND membership_id IS NOT NULL "
            "AND duration IS NOT NULL AND quota_amount IS NULL) OR "
            "(type = 'QUOTA' AND quota_amount IS NOT NULL "
            "AND membership_id IS NULL AND duration IS NULL)",
            name='ck_orders_type_payload'
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['membership_id'], ['membership_levels.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_orders_id'), 'orders', ['id'], unique=False)
    op.create_index(op.f('ix_orders_order_no'), 'orders', ['order_no'], unique=True)
    op.create_index(op.f('ix_orders_user_id'), 'orders', ['user_id'], unique=False)
    op.create_index('idx_orders_user_created', 'orders', ['user_id', 'created_at'], unique=False)

    op.create_table('payments',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('order_id', sa.BigInteger(), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('currency', sa.String(length=10), server_default='CNY', nullable=False),
        sa.Column('pay_method', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='PENDING', nullable=False),
        sa.Column('pay_data', sa.JSON(), nullable=True),
        sa.Column('pay_trade_no', sa.String(length=128), nullable=True),
        sa.Column('notify_data', sa.JSON(), nullable=True),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_payments_id'), 'payments', ['id'], unique=False)
    op.create_index(op.f('ix_payments_order_id'), 'payments', ['order_id'], unique=False)
    op.create_index(op.f('ix_payments_user_id'), 'payments', ['user_id'], unique=False)
    op.create_index(op.f('ix_payments_status'), 'payments', ['status'], unique=False)

    # Quota counters and ledger
    op.create_table('quotas',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('free_quota', sa.Integer(), server_default='0', nullable=False),
        sa.Column('free_quota_used', sa.Integer(), server_default='0', nullable=False),
        sa.Column('paid_quota', sa.Integer(), server_default='0', nullable=False),
        sa.Column('paid_quota_used', sa.Integer(), server_default='0', nullable=False),
        sa.Column('extra_quota', sa.Integer(), server_default='0', nullable=False),
        sa.Column('extra_quota_used', sa.Integer(), server_default='0', nullable=False),
        sa.Column('total_quota', sa.Integer(), server_default='0', nullable=False),
        sa.Column('remaining_quota', sa.Integer(), server_default='0', nullable=False),
        sa.Column('reset_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_quotas_id'), 'quotas', ['id'], unique=False)
    op.create_index(op.f('ix_quotas_user_id'), 'quotas', ['user_id'], unique=True)

    op.create_table('quota_ledger_entries',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('entry_type', sa.String(length=30), nullable=False),
        sa.Column('bucket', sa.String(length=10), nullable=True),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('remaining_after', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.BigInteger(), nullable=True),
        sa.Column('generation_id', sa.BigInteger(), nullable=True),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_id')
    )
    op.create_index(op.f('ix_quota_ledger_entries_id'), 'quota_ledger_entries', ['id'], unique=False)
    op.create_index(op.f('ix_quota_ledger_entries_user_id'), 'quota_ledger_entries', ['user_id'], unique=False)
    op.create_index(op.f('ix_quota_ledger_entries_entry_type'), 'quota_ledger_entries', ['entry_type'], unique=False)
    op.create_index(op.f('ix_quota_ledger_entries_generation_id'), 'quota_ledger_entries', ['generation_id'], unique=False)
    op.create_index(op.f('ix_quota_ledger_entries_created_at'), 'quota_ledger_entries', ['created_at'], unique=False)
    op.create_index('idx_quota_ledger_user_created', 'quota_ledger_entries', ['user_id', 'created_at'], unique=False)

    # Generation history
    op.create_table('generations',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('model_image', sa.Text(), nullable=True),
        sa.Column('outfit_images', sa.JSON(), nullable=False),
        sa.Column('pose', sa.String(length=100), nullable=True),
        sa.Column('style', sa.String(length=100), nullable=True),
        sa.Column('lighting', sa.String(length=100), nullable=True),
        sa.Column('background', sa.String(length=100), nullable=True),
        sa.Column('color_tone', sa.String(length=100), server_default='冷暖平衡', nullable=False),
        sa.Column('count', sa.Integer(), server_default='1', nullable=False),
        sa.Column('generated_images', sa.JSON(), nullable=False),
        sa.Column('time', sa.String(length=32), server_default='0', nullable=False),
        sa.Column('status', sa.String(length=20), server_default='COMPLETED', nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_generations_id'), 'generations', ['id'], unique=False)
    op.create_index(op.f('ix_generations_user_id'), 'generations', ['user_id'], unique=False)
    op.create_index('idx_generations_user_created', 'generations', ['user_id', 'created_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_generations_user_created', table_name='generations')
    op.drop_index(op.f('ix_generations_user_id'), table_name='generations')
    op.drop_index(op.f('ix_generations_id'), table_name='generations')
    op.drop_table('generations')

    op.drop_index('idx_quota_ledger_user_created', table_name='quota_ledger_entries')
    op.drop_index(op.f('ix_quota_ledger_entries_created_at'), table_name='quota_ledger_entries')
    op.drop_index(op.f('ix_quota_ledger_entries_generation_id'), table_name='quota_ledger_entries')
    op.drop_index(op.f('ix_quota_ledger_entries_entry_type'), table_name='quota_ledger_entries')
    op.drop_index(op.f('ix_quota_ledger_entries_user_id'), table_name='quota_ledger_entries')
    op.drop_index(op.f('ix_quota_ledger_entries_id'), table_name='quota_ledger_entries')
    op.drop_table('quota_ledger_entries')

    op.drop_index(op.f('ix_quotas_user_id'), table_name='quotas')
    op.drop_index(op.f('ix_quotas_id'), table_name='quotas')
    op.drop_table('quotas')

    op.drop_index(op.f('ix_payments_status'), table_name='payments')
    op.drop_index(op.f('ix_payments_user_id'), table_name='payments')
    op.drop_index(op.f('ix_payments_order_id'), table_name='payments')
    op.drop_index(op.f('ix_payments_id'), table_name='payments')
    op.drop_table('payments')

    op.drop_index('idx_orders_user_created', table_name='orders')
    op.drop_index(op.f('ix_orders_user_id'), table_name='orders')
    op.drop_index(op.f('ix_orders_order_no'), table_name='orders')
    op.drop_index(op.f('ix_orders_id'), table_name='orders')
    op.drop_table('orders')

    op.drop_index('idx_subscription_period_end', table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_status'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_user_id'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_id'), table_name='subscriptions')
    op.drop_table('subscriptions')

    op.drop_index('idx_membership_level_active_sort', table_name='membership_levels')
    op.drop_index(op.f('ix_membership_levels_id'), table_name='membership_levels')
    op.drop_table('membership_levels')

    op.drop_index(op.f('ix_users_deleted'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')
