"""Per-event card backgrounds, blank invites and check-in limits

Adds each event's own background image, QR placement, expiration date and
location. Invites may now exist without a contact (general admission, or a
contact that was deleted) and carry a stored label and a check-in limit.

Revision ID: b7c8d9e0f1a2
Revises: a1b2c3d4e5f6
Create Date: 2026-05-11 14:30:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'b7c8d9e0f1a2'
down_revision = 'a1b2c3d4e5f6'
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table('events') as batch_op:
        batch_op.add_column(sa.Column('expiration_date', sa.DateTime(timezone=True), nullable=True))
        batch_op.add_column(sa.Column('address', sa.String(length=500), nullable=True))
        batch_op.add_column(sa.Column('latitude', sa.Float(), nullable=True))
        batch_op.add_column(sa.Column('longitude', sa.Float(), nullable=True))
        batch_op.add_column(sa.Column('image_data', sa.LargeBinary(), nullable=True))
        batch_op.add_column(sa.Column('qr_position_x', sa.Float(), nullable=False, server_default='0.5'))
        batch_op.add_column(sa.Column('qr_position_y', sa.Float(), nullable=False, server_default='0.5'))
        batch_op.add_column(sa.Column('qr_size', sa.Float(), nullable=False, server_default='0.3'))

    with op.batch_alter_table('invites') as batch_op:
        batch_op.alter_column('contact_id', existing_type=sa.Uuid(), nullable=True)
        batch_op.add_column(sa.Column('contact_name', sa.String(length=200), nullable=True))
        batch_op.add_column(sa.Column('max_checkins', sa.Integer(), nullable=True))

    # Existing invites keep the name of the contact they were issued to
    op.execute(
        "UPDATE invites SET contact_name = "
        "(SELECT contacts.name FROM contacts WHERE contacts.id = invites.contact_id)"
    )


def downgrade():
    # Invites without a contact cannot be represented in the old schema
    op.execute("DELETE FROM invites WHERE contact_id IS NULL")

    with op.batch_alter_table('invites') as batch_op:
        batch_op.drop_column('max_checkins')
        batch_op.drop_column('contact_name')
        batch_op.alter_column('contact_id', existing_type=sa.Uuid(), nullable=False)

    with op.batch_alter_table('events') as batch_op:
        batch_op.drop_column('qr_size')
        batch_op.drop_column('qr_position_y')
        batch_op.drop_column('qr_position_x')
        batch_op.drop_column('image_data')
        batch_op.drop_column('longitude')
        batch_op.drop_column('latitude')
        batch_op.drop_column('address')
        batch_op.drop_column('expiration_date')
