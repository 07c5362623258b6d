"""Initial schema: contacts, templates, events, invites, check-ins

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-03-02 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1b2c3d4e5f6'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'contacts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=254), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'templates',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('image_data', sa.LargeBinary(), nullable=False),
        sa.Column('qr_position_x', sa.Float(), nullable=False),
        sa.Column('qr_position_y', sa.Float(), nullable=False),
        sa.Column('qr_size', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'events',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('subtitle', sa.String(length=500), nullable=False, server_default=''),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('template_id', sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(
            ['template_id'], ['templates.id'],
            name='fk_events_template_id_templates', ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_events_date', 'events', ['date'], unique=False)

    # Every invite starts out tied to a contact
    op.create_table(
        'invites',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('contact_id', sa.Uuid(), nullable=False),
        sa.Column('event_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(
            ['contact_id'], ['contacts.id'],
            name='fk_invites_contact_id_contacts', ondelete='SET NULL',
        ),
        sa.ForeignKeyConstraint(
            ['event_id'], ['events.id'],
            name='fk_invites_event_id_events', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_invites_event', 'invites', ['event_id'], unique=False)
    op.create_index('idx_invites_contact', 'invites', ['contact_id'], unique=False)

    op.create_table(
        'checkins',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('invite_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(
            ['invite_id'], ['invites.id'],
            name='fk_checkins_invite_id_invites', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_checkins_invite', 'checkins', ['invite_id'], unique=False)


def downgrade():
    op.drop_index('idx_checkins_invite', table_name='checkins')
    op.drop_table('checkins')
    op.drop_index('idx_invites_contact', table_name='invites')
    op.drop_index('idx_invites_event', table_name='invites')
    op.drop_table('invites')
    op.drop_index('idx_events_date', table_name='events')
    op.drop_table('events')
    op.drop_table('templates')
    op.drop_table('contacts')
