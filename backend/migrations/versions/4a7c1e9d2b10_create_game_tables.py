"""create users, prompts, rooms, room_players, drawings, stars, game_results

Revision ID: 4a7c1e9d2b10
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4a7c1e9d2b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=256), nullable=False),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'prompts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('text', sa.Text(), nullable=False),
    )

    op.create_table(
        'rooms',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=True),
        sa.Column('host_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='waiting'),
        sa.Column('current_phase', sa.String(length=16), nullable=True),
        sa.Column('current_round', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('rounds', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('current_drawing_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('current_prompt_id', sa.Integer(), sa.ForeignKey('prompts.id'), nullable=True),
        sa.Column('phase_end_time', sa.DateTime(), nullable=True),
        sa.Column('drawing_time', sa.Integer(), nullable=False, server_default='60'),
        sa.Column('voting_time', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_rooms_phase_end_time', 'rooms', ['phase_end_time'])

    op.create_table(
        'room_players',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('room_id', 'user_id', name='uq_room_players_room_user'),
    )
    op.create_index('ix_room_players_room_id', 'room_players', ['room_id'])

    op.create_table(
        'drawings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id'), nullable=False),
        sa.Column('round_number', sa.Integer(), nullable=False),
        sa.Column('artist_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('image_data', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_drawings_room_id', 'drawings', ['room_id'])

    op.create_table(
        'stars',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('drawing_id', sa.Integer(), sa.ForeignKey('drawings.id'), nullable=False),
        sa.Column('voter_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=False),
    )
    op.create_index('ix_stars_drawing_id', 'stars', ['drawing_id'])

    op.create_table(
        'game_results',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=True),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rank', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('room_id', 'user_id', name='uq_game_results_room_user'),
    )


def downgrade():
    op.drop_table('game_results')
    op.drop_index('ix_stars_drawing_id', table_name='stars')
    op.drop_table('stars')
    op.drop_index('ix_drawings_room_id', table_name='drawings')
    op.drop_table('drawings')
    op.drop_index('ix_room_players_room_id', table_name='room_players')
    op.drop_table('room_players')
    op.drop_index('ix_rooms_phase_end_time', table_name='rooms')
    op.drop_table('rooms')
    op.drop_table('prompts')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
