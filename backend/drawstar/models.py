from datetime import datetime, timezone
from drawstar import db, bcrypt
from flask_login import UserMixin


def utcnow() -> datetime:
    """Naive UTC now; every timestamp column stores naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }


class Prompt(db.Model):
    __tablename__ = 'prompts'
    id = db.Column(db.Integer, primary_key=True)
    text = db.Column(db.Text, nullable=False)


class Room(db.Model):
    __tablename__ = 'rooms'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=True)
    host_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    status = db.Column(db.String(16), nullable=False, default='waiting')  # waiting, playing, completed
    current_phase = db.Column(db.String(16), nullable=True)  # drawing, voting, results
    current_round = db.Column(db.Integer, nullable=False, default=1)
    rounds = db.Column(db.Integer, nullable=False, default=3)
    current_drawing_index = db.Column(db.Integer, nullable=False, default=0)
    current_prompt_id = db.Column(db.Integer, db.ForeignKey('prompts.id'), nullable=True)
    phase_end_time = db.Column(db.DateTime, nullable=True, index=True)
    drawing_time = db.Column(db.Integer, nullable=False, default=60)
    voting_time = db.Column(db.Integer, nullable=False, default=30)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'status': self.status,
            'current_phase': self.current_phase,
            'current_round': self.current_round,
            'rounds': self.rounds,
            'current_drawing_index': self.current_drawing_index,
            'phase_end_time': self.phase_end_time.isoformat() if self.phase_end_time else None,
        }


class RoomPlayer(db.Model):
    __tablename__ = 'room_players'
    __table_args__ = (db.UniqueConstraint('room_id', 'user_id', name='uq_room_players_room_user'),)
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    joined_at = db.Column(db.DateTime, nullable=False, default=utcnow)


class Drawing(db.Model):
    __tablename__ = 'drawings'
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), nullable=False, index=True)
    round_number = db.Column(db.Integer, nullable=False)
    artist_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    image_data = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)


class Star(db.Model):
    __tablename__ = 'stars'
    id = db.Column(db.Integer, primary_key=True)
    drawing_id = db.Column(db.Integer, db.ForeignKey('drawings.id'), nullable=False, index=True)
    voter_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    rating = db.Column(db.Integer, nullable=False)  # 0-5


class GameResult(db.Model):
    __tablename__ = 'game_results'
    __table_args__ = (db.UniqueConstraint('room_id', 'user_id', name='uq_game_results_room_user'),)
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    username = db.Column(db.String(64), nullable=True)
    score = db.Column(db.Integer, nullable=False, default=0)
    rank = db.Column(db.Integer, nullable=False, default=0)  # placeholder, never computed
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
