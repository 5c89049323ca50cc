import os
import sys
from datetime import timedelta
import pytest

# Ensure the backend root (containing the `drawstar` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from drawstar import create_app, db, socketio
from drawstar.models import Drawing, GameResult, Prompt, Room, RoomPlayer, Star, User, utcnow


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BCRYPT_LOG_ROUNDS = 4
    CORS_ORIGINS = '*'
    CRON_HEADER_NAME = 'X-Vercel-Cron'
    CRON_HEADER_VALUE = 'true'
    RECOVERY_GRACE_SEC = 30


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import drawstar.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def now():
    return utcnow()


@pytest.fixture()
def make_user(flask_app):
    def _make(username, password='password'):
        user = User(username=username)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user.id
    return _make


@pytest.fixture()
def make_prompt(flask_app):
    def _make(text='A cat riding a bicycle'):
        prompt = Prompt(text=text)
        db.session.add(prompt)
        db.session.commit()
        return prompt.id
    return _make


@pytest.fixture()
def make_room(flask_app, now):
    """Create a playing room whose phase expired a second ago, with the given members."""
    def _make(members=(), expired=True, **fields):
        values = {
            'status': 'playing',
            'current_phase': 'drawing',
            'current_round': 1,
            'rounds': 3,
            'current_drawing_index': 0,
            'drawing_time': 60,
            'voting_time': 30,
            'phase_end_time': now - timedelta(seconds=1) if expired else now + timedelta(seconds=45),
        }
        values.update(fields)
        room = Room(**values)
        db.session.add(room)
        db.session.flush()
        for user_id in members:
            db.session.add(RoomPlayer(room_id=room.id, user_id=user_id))
        db.session.commit()
        return room.id
    return _make


@pytest.fixture()
def make_drawing(flask_app):
    def _make(room_id, artist_id, round_number=1, ratings=()):
        drawing = Drawing(room_id=room_id, artist_id=artist_id, round_number=round_number, image_data='data:image/png;base64,')
        db.session.add(drawing)
        db.session.flush()
        for rating in ratings:
            db.session.add(Star(drawing_id=drawing.id, rating=rating))
        db.session.commit()
        return drawing.id
    return _make


@pytest.fixture()
def load_room(flask_app):
    def _load(room_id):
        return db.session.get(Room, room_id, populate_existing=True)
    return _load


@pytest.fixture()
def results_for(flask_app):
    def _results(room_id):
        return {r.user_id: r for r in GameResult.query.filter_by(room_id=room_id).all()}
    return _results


@pytest.fixture()
def login(client):
    def _login(username, password='password'):
        res = client.post('/api/auth/login', json={'username': username, 'password': password})
        assert res.status_code == 200
        return res
    return _login
