from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import time
import click
from drawstar.config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

DEFAULT_PROMPTS = [
    'A cat riding a bicycle',
    'The moon eating breakfast',
    'A haunted lighthouse',
    'A dragon at the dentist',
    'Robots having a picnic',
]

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    origins = flask_app.config.get('CORS_ORIGINS') or '*'
    CORS(flask_app, supports_credentials=True, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from drawstar.main import main
    flask_app.register_blueprint(main)

    from drawstar.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api/game')

    from drawstar.api.cron import cron
    flask_app.register_blueprint(cron, url_prefix='/api/cron')

    from drawstar.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    from drawstar.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'message': 'Authentication required'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from drawstar.models import Prompt
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            for u in ['testuser1', 'testuser2', 'testuser3']:
                user = User(username=u)
                user.set_password('password')
                db.session.add(user)
            for text in DEFAULT_PROMPTS:
                db.session.add(Prompt(text=text))

            db.session.commit()
            print('Database has been reset and seeded!')

    @click.command('advance-phases')
    def advance_phases_command():
        """Runs one phase advancement pass over all expired rooms."""
        from drawstar.services.game.scheduler import run_phase_pass
        with flask_app.app_context():
            processed = run_phase_pass()
        print(f'Processed {processed} rooms')

    @click.command('phase-loop')
    @click.option('--interval', type=int, default=None, help='Seconds between passes.')
    def phase_loop_command(interval):
        """Runs advancement passes forever, for deployments without an external cron."""
        from drawstar.services.game.scheduler import run_phase_pass
        delay = interval or int(flask_app.config.get('PHASE_POLL_INTERVAL_SEC', 10))
        flask_app.logger.info(f"[phase-loop] interval={delay}s")
        while True:
            with flask_app.app_context():
                try:
                    run_phase_pass()
                except Exception:
                    flask_app.logger.exception("[phase-loop] pass failed")
            time.sleep(delay)

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(advance_phases_command)
    flask_app.cli.add_command(phase_loop_command)

    return flask_app
