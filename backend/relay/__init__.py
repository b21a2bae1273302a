from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config
from relay.services.matchmaking import Lobby

socketio = SocketIO(async_mode=None)
lobby = Lobby()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('ALLOWED_ORIGINS') or []
    CORS(flask_app, origins=allowed_origins, methods=['GET', 'POST'])

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Queue and session state live for the lifetime of the app
    lobby.init_app(flask_app, socketio)

    from relay.routes import main
    flask_app.register_blueprint(main)

    from relay.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api')

    from relay.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    return flask_app
