import os

DEFAULT_ALLOWED_ORIGINS = [
    "https://humanvsbot-frontend.vercel.app",
    "http://localhost",
    "capacitor://localhost",
]


def _env_flag(name, default='0'):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(name, default):
    raw = os.environ.get(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(',') if item.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    PORT = int(os.environ.get('PORT', '3000'))
    # Minimum perceived search time before any match is announced (ms)
    MATCH_DELAY_MS = int(os.environ.get('MATCH_DELAY_MS', '10000'))
    # Simulated "typing" pause before a responder reply is delivered (ms)
    TYPING_DELAY_MS = int(os.environ.get('TYPING_DELAY_MS', '1500'))
    # Automated responder service
    RESPONDER_URL = os.environ.get('PYTHON_SERVICE_URL', '')
    RESPONDER_PATH = os.environ.get('RESPONDER_PATH', '/api/bot/respond')
    RESPONDER_TIMEOUT_SEC = float(os.environ.get('RESPONDER_TIMEOUT_SEC', '10'))
    ALLOWED_ORIGINS = _env_list('ALLOWED_ORIGINS', DEFAULT_ALLOWED_ORIGINS)
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Optional: treat a mid-session disconnect like leave_game
    END_SESSION_ON_DISCONNECT = _env_flag('END_SESSION_ON_DISCONNECT')
