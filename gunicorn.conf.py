import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

env_path = BASE_DIR / ".env"
if env_path.exists():
    load_dotenv(env_path)

wsgi_app = "escalas.wsgi:application"
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
# Um unico processo: o store em memoria e a sessao unica do app.
workers = int(os.environ.get("GUNICORN_WORKERS", "1"))
threads = 4
max_requests = 1000
max_requests_jitter = 50
