"""Gunicorn settings for the auth service (``gunicorn -c gunicorn.conf.py``)."""

import os

wsgi_app = "lumir_auth:create_app()"

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
# bcrypt releases the GIL; threads keep sign-in from stalling other requests
worker_class = "gthread"
threads = int(os.getenv("GUNICORN_THREADS", "4"))
timeout = 60
graceful_timeout = 30
keepalive = 5

# Access lines come from the app's JSON access logger
accesslog = None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1")
