"""Gunicorn settings: `gunicorn app.main:app -c gunicorn_conf.py`."""
from app.config import settings

# Server socket
bind = f"{settings.HOST}:{settings.PORT}"
backlog = 2048

# Worker processes
workers = settings.WORKERS
worker_class = "uvicorn.workers.UvicornWorker"
timeout = 30
keepalive = 2

# Logging (application logs go through app.core.logging_config)
accesslog = "-"
errorlog = "-"
loglevel = settings.LOG_LEVEL.lower()

proc_name = "agent_marketplace_api"
