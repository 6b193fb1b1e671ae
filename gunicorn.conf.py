"""Gunicorn configuration for serving app:app behind uvicorn workers.

Notes:
- Each worker builds its own read-only property collection at startup
  (from processedProperties.json when present). Scale via WEB_CONCURRENCY.
- The timeout covers a cold start that has to merge the CSVs first.
"""
import os

wsgi_app = "app:app"
worker_class = "uvicorn_worker.UvicornWorker"
workers = int(os.getenv("WEB_CONCURRENCY", "2"))
bind = f"0.0.0.0:{os.getenv('PORT', '3001')}"
timeout = int(os.getenv("GUNICORN_TIMEOUT", "120"))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = 5
accesslog = "-"  # stdout
errorlog = "-"   # stderr
loglevel = os.getenv("GUNICORN_LOGLEVEL", "info")
preload_app = False  # lifespan runs per worker

def when_ready(server):  # pragma: no cover
    server.log.info("Gunicorn ready - property chat API started.")
