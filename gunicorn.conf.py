"""
Gunicorn configuration for the Yeartrace server.

Env vars that override defaults:
  PORT  - TCP port to bind (default: 8000)
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# The records store lives in process memory: exactly one worker.
workers = 1

worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5
timeout = 120

# Stdout only.
loglevel = "info"
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

# Let an in-flight save finish before the worker exits.
graceful_timeout = 30
