"""Gunicorn configuration for production."""
import multiprocessing
import os

# Server socket
# PORT is set by most hosting platforms; default to 8000 locally
port = os.getenv("PORT", "8000")
bind = f"0.0.0.0:{port}"
backlog = 2048

# Worker processes
# Two per core, capped at 8
workers_env = os.getenv("GUNICORN_WORKERS")
if workers_env:
    workers = int(workers_env)
else:
    cpu_count = multiprocessing.cpu_count()
    workers = min(max(cpu_count * 2, 2), 8)

# Sessions must live in Redis when more than one worker runs
worker_class = "sync"
timeout = int(os.getenv("GUNICORN_TIMEOUT", "60"))
keepalive = 5
graceful_timeout = 30

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'
capture_output = True

# Process naming
proc_name = "skyfront"

# Server mechanics
daemon = False
pidfile = None
umask = 0
user = None
group = None
tmp_upload_dir = None
