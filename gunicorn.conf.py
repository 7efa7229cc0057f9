"""
Gunicorn configuration for EconWatch production deployment.

Usage:
    gunicorn econwatch.main:app -c gunicorn.conf.py
"""

import multiprocessing

bind = "0.0.0.0:8000"

# Worker processes: CPU cores * 2 + 1 (Gunicorn recommendation)
workers = multiprocessing.cpu_count() * 2 + 1

# Use Uvicorn's ASGI worker for FastAPI
worker_class = "uvicorn.workers.UvicornWorker"

# A cycle triggered via /internal/run_cycle waits on the feed and SMTP
timeout = 120

keepalive = 5

accesslog = "-"  # stdout
errorlog = "-"   # stderr
loglevel = "info"
