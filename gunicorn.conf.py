# gunicorn.conf.py
import os
import logging
import sys
import multiprocessing

# The app is built by its factory
wsgi_app = "app:create_app()"

# Configure logging to stdout
accesslog = '-'
errorlog = '-'
loglevel = 'info'

# Get PORT from environment or use default
port = os.getenv('PORT', '8080')
bind = f"0.0.0.0:{port}"

# Model calls are I/O bound, so a few workers with threads each
cores = multiprocessing.cpu_count()
workers = min(cores * 2 + 1, 4)
threads = 4

# Log configuration on startup
def on_starting(server):
    logger = logging.getLogger('gunicorn.error')
    logger.setLevel(logging.INFO)
    logger.addHandler(logging.StreamHandler(sys.stdout))
    logger.info(f"Starting gunicorn with {workers} workers on port {port}")
    logger.info(f"Worker timeout set to {timeout} seconds")

# Chapter and research prompts can take a while
timeout = 180
keepalive = 120
worker_class = "gthread"

# Process naming
proc_name = "saints_companion"
default_proc_name = "saints_companion"

# Graceful server restart
graceful_timeout = 30
