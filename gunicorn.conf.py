# gunicorn.conf.py
import os
import logging
import sys

# Configure logging to stdout
accesslog = '-'
errorlog = '-'
loglevel = 'info'

wsgi_app = 'app:create_app()'

# Get PORT from environment or use default
port = os.getenv('PORT', '8080')
bind = f"0.0.0.0:{port}"

# One worker process: the broadcast scheduler lives in the app process and
# several workers would each send every scheduled verse.
workers = 1
threads = int(os.getenv('GUNICORN_THREADS', '8'))
worker_class = "gthread"


# Log configuration on startup
def on_starting(server):
    logger = logging.getLogger('gunicorn.error')
    logger.setLevel(logging.INFO)
    logger.addHandler(logging.StreamHandler(sys.stdout))
    logger.info(f"Starting gunicorn with {workers} worker and {threads} threads on port {port}")


timeout = 60
keepalive = 30

# Process naming
proc_name = "scripture_query"
default_proc_name = "scripture_query"

# Graceful server restart
graceful_timeout = 30
