"""
Gunicorn configuration for PokerPlan.
Optimized for Socket.IO with eventlet workers.
"""

import logging

from config_factory import load_config

# Load configuration (renamed to avoid conflicts with gunicorn's internal 'config')
app_config = load_config()


def on_starting(server):
    """Log the effective room settings before workers are forked."""
    logger = logging.getLogger(__name__)
    logger.info(
        f"Starting PokerPlan ({app_config.environment.value}): "
        f"max {app_config.max_participants_per_room} participants per room, "
        f"room lock enforced={app_config.enforce_room_lock}"
    )


# Server socket
bind = f"{app_config.host}:{app_config.port}"
backlog = 2048

# Worker processes
workers = 1  # Rooms live in process memory, so a single worker is required
worker_class = "eventlet"
worker_connections = app_config.worker_connections
timeout = app_config.timeout
keepalive = app_config.keepalive

max_requests = 2000
max_requests_jitter = 100

# Logging
accesslog = "-"
errorlog = "-"
loglevel = app_config.log_level
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

proc_name = "pokerplan"

# Server mechanics
preload_app = False  # Don't preload for Socket.IO
daemon = False
pidfile = None
