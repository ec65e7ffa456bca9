"""
PokerPlan - Planning poker rooms for estimating stories together.
Main Flask application entry point focusing on app creation, dependency injection, and service wiring.
"""

from flask import Flask
from flask_socketio import SocketIO
import logging

from container import configure_container
from config_factory import load_config, ConfigurationFactory
from src.config.room_settings import get_room_settings
from src.services.rate_limit_service import EventQueueManager, set_event_queue_manager

# Initialize Flask app
app = Flask(__name__)

# Load and apply configuration
app_config = load_config()
config_factory = ConfigurationFactory()
app.config.update(config_factory.get_flask_config())
get_room_settings(app_config)

# Configure logging
logging.basicConfig(
    level=getattr(logging, app_config.log_level.upper(), logging.INFO),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Socket.IO with environment-aware CORS.
# In production only the configured origins are allowed (none means same-origin only).
if app_config.is_production:
    socketio = SocketIO(app, cors_allowed_origins=app_config.cors_allowed_origins or [],
                        async_mode=app_config.socketio_async_mode)
else:
    socketio = SocketIO(app, cors_allowed_origins="*", async_mode=app_config.socketio_async_mode)

# Configure service container with dependencies
container = configure_container(socketio=socketio, config=config_factory.to_dict())

# Initialize rate limiting
event_queue_manager = EventQueueManager(app_config)
set_event_queue_manager(event_queue_manager)

# Register REST endpoints
from src.routes.api import create_api_blueprint
app.register_blueprint(create_api_blueprint(container))

# Register Socket.IO handlers
from src.handlers.socket_handlers import register_socket_handlers
register_socket_handlers(socketio)

if __name__ == '__main__':
    logger.info(f"Starting PokerPlan server on {app_config.host}:{app_config.port}")
    try:
        socketio.run(app, host=app_config.host, port=app_config.port, debug=app_config.debug)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
