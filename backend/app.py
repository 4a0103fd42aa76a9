from flask import Flask, g, request
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from config import Config
from services.errors import ServiceError
from utils.logging_config import setup_logger
import logging
import time

setup_logger()
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.from_object(Config)

# Initialize extensions
jwt = JWTManager(app)
CORS(
    app,
    origins='*',
    allow_headers=['authorization', 'content-type'],
    max_age=Config.CORS_MAX_AGE,
    supports_credentials=True
)

# Request timing
@app.before_request
def start_timer():
    g._request_started = time.perf_counter()

@app.after_request
def add_server_timing(response):
    started = g.get('_request_started')
    if started is not None:
        duration_ms = (time.perf_counter() - started) * 1000
        response.headers['Server-Timing'] = f'total;dur={duration_ms:.1f}'
    return response

# JWT error handlers
@jwt.invalid_token_loader
def invalid_token_callback(error):
    logger.warning("JWT invalid token: %s", error)
    return 'Invalid token', 401

@jwt.unauthorized_loader
def unauthorized_callback(error):
    logger.warning("JWT unauthorized: %s", error)
    return 'Login required', 401

@jwt.expired_token_loader
def expired_token_callback(jwt_header, jwt_payload):
    return 'Token has expired', 401

@jwt.revoked_token_loader
def revoked_token_callback(jwt_header, jwt_payload):
    return 'Token has been revoked', 401

# Error handlers
@app.errorhandler(ServiceError)
def handle_service_error(error):
    if error.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.path, error.message)
    return error.message, error.status_code

@app.errorhandler(404)
def handle_not_found(error):
    return f'{request.path} not found', 404

@app.errorhandler(Exception)
def handle_error(error):
    if isinstance(error, HTTPException):
        return error.description or error.name, error.code
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return 'Internal server error', 500

@app.route('/')
def index():
    return 'Hi'

# Register routes
from routes import init_routes
init_routes(app)

# Initialize database (runs on import, including gunicorn)
from db.init_db import init_database
init_database()

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000, use_reloader=False)
