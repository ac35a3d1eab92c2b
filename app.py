# app.py
from flask import Flask, jsonify, request, g
from flask_cors import CORS
from routes.bible import bible_bp
from routes.bookmarks_routes import bookmarks_bp
from routes.chants_routes import chants_bp
from routes.miracles_routes import miracles_bp
from routes.saints_routes import saints_bp
from config import Config
from database import SessionLocal, check_connection, init_db
from services.model_client import ModelClient, set_model_client
from services.prompts import SUPPORTED_LANGUAGES
from utils.bookmark_store import make_storage_factory
import os
import logging
import time
import sys
from werkzeug.middleware.proxy_fix import ProxyFix

# Configure logging to output to stdout
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def create_app(config_object=Config, model_client=None, bookmark_storage_factory=None):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Use ProxyFix to handle proxy headers properly
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    app.json.sort_keys = False  # Preserve order of keys in JSON responses
    app.json.compact = True
    app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024  # requests are small JSON bodies

    CORS(app, resources={
        r"/api/*": {
            "origins": app.config['CORS_ORIGINS'],
            "methods": ["GET", "POST", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "X-Device-Id"],
        }
    })

    # Ensure URLs with or without trailing slashes are handled the same way
    app.url_map.strict_slashes = False

    # Model client shared by all services
    if model_client is None:
        model_client = ModelClient(
            api_key=app.config['ANTHROPIC_API_KEY'],
            model=app.config['MODEL_NAME'],
            max_tokens=app.config['MODEL_MAX_TOKENS'],
            timeout=app.config['MODEL_TIMEOUT'],
            max_retries=app.config['MODEL_MAX_RETRIES'],
            web_search=app.config['MIRACLE_WEB_SEARCH'],
        )
    set_model_client(model_client)

    # Bookmark persistence
    backend = app.config['BOOKMARK_BACKEND']
    if bookmark_storage_factory is None:
        if backend == 'sql':
            try:
                init_db()
            except Exception as e:
                logger.error(f"Error initializing bookmark tables: {str(e)}")
                raise
        bookmark_storage_factory = make_storage_factory(
            backend,
            file_dir=app.config.get('BOOKMARK_FILE_DIR'),
            session_factory=SessionLocal,
        )
    app.extensions['bookmark_storage_factory'] = bookmark_storage_factory
    logger.info(f"Bookmarks stored with the '{backend}' backend")

    # Register blueprints
    app.register_blueprint(saints_bp, url_prefix='/api/saints')
    app.register_blueprint(bible_bp, url_prefix='/api/bible')
    app.register_blueprint(miracles_bp, url_prefix='/api/miracles')
    app.register_blueprint(chants_bp, url_prefix='/api/chants')
    app.register_blueprint(bookmarks_bp)

    @app.before_request
    def before_request():
        g.start_time = time.time()

    @app.after_request
    def after_request(response):
        # Log request duration
        duration = time.time() - g.get('start_time', time.time())
        logger.info(f"Request to {request.path} took {duration:.2f} seconds")
        return response

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint that also verifies the database connection"""
        db_ok = check_connection() if app.config['BOOKMARK_BACKEND'] == 'sql' else True
        status = 200 if db_ok else 500
        return jsonify({
            'status': 'healthy' if db_ok else 'unhealthy',
            'database': 'connected' if db_ok else 'error',
            'timestamp': time.time()
        }), status

    @app.route('/api/capabilities', methods=['GET'])
    def capabilities():
        return jsonify({
            'languages': list(SUPPORTED_LANGUAGES),
            'saint_images': False,  # no image model on this provider
            'miracle_web_search': bool(app.config['MIRACLE_WEB_SEARCH']),
            'suggestions': {
                'min_length': app.config['SUGGESTION_MIN_LENGTH'],
                'quiet_period_ms': int(app.config['SUGGESTION_QUIET_PERIOD'] * 1000),
                'limit': app.config['SUGGESTION_LIMIT'],
            },
        })

    return app


if __name__ == '__main__':
    print("Starting Flask server...")
    port = int(os.getenv('PORT', 5001))
    create_app().run(debug=True, port=port)
