from flask import Flask, jsonify, request, g
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix
import os
import logging
import time
import sys

from config import Config
from database import make_engine, make_session_factory, init_db
from models.corpus import load_corpus
from routes.bible import bible_bp
from routes.session import session_bp
from routes.subscribers import subscribers_bp
from utils.broadcast import VerseBroadcaster
from utils.delivery import TelegramSender
from utils.formatter import ResultFormatter
from utils.search import BibleSearchEngine
from utils.sessions import InMemorySessionStore
from utils.subscribers import SubscriberStore

# Configure logging to output to stdout
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def create_app(config_object=Config, corpus=None, session_store=None, subscriber_store=None,
               sender=None, start_scheduler=True):
    """Build the Flask app around one shared, read-only corpus.

    The corpus is loaded before anything else; a ``CorpusLoadError`` aborts startup.
    """
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Use ProxyFix to handle proxy headers properly
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    app.json.sort_keys = False  # Preserve order of keys in JSON responses
    app.json.ensure_ascii = False
    app.config['CORS_HEADERS'] = 'Content-Type'

    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
        }
    })

    # Ensure URLs with or without trailing slashes are handled the same way
    app.url_map.strict_slashes = False

    if corpus is None:
        corpus = load_corpus(config_object.CORPUS_PATH, config_object.NEW_TESTAMENT_START)

    engine = BibleSearchEngine.from_config(corpus, config_object)
    app.extensions['search_engine'] = engine
    app.extensions['result_formatter'] = ResultFormatter.from_config(config_object)
    app.extensions['session_store'] = session_store or InMemorySessionStore()

    if subscriber_store is None:
        db_engine = make_engine(config_object.DATABASE_URL)
        init_db(db_engine)
        subscriber_store = SubscriberStore(make_session_factory(db_engine))
    app.extensions['subscriber_store'] = subscriber_store

    if sender is None and config_object.TELEGRAM_BOT_TOKEN:
        sender = TelegramSender.from_config(config_object)
    if sender is not None:
        broadcaster = VerseBroadcaster.from_config(engine, subscriber_store, sender, config_object)
        app.extensions['broadcaster'] = broadcaster
        if start_scheduler:
            broadcaster.start()
    else:
        logger.warning("TELEGRAM_BOT_TOKEN not set, scheduled broadcasts are disabled")

    # Register blueprints
    app.register_blueprint(bible_bp, url_prefix='/api/bible')
    app.register_blueprint(session_bp, url_prefix='/api/session')
    app.register_blueprint(subscribers_bp)

    @app.before_request
    def before_request():
        g.start_time = time.time()

    @app.after_request
    def after_request(response):
        # Log request duration
        duration = time.time() - g.start_time
        logger.info(f"Request to {request.path} took {duration:.2f} seconds")
        return response

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint that also reports corpus size"""
        return jsonify({
            'status': 'healthy',
            'books': len(engine.corpus),
            'broadcasts': 'enabled' if 'broadcaster' in app.extensions else 'disabled',
            'timestamp': time.time()
        })

    return app


if __name__ == '__main__':
    print("Starting Flask server...")
    port = int(os.getenv('PORT', 5001))
    create_app().run(debug=True, port=port, use_reloader=False)
