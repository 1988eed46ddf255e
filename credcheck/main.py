import os
from datetime import datetime
from flask import Flask, jsonify
from flask_cors import CORS
from config.config import config
from credcheck.database import init_db
from credcheck.middleware.error_handler import register_error_handlers
from credcheck.routes import admin, auth, credentials, notifications, verifications
from credcheck.utils.logger import get_logger

logger = get_logger(__name__)


def create_app(config_name=None):
    """Application factory"""
    config_name = config_name or os.environ.get('FLASK_ENV', 'default')
    app_config = config.get(config_name, config['default'])

    app = Flask(__name__)
    app.config.from_object(app_config)

    CORS(app, resources={r"/api/*": {"origins": app_config.CORS_ORIGINS}})

    init_db()

    app.register_blueprint(auth.bp, url_prefix='/api/auth')
    app.register_blueprint(verifications.bp, url_prefix='/api/verifications')
    app.register_blueprint(credentials.bp, url_prefix='/api/credentials')
    app.register_blueprint(admin.bp, url_prefix='/api/admin')
    app.register_blueprint(notifications.bp, url_prefix='/api/notifications')

    @app.route('/api/health', methods=['GET'])
    def health():
        """Health check"""
        return jsonify({'status': 'healthy', 'timestamp': datetime.utcnow().isoformat()}), 200

    register_error_handlers(app)

    logger.info(f"CredCheck app created with {config_name} configuration")
    return app
