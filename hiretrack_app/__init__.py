"""
Flask application factory for HireTrack.
"""
import logging
import os
from flask import Flask, jsonify, render_template, request


def create_app(config_name='default'):
    """Create and configure the Flask application."""
    # Import these inside the function to avoid import-time side effects
    from hiretrack_app.config import config
    from hiretrack_app.extensions import login_manager, migrate
    from hiretrack_app.models import db, User

    app = Flask(__name__)

    # Load configuration
    config_class = config[config_name]
    app.config.from_object(config_class)
    if hasattr(config_class, 'init_app'):
        config_class.init_app(app)

    # Override database URL from environment at runtime
    database_url = os.environ.get('DATABASE_URL')
    if database_url and not app.config.get('TESTING'):
        app.config['SQLALCHEMY_DATABASE_URI'] = database_url

    # Handle PostgreSQL URL format from Heroku/Railway
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('postgres://'):
        app.config['SQLALCHEMY_DATABASE_URI'] = app.config['SQLALCHEMY_DATABASE_URI'].replace(
            'postgres://', 'postgresql://', 1
        )

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    logger = logging.getLogger(__name__)
    db_uri = app.config['SQLALCHEMY_DATABASE_URI']
    db_type = 'postgresql' if 'postgresql' in db_uri else 'sqlite' if 'sqlite' in db_uri else 'unknown'
    logger.info(f"Starting HireTrack ({config_name}, {db_type})")

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # Configure login manager
    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Please log in to access this page.'
    login_manager.login_message_category = 'info'

    @login_manager.user_loader
    def load_user(user_id):
        return User.active().filter_by(id=user_id).first()

    # Register blueprints
    from hiretrack_app.views import auth, dashboard
    from hiretrack_app.api import (
        auth_api, users_api, clients_api, job_orders_api, favorites_api, applicants_api,
        joborder_applicants_api, commissions_api, pipeline_api, logs_api, dashboard_api,
    )

    app.register_blueprint(auth.bp)
    app.register_blueprint(dashboard.bp)
    for module in (
        auth_api, users_api, clients_api, job_orders_api, favorites_api, applicants_api,
        joborder_applicants_api, commissions_api, pipeline_api, logs_api, dashboard_api,
    ):
        app.register_blueprint(module.bp)

    @app.errorhandler(404)
    def not_found(error):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Not found'}), 404
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Internal server error'}), 500
        return render_template('errors/500.html'), 500

    # Database initialization
    @app.before_request
    def ensure_tables():
        """Ensure database tables exist."""
        if not app.extensions.get('db_initialized'):
            db.create_all()
            app.extensions['db_initialized'] = True

    from hiretrack_app.commands import register_commands
    register_commands(app)

    return app


# NOTE: Do NOT create app at module level!
# Use wsgi.py as the entry point for gunicorn.
