"""Flask application factory."""
from flask import Flask, request, jsonify
import os


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Error tracking in production
    if os.getenv('SENTRY_DSN') and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=os.getenv('SENTRY_DSN'),
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            environment=app.config.get('ENV'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Prometheus metrics instrumentation
    from retail_panel.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Production: Enable ProxyFix for HTTPS behind a reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=0)

    # Backend client factory and per-operator session registry
    from retail_panel.services.api_client import PanelApiClient
    from retail_panel.services.panel_session_service import SessionRegistry

    app.extensions['panel_api_factory'] = lambda: PanelApiClient.from_config(app.config)
    app.extensions['panel_sessions'] = SessionRegistry(
        confirm_message=app.config.get('ORDER_DELETE_CONFIRM_MESSAGE', 'Delete order?'),
        idle_seconds=app.config.get('PANEL_SESSION_IDLE_SECONDS', 86400),
    )

    from retail_panel.middleware import load_panel_session

    @app.before_request
    def before_request_handler():
        """Load the operator's panel session for each request."""
        load_panel_session()

    # Error Handlers
    from retail_panel.exceptions import PanelError

    @app.errorhandler(PanelError)
    def handle_panel_error(error):
        """Handle custom application exceptions."""
        app.logger.error(f"PanelError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'status': 'error', 'message': 'Not Found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'status': 'error', 'message': 'Method Not Allowed'}), 405

    @app.errorhandler(500)
    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.error(f"Unhandled Exception on {request.path}: {error}", exc_info=True)
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from retail_panel.blueprints.orders import orders_bp
    from retail_panel.blueprints.metrics import metrics_bp

    app.register_blueprint(orders_bp)
    app.register_blueprint(metrics_bp)

    # Register CLI commands
    from retail_panel.cli_commands import init_cli_commands
    init_cli_commands(app)

    app.logger.info(f"API_BASE_URL={app.config.get('API_BASE_URL')}")

    return app
