# qrfeedback/__init__.py

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .extensions import db, cors, init_redis
from .utils.error_handler import register_error_handlers


def create_app(overrides: dict | None = None) -> Flask:
    from .config import Config
    from .routes.auth_routes import auth_bp
    from .routes.core_routes import core_bp
    from .routes.form_routes import form_bp
    from .routes.feedback_routes import feedback_bp
    from .routes.subscription_routes import subscription_bp
    from .routes.checkout_routes import checkout_bp

    app = Flask(__name__)

    # Load configuration
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    # Initialize extensions
    cors.init_app(app)
    db.init_app(app)
    init_redis(app)

    # Fix proxy headers
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)

    register_error_handlers(app)

    # Register blueprints
    app.register_blueprint(core_bp)
    app.register_blueprint(auth_bp, url_prefix="/")
    app.register_blueprint(form_bp, url_prefix="/")
    app.register_blueprint(feedback_bp, url_prefix="/")
    app.register_blueprint(subscription_bp, url_prefix="/subscription")
    app.register_blueprint(checkout_bp, url_prefix="/api")

    # Create tables if not exists
    with app.app_context():
        from .models.profile import Profile  # noqa: F401
        from .models.form import Form  # noqa: F401
        from .models.response import FeedbackResponse  # noqa: F401
        from .models.webhook_events import WebhookEvent  # noqa: F401
        db.create_all()

    return app
