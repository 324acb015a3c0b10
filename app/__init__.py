import logging

from flask import Flask
from config import Config
from pymysql import connect
from .extensions import *
from .models import *
from .errors import register_error_handlers, register_jwt_handlers
from .routes.auth_routes import auth_bp
from .routes.application_routes import applications_bp
from .routes.calendar_routes import calendar_bp
from .routes.profile_routes import profile_bp
from .routes.dashboard_routes import dashboard_bp
from app.database.seed.seed_all import seed_all
from app.database.commands import init_db, ghost_sweep

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # Allow CORS from the frontend; the session cookie needs credentials
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}}, supports_credentials=True)

    if app.config.get("DB_HOST") and not app.config.get("TESTING"):
        create_database_if_not_exists(app.config)

    # extensions initialization
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    bcrypt.init_app(app)

    register_error_handlers(app)
    register_jwt_handlers()

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(applications_bp, url_prefix="/api/applications")
    app.register_blueprint(calendar_bp, url_prefix="/api/calendar-events")
    app.register_blueprint(profile_bp, url_prefix="/api")
    app.register_blueprint(dashboard_bp, url_prefix="/api")

    app.cli.add_command(seed_all)
    app.cli.add_command(init_db)
    app.cli.add_command(ghost_sweep)

    return app


def create_database_if_not_exists(config):
    host_parts = config["DB_HOST"].split(":")
    host = host_parts[0]
    port = int(host_parts[1]) if len(host_parts) > 1 else 3306

    logger.info(f"🔧 Ensuring database '{config['DB_NAME']}' exists on {host}:{port}")

    conn = connect(
        host=host,
        port=port,
        user=config["DB_USER"],
        password=config["DB_PASSWORD"] or "",
    )
    try:
        with conn.cursor() as cursor:
            cursor.execute(f"CREATE DATABASE IF NOT EXISTS `{config['DB_NAME']}`")
        conn.commit()
    finally:
        conn.close()
