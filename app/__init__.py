import os

from flask import Flask, jsonify
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from .extensions import db, rq

migrate = Migrate()


def create_app(config_object='config.Config'):
    """App factory shared by the web process, RQ workers and tests."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    db.init_app(app)
    migrate.init_app(app, db)
    rq.init_app(app)

    from .api.applicants import bp as applicants_bp
    from .api.questions import bp as questions_bp
    from .api.templates import bp as templates_bp
    from .api.tenants import bp as tenants_bp
    app.register_blueprint(tenants_bp)
    app.register_blueprint(questions_bp)
    app.register_blueprint(templates_bp)
    app.register_blueprint(applicants_bp)

    @app.errorhandler(HTTPException)
    def json_http_error(e):
        return jsonify({"error": e.description}), e.code

    # alembic sets SKIP_CREATE_ALL so migrations own the schema there
    if not os.environ.get("SKIP_CREATE_ALL"):
        with app.app_context():
            from . import models  # noqa: F401
            db.create_all()

    @app.get('/healthz')
    def healthz():
        return jsonify({"status": "ok", "queue": "rq" if rq.queue else "sync"})

    return app
