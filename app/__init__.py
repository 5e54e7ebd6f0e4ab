from flask import Flask, jsonify
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException
from .extensions import db, login_manager, rq
from .errors import ScoringError

migrate = Migrate()


def create_app(config_object='config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    rq.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        from .models.user import User
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "unauthorized", "message": "login required"}), 401

    from .blueprints.auth import bp as auth_bp
    from .blueprints.criteria import bp as criteria_bp
    from .blueprints.evaluations import bp as evaluations_bp
    from .blueprints.ranking import bp as ranking_bp
    from .blueprints.interviewers import bp as interviewers_bp
    from .api.evaluate import bp as evaluate_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(criteria_bp, url_prefix="/criteria")
    app.register_blueprint(evaluations_bp, url_prefix="/applications")
    app.register_blueprint(ranking_bp, url_prefix="/ranking")
    app.register_blueprint(interviewers_bp, url_prefix="/interviewers")
    app.register_blueprint(evaluate_bp, url_prefix="/api/evaluate")

    @app.errorhandler(ScoringError)
    def handle_scoring_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.name.lower().replace(" ", "_"), "message": e.description}), e.code

    @app.get('/health')
    def health():
        return jsonify({"status": "ok"})

    return app
