from jobmatch.routes.auth import bp as auth_bp
from jobmatch.routes.health import bp as health_bp
from jobmatch.routes.jobs import bp as jobs_bp
from jobmatch.routes.payments import bp as payments_bp
from jobmatch.routes.resumes import bp as resumes_bp
from jobmatch.routes.webhooks import bp as webhooks_bp


def register_blueprints(app):
    for blueprint in (auth_bp, health_bp, jobs_bp, payments_bp, resumes_bp, webhooks_bp):
        app.register_blueprint(blueprint)
