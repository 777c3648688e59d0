from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from jobmatch.errors import NotFound, ValidationError
from jobmatch.extensions import db
from jobmatch.models import Job
from jobmatch.routes.resumes import latest_resume
from jobmatch.security.context import current_context
from jobmatch.services.enhancer import enhance_job_description
from jobmatch.services.matching import find_matches

bp = Blueprint("jobs", __name__, url_prefix="/api/jobs")

MAX_MATCHES = 20


def parse_requirements(value):
    """Accept a list or a comma separated string; drop blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        raise ValidationError("requirements must be a list or comma separated string")
    return [str(item).strip() for item in value if str(item).strip()]


@bp.post("")
@jwt_required()
def post_job():
    ctx = current_context()
    data = request.get_json(silent=True) or {}

    title = (data.get("title") or "").strip()
    description = (data.get("description") or "").strip()
    if not title or not description:
        raise ValidationError("title and description are required")

    job = Job(
        employer_id=ctx.user_id,
        title=title,
        description=enhance_job_description(title, description),
        requirements=parse_requirements(data.get("requirements")),
        salary_range=(data.get("salary_range") or "").strip(),
        location=(data.get("location") or "").strip(),
    )
    db.session.add(job)
    db.session.commit()

    current_app.logger.info(f"Job {job.id} posted by {ctx.user_id}")
    return jsonify(job.to_dict()), 201


@bp.get("")
def list_jobs():
    jobs = Job.query.order_by(Job.boosted.desc(), Job.created_at.desc()).all()
    return jsonify({"jobs": [job.to_dict() for job in jobs]}), 200


@bp.get("/matches")
@jwt_required()
def job_matches():
    ctx = current_context()
    resume = latest_resume(ctx.user_id)
    if resume is None:
        raise NotFound("Please upload your resume first")

    limit = request.args.get("limit", default=3, type=int)
    if limit < 1 or limit > MAX_MATCHES:
        raise ValidationError(f"limit must be between 1 and {MAX_MATCHES}")

    jobs = [job.to_dict() for job in Job.query.order_by(Job.created_at.desc()).all()]
    matches = find_matches(resume.skills, jobs, limit=limit)

    return jsonify({
        "resume_id": resume.id,
        "skills": resume.skills,
        "matches": matches,
    }), 200
