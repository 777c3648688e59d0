from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from jobmatch.errors import NotFound, ValidationError
from jobmatch.extensions import db
from jobmatch.middleware.premium import premium_required
from jobmatch.models import Resume, ResumeRewrite
from jobmatch.security.context import current_context
from jobmatch.services.enhancer import rewrite_resume
from jobmatch.services.resume_parser import parse_resume_text, read_upload

bp = Blueprint("resumes", __name__, url_prefix="/api/resumes")


def latest_resume(user_id):
    return (
        Resume.query
        .filter_by(user_id=user_id)
        .order_by(Resume.created_at.desc())
        .first()
    )


@bp.post("")
@jwt_required()
def upload_resume():
    """Accept a resume as a multipart ``file`` or JSON ``text`` and parse it."""
    ctx = current_context()

    upload = request.files.get("file")
    if upload is not None:
        text = read_upload(upload.filename, upload.read())
    else:
        text = ((request.get_json(silent=True) or {}).get("text") or "").strip()
        if not text:
            raise ValidationError("Provide a resume file or text")

    parsed = parse_resume_text(text)
    resume = Resume(
        user_id=ctx.user_id,
        original_text=text,
        skills=parsed["skills"],
        experience=parsed["experience"],
    )
    db.session.add(resume)
    db.session.commit()

    current_app.logger.info(
        f"Resume {resume.id} parsed for user {ctx.user_id}",
        extra={"skills": len(parsed["skills"]), "experience": len(parsed["experience"])},
    )
    return jsonify(resume.to_dict()), 201


@bp.get("/latest")
@jwt_required()
def get_latest_resume():
    resume = latest_resume(current_context().user_id)
    if resume is None:
        raise NotFound("Please upload your resume first")
    return jsonify(resume.to_dict()), 200


@bp.post("/<resume_id>/rewrite")
@jwt_required()
@premium_required
def rewrite(resume_id):
    ctx = current_context()
    resume = db.session.get(Resume, resume_id)
    if resume is None or resume.user_id != ctx.user_id:
        raise NotFound("Resume not found")

    improved = ResumeRewrite(
        resume_id=resume.id,
        improved_text=rewrite_resume(resume.original_text, resume.skills, resume.experience),
    )
    db.session.add(improved)
    db.session.commit()

    return jsonify(improved.to_dict()), 201
