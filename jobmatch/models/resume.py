import uuid
from datetime import datetime

from jobmatch.extensions import db


class Resume(db.Model):
    __tablename__ = "resumes"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    original_text = db.Column(db.Text, nullable=False)
    skills = db.Column(db.JSON, nullable=False, default=list)
    experience = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    rewrites = db.relationship("ResumeRewrite", backref="resume", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "original_text": self.original_text,
            "skills": list(self.skills or []),
            "experience": list(self.experience or []),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class ResumeRewrite(db.Model):
    __tablename__ = "resume_rewrites"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    resume_id = db.Column(db.String(36), db.ForeignKey("resumes.id"), nullable=False, index=True)
    improved_text = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "resume_id": self.resume_id,
            "improved_text": self.improved_text,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
