import uuid
from datetime import datetime

from jobmatch.extensions import db


class Job(db.Model):
    __tablename__ = "jobs"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employer_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    requirements = db.Column(db.JSON, nullable=False, default=list)
    salary_range = db.Column(db.String(100), default="")
    location = db.Column(db.String(200), default="")
    boosted = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.Index("idx_job_boosted_created", "boosted", "created_at"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "employer_id": self.employer_id,
            "title": self.title,
            "description": self.description,
            "requirements": list(self.requirements or []),
            "salary_range": self.salary_range,
            "location": self.location,
            "boosted": self.boosted,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
