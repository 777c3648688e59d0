from jobmatch.models.user import User
from jobmatch.models.job import Job
from jobmatch.models.resume import Resume, ResumeRewrite
from jobmatch.models.payment import Payment

__all__ = ["User", "Job", "Resume", "ResumeRewrite", "Payment"]
