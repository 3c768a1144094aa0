"""
Database models package.
"""

from app.models.candidate import Candidate
from app.models.interview import Interview, InterviewStatus, Answer
from app.models.evaluation import Evaluation
from app.models.invitation import Invitation, InvitationStatus
from app.models.user import User, UserRole
from app.models.app_setting import AppSetting

__all__ = [
    "Candidate",
    "Interview",
    "InterviewStatus",
    "Answer",
    "Evaluation",
    "Invitation",
    "InvitationStatus",
    "User",
    "UserRole",
    "AppSetting",
]
