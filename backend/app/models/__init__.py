from .enums import JobStatus, ProposalStatus, Role
from .job import Job
from .message import Message
from .proposal import Proposal
from .review import Review
from .user import Profile, User

__all__ = [
    "Job",
    "JobStatus",
    "Message",
    "Profile",
    "Proposal",
    "ProposalStatus",
    "Review",
    "Role",
    "User",
]
