import enum


class Role(str, enum.Enum):
    BUSINESS_OWNER = "BUSINESS_OWNER"
    FREELANCER = "FREELANCER"
    ADMIN = "ADMIN"


# Roles a visitor may pick at signup. Admins are seeded, never self-registered.
SIGNUP_ROLES = (Role.BUSINESS_OWNER, Role.FREELANCER)


class JobStatus(str, enum.Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ProposalStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
