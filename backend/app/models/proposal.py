from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .enums import ProposalStatus


class Proposal(Base):
    __tablename__ = "proposals"
    __table_args__ = (
        UniqueConstraint("job_id", "freelancer_id", name="uq_proposals_job_freelancer"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    freelancer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    proposed_price = Column(Float, nullable=False)
    status = Column(
        Enum(ProposalStatus, native_enum=False, length=20),
        nullable=False,
        default=ProposalStatus.PENDING,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    job = relationship("Job", back_populates="proposals")
    freelancer = relationship("User", back_populates="proposals")
