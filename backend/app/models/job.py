from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .enums import JobStatus


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(150), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    budget_min = Column(Float, nullable=False)
    budget_max = Column(Float, nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=False)
    status = Column(Enum(JobStatus, native_enum=False, length=20), nullable=False, default=JobStatus.OPEN)
    # Set only when the owner selects a freelancer (job moves to IN_PROGRESS).
    chosen_freelancer_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User", back_populates="jobs_owned", foreign_keys=[owner_id])
    chosen_freelancer = relationship("User", foreign_keys=[chosen_freelancer_id])
    proposals = relationship("Proposal", back_populates="job", cascade="all, delete-orphan")
    messages = relationship("Message", back_populates="job", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="job", cascade="all, delete-orphan")
