from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .enums import Role


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(Role, native_enum=False, length=20), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    verification_token = Column(String(64), unique=True, index=True, nullable=True)
    verification_expires = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    jobs_owned = relationship("Job", back_populates="owner", foreign_keys="Job.owner_id")
    proposals = relationship("Proposal", back_populates="freelancer")
    messages = relationship("Message", back_populates="sender")
    reviews_given = relationship("Review", back_populates="from_user", foreign_keys="Review.from_user_id")
    reviews_received = relationship("Review", back_populates="to_user", foreign_keys="Review.to_user_id")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    # Business owner fields
    business_name = Column(String(255), nullable=True)
    website = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    # Freelancer fields
    niche = Column(String(255), nullable=True)
    skills = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="profile")
