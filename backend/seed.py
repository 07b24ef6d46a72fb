#!/usr/bin/env python3
"""
Reset the database and load demo accounts, jobs and proposals.

    python -m backend.seed

Every demo account uses the password `password123` and is pre-verified.
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from backend.app.config import load_settings
from backend.app.database import build_engine, build_session_factory, init_db
from backend.app.models import Job, JobStatus, Message, Profile, Proposal, ProposalStatus, Review, Role, User
from backend.app.utils.security import hash_password

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"


def _user(db: Session, *, name: str, email: str, role: Role, password_hash: str, **profile) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=password_hash,
        role=role,
        active=True,
        email_verified=True,
    )
    user.profile = Profile(**profile)
    db.add(user)
    return user


def seed(db: Session) -> dict:
    logger.info("Clearing existing data...")
    for model in (Review, Message, Proposal, Job, Profile, User):
        db.query(model).delete()
    db.commit()

    logger.info("Creating users...")
    hashed = hash_password(DEMO_PASSWORD)
    admin = _user(db, name="Admin User", email="admin@flowpartner.com", role=Role.ADMIN, password_hash=hashed)
    owner = _user(
        db,
        name="John Business",
        email="john@business.com",
        role=Role.BUSINESS_OWNER,
        password_hash=hashed,
        business_name="John's Plumbing Services",
        website="https://johnsplumbing.com",
        location="Austin, TX",
    )
    designer = _user(
        db,
        name="Sarah Designer",
        email="sarah@freelance.com",
        role=Role.FREELANCER,
        password_hash=hashed,
        niche="Web Design & Development",
        skills="HTML, CSS, JavaScript, React, Figma",
        bio="Web designer building responsive websites for small businesses.",
    )
    marketer = _user(
        db,
        name="Mike AdsPro",
        email="mike@freelance.com",
        role=Role.FREELANCER,
        password_hash=hashed,
        niche="Digital Marketing & Advertising",
        skills="Facebook Ads, Google Ads, SEO, Analytics",
        bio="Digital marketing specialist for local businesses.",
    )
    db.flush()

    logger.info("Creating jobs...")
    now = datetime.now(timezone.utc)
    ads_job = Job(
        owner_id=owner.id,
        title="Setup Facebook Ads Campaign for Plumbing Business",
        description=(
            "Set up and manage a Facebook Ads campaign generating leads for a plumbing business "
            "in Austin, TX. Weekly reports on ad spend and leads."
        ),
        category="ads",
        budget_min=800,
        budget_max=1500,
        deadline=now + timedelta(days=30),
        status=JobStatus.OPEN,
    )
    site_job = Job(
        owner_id=owner.id,
        title="Build Professional Website for Local Service Business",
        description=(
            "A 5-7 page mobile-responsive website (Home, About, Services, Testimonials, Contact) "
            "that is easy to update."
        ),
        category="website",
        budget_min=1200,
        budget_max=2500,
        deadline=now + timedelta(days=45),
        status=JobStatus.OPEN,
    )
    db.add_all([ads_job, site_job])
    db.flush()

    logger.info("Creating proposals...")
    db.add_all([
        Proposal(
            job_id=ads_job.id,
            freelancer_id=marketer.id,
            message="I run ad campaigns for local service businesses and send weekly reports.",
            proposed_price=1200,
            status=ProposalStatus.PENDING,
        ),
        Proposal(
            job_id=site_job.id,
            freelancer_id=designer.id,
            message="I can deliver a WordPress site with SEO basics and a lead form within 3 weeks.",
            proposed_price=1800,
            status=ProposalStatus.PENDING,
        ),
    ])
    db.commit()

    return {
        "admin": admin.email,
        "business_owner": owner.email,
        "freelancers": [designer.email, marketer.email],
        "jobs": 2,
        "proposals": 2,
    }


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    settings = load_settings()
    engine = build_engine(settings.database_url)
    init_db(engine)
    session_factory = build_session_factory(engine)

    with session_factory() as db:
        summary = seed(db)

    logger.info("Seed data created successfully")
    logger.info("Test accounts (password: %s):", DEMO_PASSWORD)
    logger.info("  Admin: %s", summary["admin"])
    logger.info("  Business Owner: %s", summary["business_owner"])
    for email in summary["freelancers"]:
        logger.info("  Freelancer: %s", email)


if __name__ == "__main__":
    main()
