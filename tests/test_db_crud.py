from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from backend.app.models import Job, JobStatus, Message, Profile, Proposal, ProposalStatus, Review, Role, User


def _user(db_session, email, role):
    user = User(email=email, password_hash="hashed", role=role, name=email.split("@")[0])
    user.profile = Profile()
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def test_db_crud_operations_and_relationships(db_session):
    owner = _user(db_session, "crud_owner@example.com", Role.BUSINESS_OWNER)
    freelancer = _user(db_session, "crud_freelancer@example.com", Role.FREELANCER)
    assert owner.active is True
    assert owner.email_verified is False
    assert owner.profile.user_id == owner.id

    job = Job(
        owner_id=owner.id,
        title="CRUD Job",
        description="A" * 20,
        category="website",
        budget_min=100,
        budget_max=200,
        deadline=datetime(2030, 1, 1, tzinfo=timezone.utc),
    )
    db_session.add(job)
    db_session.commit()
    db_session.refresh(job)
    assert job.status is JobStatus.OPEN
    assert job.owner.email == "crud_owner@example.com"
    assert job.created_at is not None

    proposal = Proposal(job_id=job.id, freelancer_id=freelancer.id, message="Hi", proposed_price=150)
    db_session.add(proposal)
    db_session.commit()
    db_session.refresh(proposal)
    assert proposal.status is ProposalStatus.PENDING
    assert proposal.job.id == job.id
    assert len(freelancer.proposals) == 1

    message = Message(job_id=job.id, sender_id=owner.id, text="Hello")
    review = Review(job_id=job.id, from_user_id=owner.id, to_user_id=freelancer.id, rating=5)
    db_session.add_all([message, review])
    db_session.commit()
    assert message.sender.id == owner.id
    assert [r.id for r in freelancer.reviews_received] == [review.id]
    assert [r.id for r in owner.reviews_given] == [review.id]


def test_unique_email(db_session):
    _user(db_session, "same@example.com", Role.FREELANCER)
    db_session.add(User(email="same@example.com", password_hash="h", role=Role.FREELANCER, name="Twin"))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_one_proposal_per_freelancer_per_job(db_session):
    owner = _user(db_session, "o@example.com", Role.BUSINESS_OWNER)
    freelancer = _user(db_session, "f@example.com", Role.FREELANCER)
    job = Job(
        owner_id=owner.id,
        title="Job",
        description="Description here",
        category="ads",
        budget_min=1,
        budget_max=2,
        deadline=datetime(2030, 1, 1, tzinfo=timezone.utc),
    )
    db_session.add(job)
    db_session.commit()

    db_session.add(Proposal(job_id=job.id, freelancer_id=freelancer.id, message="a", proposed_price=1))
    db_session.commit()
    db_session.add(Proposal(job_id=job.id, freelancer_id=freelancer.id, message="b", proposed_price=2))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_review_rating_is_checked_by_the_database(db_session):
    owner = _user(db_session, "o2@example.com", Role.BUSINESS_OWNER)
    freelancer = _user(db_session, "f2@example.com", Role.FREELANCER)
    job = Job(
        owner_id=owner.id,
        title="Job",
        description="Description here",
        category="ads",
        budget_min=1,
        budget_max=2,
        deadline=datetime(2030, 1, 1, tzinfo=timezone.utc),
    )
    db_session.add(job)
    db_session.commit()

    db_session.add(Review(job_id=job.id, from_user_id=owner.id, to_user_id=freelancer.id, rating=7))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()
