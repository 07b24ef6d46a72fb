from datetime import datetime, timezone

import pytest

from backend.app.models import Job, JobStatus, ProposalStatus, Role
from backend.app.utils.dependencies import CurrentUser
from backend.app.utils.error_handlers import ForbiddenError, ValidationError
from backend.app.utils.permissions import (
    JobRelation,
    ensure_can_manage_job,
    ensure_can_message,
    ensure_participant,
    job_relation,
)
from backend.app.utils.security import as_utc, generate_verification_token, hash_password, verify_password
from backend.app.utils.validation import (
    parse_deadline,
    validate_email,
    validate_integer_field,
    validate_job_status,
    validate_number_field,
    validate_password,
    validate_proposal_status,
    validate_rating,
    validate_signup_role,
    validate_string_field,
)


def test_valid_email_is_normalized():
    assert validate_email("  Test@Example.COM ") == "test@example.com"


@pytest.mark.parametrize("email", ["", "notanemail", "user@", "@example.com", None, 42])
def test_invalid_email(email):
    with pytest.raises(ValidationError):
        validate_email(email)


def test_password_rules():
    validate_password("secret")
    with pytest.raises(ValidationError, match="at least 6"):
        validate_password("12345")
    with pytest.raises(ValidationError, match="72 bytes"):
        validate_password("é" * 40)


def test_string_field_rules():
    assert validate_string_field("  hello  ", "Title") == "hello"
    assert validate_string_field(None, "Bio", required=False) is None
    with pytest.raises(ValidationError, match="cannot be empty"):
        validate_string_field("   ", "Title")
    with pytest.raises(ValidationError, match="must not exceed 5"):
        validate_string_field("toolong", "Title", max_length=5)


def test_number_field_rules():
    assert validate_number_field("12.5", "price", min_value=0) == 12.5
    for bad in ("abc", True, float("nan"), 0, -1):
        with pytest.raises(ValidationError):
            validate_number_field(bad, "price", min_value=0)


def test_integer_field_rules():
    assert validate_integer_field("7", "id") == 7
    with pytest.raises(ValidationError):
        validate_integer_field("seven", "id")
    with pytest.raises(ValidationError):
        validate_integer_field(False, "id")


def test_rating_accepts_whole_stars_only():
    assert validate_rating(5) == 5
    assert validate_rating(4.0) == 4
    for bad in (0, 6, 2.5, "x"):
        with pytest.raises(ValidationError, match="between 1 and 5"):
            validate_rating(bad)


def test_signup_role_excludes_admin():
    assert validate_signup_role("freelancer") is Role.FREELANCER
    assert validate_signup_role("BUSINESS_OWNER") is Role.BUSINESS_OWNER
    with pytest.raises(ValidationError):
        validate_signup_role("ADMIN")


def test_status_parsers():
    assert validate_job_status("in_progress") is JobStatus.IN_PROGRESS
    assert validate_proposal_status("Rejected") is ProposalStatus.REJECTED
    with pytest.raises(ValidationError):
        validate_job_status("DONE")
    with pytest.raises(ValidationError):
        validate_proposal_status(None)


def test_parse_deadline_is_utc():
    assert parse_deadline("2030-03-15") == datetime(2030, 3, 15, tzinfo=timezone.utc)
    assert parse_deadline("2030-03-15T10:00:00Z").hour == 10
    with pytest.raises(ValidationError):
        parse_deadline("soon")


def test_password_hashing_roundtrip():
    hashed = hash_password("password123")
    assert hashed != "password123"
    assert verify_password("password123", hashed)
    assert not verify_password("password124", hashed)
    assert not verify_password("password123", "not-a-bcrypt-hash")


def test_verification_tokens_are_unique_and_expire_in_a_day():
    token_a, expires = generate_verification_token()
    token_b, _ = generate_verification_token()
    assert token_a != token_b and len(token_a) == 64
    hours = (expires - datetime.now(timezone.utc)).total_seconds() / 3600
    assert 23.9 < hours <= 24


def test_as_utc_handles_naive_values():
    naive = datetime(2030, 1, 1, 12, 0)
    assert as_utc(naive).tzinfo is timezone.utc
    assert as_utc(None) is None


OWNER = CurrentUser(id=1, email="owner@example.com", role=Role.BUSINESS_OWNER)
CHOSEN = CurrentUser(id=2, email="chosen@example.com", role=Role.FREELANCER)
OTHER = CurrentUser(id=3, email="other@example.com", role=Role.FREELANCER)
ADMIN = CurrentUser(id=4, email="admin@example.com", role=Role.ADMIN)


def _job(chosen_id=None) -> Job:
    return Job(id=10, owner_id=OWNER.id, chosen_freelancer_id=chosen_id, status=JobStatus.OPEN)


def test_job_relation_table():
    job = _job(chosen_id=CHOSEN.id)
    assert job_relation(OWNER, job) is JobRelation.OWNER
    assert job_relation(CHOSEN, job) is JobRelation.CHOSEN_FREELANCER
    assert job_relation(ADMIN, job) is JobRelation.ADMIN
    assert job_relation(OTHER, job) is JobRelation.NONE


def test_admin_owning_a_job_acts_as_owner():
    admin_owner = CurrentUser(id=OWNER.id, email="boss@example.com", role=Role.ADMIN)
    assert job_relation(admin_owner, _job()) is JobRelation.OWNER


def test_permission_guards():
    job = _job(chosen_id=CHOSEN.id)

    assert ensure_can_manage_job(ADMIN, job) is JobRelation.ADMIN
    with pytest.raises(ForbiddenError):
        ensure_can_manage_job(CHOSEN, job)

    assert ensure_participant(CHOSEN, job) is JobRelation.CHOSEN_FREELANCER
    with pytest.raises(ForbiddenError):
        ensure_participant(ADMIN, job)

    assert ensure_can_message(ADMIN, job) is JobRelation.ADMIN
    with pytest.raises(ForbiddenError, match="Not authorized to message on this job"):
        ensure_can_message(OTHER, job)


def test_open_job_has_no_chosen_participant():
    job = _job()
    with pytest.raises(ForbiddenError):
        ensure_participant(OTHER, job)
