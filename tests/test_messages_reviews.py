import pytest


@pytest.fixture()
def hired(client, make_user, make_job, make_proposal):
    """An IN_PROGRESS job: (owner, chosen freelancer, job)."""
    owner = make_user("BUSINESS_OWNER", name="John")
    freelancer = make_user("FREELANCER", name="Sarah")
    job = make_job(owner)
    make_proposal(freelancer, job)
    r = client.put(
        f"/jobs/{job['id']}/select-freelancer",
        json={"freelancerId": freelancer["id"]},
        headers=owner["headers"],
    )
    assert r.status_code == 200, r.text
    return owner, freelancer, job


def _send(client, user, job, text):
    return client.post("/messages", json={"job_id": job["id"], "text": text}, headers=user["headers"])


def test_participants_exchange_messages_in_order(client, hired):
    owner, freelancer, job = hired
    assert _send(client, owner, job, "Welcome aboard!").status_code == 201
    r = _send(client, freelancer, job, "Thanks, starting today.")
    assert r.status_code == 201, r.text
    assert r.json()["sender"]["name"] == "Sarah"

    r = client.get(f"/messages/job/{job['id']}", headers=freelancer["headers"])
    assert r.status_code == 200, r.text
    assert [m["text"] for m in r.json()] == ["Welcome aboard!", "Thanks, starting today."]
    assert client.get(f"/jobs/{job['id']}", headers=owner["headers"]).json()["counts"]["messages"] == 2


def test_admin_can_read_and_post_messages(client, hired, make_user):
    owner, freelancer, job = hired
    admin = make_user("ADMIN")
    assert _send(client, admin, job, "Moderator here.").status_code == 201
    assert client.get(f"/messages/job/{job['id']}", headers=admin["headers"]).status_code == 200


def test_outsiders_cannot_message(client, hired, make_user):
    owner, freelancer, job = hired
    outsider = make_user("FREELANCER")
    r = _send(client, outsider, job, "Hi?")
    assert r.status_code == 403, r.text
    assert r.json()["error"] == "Not authorized to message on this job"

    r = client.get(f"/messages/job/{job['id']}", headers=outsider["headers"])
    assert r.status_code == 403, r.text
    assert r.json()["error"] == "Not authorized to view messages for this job"


def test_rejected_proposer_cannot_message(client, make_user, make_job, make_proposal):
    owner = make_user("BUSINESS_OWNER")
    chosen = make_user("FREELANCER")
    rejected = make_user("FREELANCER")
    job = make_job(owner)
    make_proposal(chosen, job)
    make_proposal(rejected, job)
    client.put(f"/jobs/{job['id']}/select-freelancer", json={"freelancerId": chosen["id"]}, headers=owner["headers"])

    assert _send(client, rejected, job, "What about me?").status_code == 403


def test_owner_can_message_before_selection(client, make_user, make_job):
    owner = make_user("BUSINESS_OWNER")
    job = make_job(owner)
    assert _send(client, owner, job, "Note to self").status_code == 201


def test_message_validation(client, hired):
    owner, freelancer, job = hired
    assert _send(client, owner, job, "").status_code == 400
    assert client.post("/messages", json={"text": "no job"}, headers=owner["headers"]).status_code == 400
    r = client.post("/messages", json={"job_id": 777, "text": "Hello"}, headers=owner["headers"])
    assert r.status_code == 404, r.text


def test_review_counterparty_once(client, hired):
    owner, freelancer, job = hired
    body = {"job_id": job["id"], "to_user_id": freelancer["id"], "rating": 5, "comment": "Excellent"}

    r = client.post("/reviews", json=body, headers=owner["headers"])
    assert r.status_code == 201, r.text
    review = r.json()
    assert review["from_user"]["name"] == "John"
    assert review["to_user"]["name"] == "Sarah"

    r = client.post("/reviews", json=body, headers=owner["headers"])
    assert r.status_code == 409, r.text
    assert r.json()["error"] == "You have already reviewed this user for this job"

    # The other direction is a separate review.
    r = client.post(
        "/reviews",
        json={"job_id": job["id"], "to_user_id": owner["id"], "rating": 4},
        headers=freelancer["headers"],
    )
    assert r.status_code == 201, r.text


def test_review_rating_bounds(client, hired):
    owner, freelancer, job = hired
    for rating in (0, 6, 3.5):
        r = client.post(
            "/reviews",
            json={"job_id": job["id"], "to_user_id": freelancer["id"], "rating": rating},
            headers=owner["headers"],
        )
        assert r.status_code == 400, r.text
        assert r.json()["error"] == "Rating must be between 1 and 5"


def test_review_must_target_other_participant(client, hired, make_user):
    owner, freelancer, job = hired
    bystander = make_user("FREELANCER")

    self_review = client.post(
        "/reviews",
        json={"job_id": job["id"], "to_user_id": owner["id"], "rating": 5},
        headers=owner["headers"],
    )
    assert self_review.status_code == 400, self_review.text

    wrong_target = client.post(
        "/reviews",
        json={"job_id": job["id"], "to_user_id": bystander["id"], "rating": 1},
        headers=owner["headers"],
    )
    assert wrong_target.status_code == 400, wrong_target.text


def test_non_participants_cannot_review(client, hired, make_user):
    owner, freelancer, job = hired
    outsider = make_user("FREELANCER")
    admin = make_user("ADMIN")
    for caller in (outsider, admin):
        r = client.post(
            "/reviews",
            json={"job_id": job["id"], "to_user_id": freelancer["id"], "rating": 1},
            headers=caller["headers"],
        )
        assert r.status_code == 403, r.text


def test_user_reviews_listing(client, hired):
    owner, freelancer, job = hired
    client.post(
        "/reviews",
        json={"job_id": job["id"], "to_user_id": freelancer["id"], "rating": 4, "comment": "Solid"},
        headers=owner["headers"],
    )
    r = client.get(f"/reviews/user/{freelancer['id']}", headers=owner["headers"])
    assert r.status_code == 200, r.text
    [review] = r.json()
    assert review["job"] == {"id": job["id"], "title": job["title"]}
    assert client.get(f"/reviews/user/{owner['id']}", headers=owner["headers"]).json() == []
