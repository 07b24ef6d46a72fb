"""
End-to-end marketplace walk-through on the demo data: a business owner hires a
freelancer, they talk, the job is completed and both sides leave reviews.
"""
import pytest

from backend.seed import DEMO_PASSWORD, seed
from conftest import auth_headers


@pytest.fixture()
def seeded(db_session):
    return seed(db_session)


def _login(client, email):
    r = client.post("/auth/login", json={"email": email, "password": DEMO_PASSWORD})
    assert r.status_code == 200, r.text
    data = r.json()
    return data["user"], auth_headers(data["token"])


def test_seed_is_repeatable(db_session, client):
    first = seed(db_session)
    second = seed(db_session)
    assert first == second
    admin, headers = _login(client, "admin@flowpartner.com")
    assert admin["role"] == "ADMIN"
    assert len(client.get("/admin/users", headers=headers).json()) == 4
    assert len(client.get("/admin/jobs", headers=headers).json()) == 2


def test_hire_talk_complete_review(client, seeded):
    john, john_h = _login(client, "john@business.com")
    sarah, sarah_h = _login(client, "sarah@freelance.com")
    mike, mike_h = _login(client, "mike@freelance.com")

    # Sarah browses open work and bids on the ads job too.
    feed = client.get("/jobs", params={"status": "OPEN"}, headers=sarah_h).json()
    ads = next(j for j in feed if j["category"] == "ads")
    r = client.post(
        "/proposals",
        json={"job_id": ads["id"], "message": "I also run ads.", "proposed_price": 1400},
        headers=sarah_h,
    )
    assert r.status_code == 201, r.text

    # John compares both bids and hires Sarah.
    bids = client.get(f"/proposals/job/{ads['id']}", headers=john_h).json()
    assert {b["freelancer"]["id"] for b in bids} == {sarah["id"], mike["id"]}
    r = client.put(f"/jobs/{ads['id']}/select-freelancer", json={"freelancerId": sarah["id"]}, headers=john_h)
    assert r.status_code == 200, r.text

    mine = {p["job_id"]: p["status"] for p in client.get("/proposals/my-proposals", headers=mike_h).json()}
    assert mine[ads["id"]] == "REJECTED"

    # Chat is limited to the two of them.
    assert client.post("/messages", json={"job_id": ads["id"], "text": "Kickoff Monday?"}, headers=john_h).status_code == 201
    assert client.post("/messages", json={"job_id": ads["id"], "text": "Works for me."}, headers=sarah_h).status_code == 201
    assert client.get(f"/messages/job/{ads['id']}", headers=mike_h).status_code == 403

    # Sarah finishes and rates John; John rates Sarah afterwards.
    r = client.put(f"/jobs/{ads['id']}/complete", json={"rating": 5, "comment": "Clear brief"}, headers=sarah_h)
    assert r.status_code == 200, r.text
    assert r.json()["review"]["to_user_id"] == john["id"]

    r = client.post(
        "/reviews",
        json={"job_id": ads["id"], "to_user_id": sarah["id"], "rating": 4, "comment": "Good results"},
        headers=john_h,
    )
    assert r.status_code == 201, r.text

    sarah_public = client.get(f"/users/{sarah['id']}", headers=mike_h).json()
    assert sarah_public["rating"] == {"count": 1, "average": 4.0}
    john_public = client.get(f"/users/{john['id']}", headers=mike_h).json()
    assert john_public["reviews_received"][0]["comment"] == "Clear brief"

    # A completed job takes no more proposals or lifecycle changes.
    r = client.post(
        "/proposals",
        json={"job_id": ads["id"], "message": "Late bid", "proposed_price": 100},
        headers=mike_h,
    )
    assert r.status_code == 400, r.text
    assert client.put(f"/jobs/{ads['id']}", json={"status": "CANCELLED"}, headers=john_h).status_code == 400


def test_seeded_ads_job_select_and_complete_leaves_one_review(client, seeded):
    john, john_h = _login(client, "john@business.com")
    mike, mike_h = _login(client, "mike@freelance.com")

    [ads] = client.get("/jobs", params={"category": "ads"}).json()
    assert (ads["budget_min"], ads["budget_max"]) == (800, 1500)
    [bid] = client.get(f"/proposals/job/{ads['id']}", headers=john_h).json()
    assert bid["freelancer"]["id"] == mike["id"]
    assert bid["proposed_price"] == 1200

    r = client.put(f"/jobs/{ads['id']}/select-freelancer", json={"freelancerId": mike["id"]}, headers=john_h)
    assert r.status_code == 200, r.text
    r = client.put(f"/jobs/{ads['id']}/complete", json={"rating": 5}, headers=john_h)
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "COMPLETED"

    reviews = client.get(f"/reviews/user/{mike['id']}", headers=mike_h).json()
    assert [(rv["rating"], rv["from_user_id"]) for rv in reviews] == [(5, john["id"])]
