import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3000"


class ApiError(RuntimeError):
    def __init__(self, *, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ApiClient:
    """Thin wrapper over the FlowPartner REST API; one method per endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        *,
        token: str | None = None,
        timeout_s: float = 15.0,
        http_client: httpx.Client | None = None,
    ):
        self.token = token
        self._client = http_client or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout_s)

    def close(self) -> None:
        self._client.close()

    def request(self, method: str, endpoint: str, *, json: Any = None, params: dict | None = None) -> Any:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if params:
            params = {k: v for k, v in params.items() if v not in (None, "")}

        try:
            r = self._client.request(method, endpoint, json=json, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.error("API request %s %s failed: %s", method, endpoint, e)
            raise ApiError(status_code=0, message=f"Could not reach the API: {type(e).__name__}") from e

        try:
            data = r.json()
        except ValueError:
            data = None

        if r.status_code >= 400:
            message = (data or {}).get("error") if isinstance(data, dict) else None
            raise ApiError(status_code=r.status_code, message=message or "Request failed")
        return data

    # Auth
    def signup(self, *, name: str, email: str, password: str, role: str) -> dict:
        return self.request("POST", "/auth/signup", json={"name": name, "email": email, "password": password, "role": role})

    def login(self, *, email: str, password: str) -> dict:
        return self.request("POST", "/auth/login", json={"email": email, "password": password})

    def logout(self) -> dict:
        return self.request("POST", "/auth/logout")

    def me(self) -> dict:
        return self.request("GET", "/auth/me")

    def verify_email(self, token: str) -> dict:
        return self.request("GET", f"/auth/verify-email/{token}")

    def resend_verification(self, email: str) -> dict:
        return self.request("POST", "/auth/resend-verification", json={"email": email})

    # Users / profiles
    def get_profile(self) -> dict:
        return self.request("GET", "/users/profile")

    def update_profile(self, fields: dict) -> dict:
        return self.request("PUT", "/users/profile", json=fields)

    def get_user(self, user_id: int | str) -> dict:
        return self.request("GET", f"/users/{user_id}")

    # Jobs
    def create_job(self, fields: dict) -> dict:
        return self.request("POST", "/jobs", json=fields)

    def get_jobs(self, *, owner: int | None = None, status: str | None = None, category: str | None = None) -> list:
        return self.request("GET", "/jobs", params={"owner": owner, "status": status, "category": category})

    def get_job(self, job_id: int | str) -> dict:
        return self.request("GET", f"/jobs/{job_id}")

    def update_job(self, job_id: int | str, fields: dict) -> dict:
        return self.request("PUT", f"/jobs/{job_id}", json=fields)

    def select_freelancer(self, job_id: int | str, freelancer_id: int) -> dict:
        return self.request("PUT", f"/jobs/{job_id}/select-freelancer", json={"freelancerId": freelancer_id})

    def complete_job(self, job_id: int | str, *, rating: int | None = None, comment: str | None = None) -> dict:
        body = {}
        if rating is not None:
            body["rating"] = rating
        if comment:
            body["comment"] = comment
        return self.request("PUT", f"/jobs/{job_id}/complete", json=body)

    # Proposals
    def create_proposal(self, *, job_id: int, message: str, proposed_price: float) -> dict:
        return self.request(
            "POST",
            "/proposals",
            json={"job_id": job_id, "message": message, "proposed_price": proposed_price},
        )

    def get_proposals_for_job(self, job_id: int | str) -> list:
        return self.request("GET", f"/proposals/job/{job_id}")

    def get_my_proposals(self) -> list:
        return self.request("GET", "/proposals/my-proposals")

    def update_proposal(self, proposal_id: int | str, status: str) -> dict:
        return self.request("PUT", f"/proposals/{proposal_id}", json={"status": status})

    # Messages
    def send_message(self, *, job_id: int, text: str) -> dict:
        return self.request("POST", "/messages", json={"job_id": job_id, "text": text})

    def get_messages(self, job_id: int | str) -> list:
        return self.request("GET", f"/messages/job/{job_id}")

    # Reviews
    def create_review(self, *, job_id: int, to_user_id: int, rating: int, comment: str | None = None) -> dict:
        return self.request(
            "POST",
            "/reviews",
            json={"job_id": job_id, "to_user_id": to_user_id, "rating": rating, "comment": comment},
        )

    def get_reviews_for_user(self, user_id: int | str) -> list:
        return self.request("GET", f"/reviews/user/{user_id}")

    # Admin
    def admin_users(self) -> list:
        return self.request("GET", "/admin/users")

    def admin_jobs(self) -> list:
        return self.request("GET", "/admin/jobs")

    def deactivate_user(self, user_id: int | str) -> dict:
        return self.request("PUT", f"/admin/users/{user_id}/deactivate")

    def activate_user(self, user_id: int | str) -> dict:
        return self.request("PUT", f"/admin/users/{user_id}/activate")

    def delete_user(self, user_id: int | str) -> dict:
        return self.request("DELETE", f"/admin/users/{user_id}")
