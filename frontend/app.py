import argparse
import getpass
import logging
import os
from typing import Callable

from . import views
from .api import DEFAULT_API_URL, ApiClient, ApiError
from .router import Router, normalize_path
from .session import SessionStore

logger = logging.getLogger(__name__)

ROUTES = {
    "/": views.landing,
    "/login": views.login,
    "/signup": views.signup,
    "/verify-email/:token": views.verify_email,
    "/business/dashboard": views.business_dashboard,
    "/business/create-job": views.create_job,
    "/business/job/:job_id": views.business_job_detail,
    "/freelancer/dashboard": views.freelancer_dashboard,
    "/freelancer/jobs": views.job_feed,
    "/freelancer/job/:job_id": views.freelancer_job_detail,
    "/admin/dashboard": views.admin_dashboard,
    "/profile": views.profile,
    "/messages/:job_id": views.messages,
    "/user/:user_id": views.user_profile,
}


class ClientApp:
    """Holds the API client and session, and renders a view per navigation."""

    def __init__(
        self,
        api: ApiClient,
        session: SessionStore,
        *,
        output: Callable[[str], None] = print,
        prompt: Callable[[str], str] = input,
        secret_prompt: Callable[[str], str] = getpass.getpass,
    ):
        self.api = api
        self.session = session
        self.router = Router(ROUTES)
        self.current_path = "/"
        self._output = output
        self._prompt = prompt
        self._secret_prompt = secret_prompt

    def out(self, text: str = "") -> None:
        self._output(text)

    def ask(self, label: str, *, secret: bool = False) -> str:
        reader = self._secret_prompt if secret else self._prompt
        return reader(f"{label}: ")

    def navigate(self, path: str) -> str:
        """Render the view for `path`; returns the path that ended up rendered."""
        path = normalize_path(path)
        self.current_path = path

        match = self.router.match(path)
        if match is None:
            views.not_found(self, path)
            return path

        if self.router.is_protected(path) and not self.session.is_authenticated:
            self.out("Please log in to continue.")
            return self.navigate("/login")

        try:
            match.handler(self, **match.params)
        except ApiError as e:
            if e.status_code == 401 and self.session.is_authenticated:
                self.logout(render=False)
                views.error_view(self, "Your session has expired. Please log in again: #/login")
            else:
                views.error_view(self, e.message)
        except Exception as e:
            logger.exception("View for %s failed", path)
            views.error_view(self, f"Unexpected error: {type(e).__name__}: {e}")
        return self.current_path

    def logout(self, *, render: bool = True) -> None:
        self.session.clear()
        self.api.token = None
        if render:
            self.out("Logged out.")
            self.navigate("/")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flowpartner-client", description="FlowPartner console client")
    parser.add_argument(
        "--api-url",
        default=os.getenv("FLOWPARTNER_API_URL", DEFAULT_API_URL),
        help="Base URL of the FlowPartner API (env FLOWPARTNER_API_URL)",
    )
    parser.add_argument("--session-file", default=None, help="Where the login session is stored")
    parser.add_argument("path", nargs="?", default="/", help="Initial route, e.g. '#/freelancer/jobs'")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    session = SessionStore(args.session_file).load()
    api = ApiClient(args.api_url, token=session.token)
    app = ClientApp(api, session)

    try:
        app.navigate(args.path)
        while True:
            try:
                line = input("\nflowpartner> ").strip()
            except (EOFError, KeyboardInterrupt):
                break
            if not line:
                continue
            if line in ("quit", "exit"):
                break
            if line == "logout":
                app.logout()
                continue
            app.navigate(line)
    finally:
        api.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
