"""
Text views for the console client.

Each view takes the running `ClientApp` plus the route params, writes through
`app.out` and reads form fields through `app.ask`. Views that finish an action
call `app.navigate`, which re-renders the target view.
"""
from datetime import datetime

from .api import ApiError
from .templates import CATEGORIES, find_category, templates_for

DASHBOARDS = {
    "BUSINESS_OWNER": "/business/dashboard",
    "FREELANCER": "/freelancer/dashboard",
    "ADMIN": "/admin/dashboard",
}


def dashboard_path(role: str | None) -> str:
    return DASHBOARDS.get(role or "", "/")


def format_currency(amount) -> str:
    if amount is None:
        return "-"
    amount = float(amount)
    if amount.is_integer():
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def format_date(value) -> str:
    if not value:
        return "-"
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    return f"{dt:%b} {dt.day}, {dt.year}"


def format_budget(job: dict) -> str:
    return f"{format_currency(job.get('budget_min'))} - {format_currency(job.get('budget_max'))}"


def _heading(app, title: str) -> None:
    app.out("")
    app.out(title)
    app.out("=" * len(title))


def _proposal_count(job: dict) -> int:
    return (job.get("counts") or {}).get("proposals", 0)


def _ask_required(app, label: str, *, secret: bool = False) -> str | None:
    value = (app.ask(label, secret=secret) or "").strip()
    return value or None


# ---------------------------------------------------------------------------
# Public views
# ---------------------------------------------------------------------------


def landing(app) -> None:
    _heading(app, "FlowPartner")
    app.out("Connect local businesses with trusted freelancers.")
    app.out("")
    if app.session.is_authenticated:
        user = app.session.user
        app.out(f"Signed in as {user.get('name')} ({user.get('role')}).")
        app.out(f"Go to your dashboard: #{dashboard_path(app.session.role)}")
    else:
        app.out("Get started: #/signup")
        app.out("Already have an account? #/login")


def login(app) -> None:
    _heading(app, "Log in")
    email = _ask_required(app, "Email")
    password = _ask_required(app, "Password", secret=True)
    if not email or not password:
        app.out("Email and password are required.")
        return

    result = app.api.login(email=email, password=password)
    app.session.save(result["token"], result["user"])
    app.api.token = result["token"]
    app.out(f"Welcome back, {result['user'].get('name')}!")
    app.navigate(dashboard_path(result["user"].get("role")))


def signup(app) -> None:
    _heading(app, "Create your account")
    name = _ask_required(app, "Name")
    email = _ask_required(app, "Email")
    password = _ask_required(app, "Password (min 6 characters)", secret=True)
    choice = _ask_required(app, "I am a [1] Business owner  [2] Freelancer")
    role = {"1": "BUSINESS_OWNER", "2": "FREELANCER"}.get(choice or "", (choice or "").upper())
    if not (name and email and password and role):
        app.out("All fields are required.")
        return

    result = app.api.signup(name=name, email=email, password=password, role=role)
    app.out(result.get("message", "Account created."))
    app.out("Open the link in the email, or paste its #/verify-email/<token> path here.")


def verify_email(app, token: str) -> None:
    _heading(app, "Email verification")
    try:
        result = app.api.verify_email(token)
    except ApiError as e:
        app.out(e.message)
        email = _ask_required(app, "Enter your email to get a new link (blank to skip)")
        if email:
            app.out(app.api.resend_verification(email).get("message", ""))
        return

    app.out(result.get("message", "Email verified."))
    if app.session.is_authenticated:
        # Refresh the stored user so role gates see email_verified.
        me = app.api.me()
        app.session.save(app.session.token, {k: v for k, v in me.items() if k != "profile"})
        app.out(f"Continue to #{dashboard_path(app.session.role)}")
    else:
        app.out("You can now log in: #/login")


def not_found(app, path: str) -> None:
    _heading(app, "Page not found")
    app.out(f"Nothing lives at #{path}.")
    app.out("Back to #/")


def error_view(app, message: str) -> None:
    _heading(app, "Something went wrong")
    app.out(message)


# ---------------------------------------------------------------------------
# Business owner
# ---------------------------------------------------------------------------


def business_dashboard(app) -> None:
    me = app.api.me()
    _heading(app, f"{me.get('name')}'s jobs")
    if not me.get("email_verified"):
        app.out("Your email is not verified yet; verify it before posting jobs.")
        if (app.ask("Resend verification email? (y/N)") or "").strip().lower() == "y":
            app.out(app.api.resend_verification(me["email"]).get("message", ""))

    jobs = app.api.get_jobs(owner=me["id"])
    if not jobs:
        app.out("You have not posted any jobs yet.")
    for job in jobs:
        app.out(
            f"[{job['id']}] {job['title']} | {job['status']} | {format_budget(job)} "
            f"| {_proposal_count(job)} proposal(s) -> #/business/job/{job['id']}"
        )
    app.out("")
    app.out("Post a new job: #/business/create-job")


JOB_FORM_FIELDS = (
    ("title", "Title"),
    ("description", "Description"),
    ("category", "Category"),
    ("budget_min", "Minimum budget"),
    ("budget_max", "Maximum budget"),
    ("deadline", "Deadline (YYYY-MM-DD)"),
)


def _pick_template(app) -> dict:
    app.out("Quick start templates:")
    for number, (_, label) in enumerate(CATEGORIES, start=1):
        app.out(f"  {number}. {label}")
    raw = _ask_required(app, "Template category (blank to start from scratch)")
    if raw is None:
        return {}
    category = find_category(raw)
    if category is None:
        app.out("Unknown category; starting from scratch.")
        return {}

    templates = templates_for(category)
    for number, template in enumerate(templates, start=1):
        budget = f"{format_currency(template.budget_min)} - {format_currency(template.budget_max)}"
        app.out(f"  {number}. {template.title} ({budget})")
        app.out(f"      {template.description.splitlines()[0][:100]}")
    raw = _ask_required(app, "Template number (blank to start from scratch)")
    if raw is None:
        return {}
    if not raw.isdigit() or not 1 <= int(raw) <= len(templates):
        app.out("Unknown template; starting from scratch.")
        return {}
    app.out("Template applied! Press Enter to keep a value or type to customize.")
    return templates[int(raw) - 1].as_fields()


def create_job(app) -> None:
    _heading(app, "Post a job")
    prefill = _pick_template(app)

    fields = {}
    for name, label in JOB_FORM_FIELDS:
        default = prefill.get(name)
        if default is not None:
            shown = str(default).splitlines()[0]
            label = f"{label} [{shown[:40]}{'...' if len(shown) > 40 else ''}]"
        fields[name] = _ask_required(app, label) or default
    missing = [k for k, v in fields.items() if v is None]
    if missing:
        app.out(f"Missing: {', '.join(missing)}")
        return

    job = app.api.create_job(fields)
    app.out(f"Job '{job['title']}' posted.")
    app.navigate(f"/business/job/{job['id']}")


def _render_job(app, job: dict) -> None:
    _heading(app, job["title"])
    app.out(f"Status: {job['status']}   Budget: {format_budget(job)}   Deadline: {format_date(job.get('deadline'))}")
    app.out(f"Category: {job.get('category')}")
    owner = job.get("owner") or {}
    app.out(f"Posted by: {owner.get('name')} (#/user/{owner.get('id')})")
    if job.get("chosen_freelancer"):
        chosen = job["chosen_freelancer"]
        app.out(f"Freelancer: {chosen.get('name')} (#/user/{chosen.get('id')})")
    app.out("")
    app.out(job.get("description") or "")


def _ask_rating(app) -> tuple[int | None, str | None]:
    raw = _ask_required(app, "Rating 1-5 for the other party (blank to skip)")
    if raw is None:
        return None, None
    try:
        rating = int(raw)
    except ValueError:
        app.out("Rating must be a whole number; skipping the review.")
        return None, None
    comment = _ask_required(app, "Comment (optional)")
    return rating, comment


def business_job_detail(app, job_id: str) -> None:
    job = app.api.get_job(job_id)
    _render_job(app, job)

    if job["status"] == "OPEN":
        proposals = app.api.get_proposals_for_job(job_id)
        app.out("")
        app.out(f"Proposals ({len(proposals)})")
        for p in proposals:
            freelancer = p.get("freelancer") or {}
            skills = ((freelancer.get("profile") or {}).get("skills")) or "-"
            app.out(
                f"  [{freelancer.get('id')}] {freelancer.get('name')} offers "
                f"{format_currency(p['proposed_price'])} ({p['status']}) skills: {skills}"
            )
            app.out(f"      {p['message']}")
        if proposals:
            raw = _ask_required(app, "Select a freelancer by id (blank to skip)")
            if raw:
                app.api.select_freelancer(job_id, int(raw))
                app.out("Freelancer selected; the job is now in progress.")
                app.navigate(f"/business/job/{job_id}")
                return

    elif job["status"] == "IN_PROGRESS":
        app.out("")
        app.out(f"Chat with your freelancer: #/messages/{job['id']}")
        if (app.ask("Mark this job as completed? (y/N)") or "").strip().lower() == "y":
            rating, comment = _ask_rating(app)
            result = app.api.complete_job(job_id, rating=rating, comment=comment)
            if result.get("review_skipped"):
                app.out(result["review_skipped"])
            app.out("Job completed.")
            app.navigate(f"/business/job/{job_id}")
            return

    app.out("")
    app.out("Back to #/business/dashboard")


# ---------------------------------------------------------------------------
# Freelancer
# ---------------------------------------------------------------------------


def freelancer_dashboard(app) -> None:
    _heading(app, "My proposals")
    proposals = app.api.get_my_proposals()
    active = [
        p for p in proposals
        if p["status"] == "ACCEPTED" and (p.get("job") or {}).get("status") == "IN_PROGRESS"
    ]
    if active:
        app.out("Active jobs:")
        for p in active:
            app.out(f"  {p['job']['title']} -> #/freelancer/job/{p['job_id']}  chat: #/messages/{p['job_id']}")
        app.out("")

    if not proposals:
        app.out("No proposals yet.")
    for p in proposals:
        job = p.get("job") or {}
        app.out(f"[{p['job_id']}] {job.get('title')} | {p['status']} | {format_currency(p['proposed_price'])}")
    app.out("")
    app.out("Find work: #/freelancer/jobs")


def job_feed(app) -> None:
    _heading(app, "Open jobs")
    category = _ask_required(app, "Filter by category (blank for all)")
    jobs = app.api.get_jobs(status="OPEN", category=category)
    if not jobs:
        app.out("No open jobs right now.")
    for job in jobs:
        app.out(
            f"[{job['id']}] {job['title']} | {job.get('category')} | {format_budget(job)} "
            f"| due {format_date(job.get('deadline'))} -> #/freelancer/job/{job['id']}"
        )


def freelancer_job_detail(app, job_id: str) -> None:
    job = app.api.get_job(job_id)
    _render_job(app, job)
    me = app.session.user or {}

    if job["status"] == "OPEN":
        app.out("")
        message = _ask_required(app, "Proposal message (blank to skip)")
        if message:
            price = _ask_required(app, "Your price")
            app.api.create_proposal(job_id=int(job["id"]), message=message, proposed_price=price)
            app.out("Proposal submitted.")
            app.navigate("/freelancer/dashboard")
            return
    elif job.get("chosen_freelancer_id") == me.get("id"):
        app.out("")
        app.out(f"Chat with the client: #/messages/{job['id']}")
        if job["status"] == "IN_PROGRESS" and (app.ask("Mark this job as completed? (y/N)") or "").strip().lower() == "y":
            rating, comment = _ask_rating(app)
            result = app.api.complete_job(job_id, rating=rating, comment=comment)
            if result.get("review_skipped"):
                app.out(result["review_skipped"])
            app.out("Job completed.")
        elif job["status"] == "COMPLETED":
            rating, comment = _ask_rating(app)
            if rating is not None:
                app.api.create_review(job_id=int(job["id"]), to_user_id=job["owner_id"], rating=rating, comment=comment)
                app.out("Review posted.")

    app.out("")
    app.out("Back to #/freelancer/dashboard")


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


def admin_dashboard(app) -> None:
    _heading(app, "Admin")
    users = app.api.admin_users()
    jobs = app.api.admin_jobs()

    app.out(f"Users ({len(users)})")
    for u in users:
        state = "active" if u.get("active") else "DEACTIVATED"
        app.out(f"  [{u['id']}] {u['name']} <{u['email']}> {u['role']} {state}")
    app.out("")
    app.out(f"Jobs ({len(jobs)})")
    for j in jobs:
        owner = j.get("owner") or {}
        app.out(f"  [{j['id']}] {j['title']} | {j['status']} | owner {owner.get('email')} | {_proposal_count(j)} proposal(s)")

    raw = _ask_required(app, "Activate or deactivate user id (blank to skip)")
    if not raw:
        return
    target = next((u for u in users if str(u["id"]) == raw), None)
    if target is not None and not target.get("active"):
        user = app.api.activate_user(raw)
        app.out(f"{user['email']} reactivated.")
    else:
        user = app.api.deactivate_user(raw)
        app.out(f"{user['email']} deactivated.")
    app.navigate("/admin/dashboard")


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------

BUSINESS_PROFILE_FIELDS = ("business_name", "website", "location", "bio")
FREELANCER_PROFILE_FIELDS = ("niche", "skills", "location", "bio")


def profile(app) -> None:
    data = app.api.get_profile()
    user = data.get("user") or {}
    _heading(app, f"Profile: {user.get('name')}")
    fields = BUSINESS_PROFILE_FIELDS if user.get("role") == "BUSINESS_OWNER" else FREELANCER_PROFILE_FIELDS
    for name in fields:
        app.out(f"{name.replace('_', ' ').capitalize()}: {data.get(name) or '-'}")

    if (app.ask("Edit profile? (y/N)") or "").strip().lower() != "y":
        return
    updates = {}
    for name in fields:
        value = app.ask(f"{name.replace('_', ' ').capitalize()} [{data.get(name) or ''}]")
        if value:
            updates[name] = value.strip()
    if updates:
        app.api.update_profile(updates)
        app.out("Profile updated.")
        app.navigate("/profile")


def messages(app, job_id: str) -> None:
    job = app.api.get_job(job_id)
    _heading(app, f"Messages: {job['title']}")
    me = app.session.user or {}
    for m in app.api.get_messages(job_id):
        sender = (m.get("sender") or {}).get("name")
        who = "You" if m.get("sender_id") == me.get("id") else sender
        app.out(f"[{format_date(m.get('created_at'))}] {who}: {m['text']}")

    text = _ask_required(app, "Message (blank to leave)")
    if text:
        app.api.send_message(job_id=int(job["id"]), text=text)
        app.navigate(f"/messages/{job_id}")


def user_profile(app, user_id: str) -> None:
    user = app.api.get_user(user_id)
    _heading(app, f"{user['name']} ({user['role']})")
    prof = user.get("profile") or {}
    for name in ("business_name", "niche", "skills", "location", "website", "bio"):
        if prof.get(name):
            app.out(f"{name.replace('_', ' ').capitalize()}: {prof[name]}")

    summary = user.get("rating") or {}
    if summary.get("count"):
        app.out(f"Rating: {summary['average']} / 5 from {summary['count']} review(s)")
    else:
        app.out("No reviews yet.")
    for r in user.get("reviews_received") or []:
        author = (r.get("from_user") or {}).get("name")
        app.out(f"  {r['rating']}/5 from {author}: {r.get('comment') or ''}")
