import html
import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage

from ..models.enums import Role

logger = logging.getLogger(__name__)

BRAND = "FlowPartner"


class EmailDeliveryError(RuntimeError):
    pass


class Mailer(ABC):
    """
    Composes FlowPartner's transactional emails and hands them to `send`.

    Subclasses decide how a message leaves the process; `SmtpMailer` is the
    production transport.
    """

    def __init__(self, *, sender: str, frontend_url: str):
        self.sender = sender
        self.frontend_url = (frontend_url or "").rstrip("/")

    @abstractmethod
    def send(self, msg: EmailMessage) -> None:
        """Deliver a composed message or raise EmailDeliveryError."""

    def verification_url(self, token: str) -> str:
        return f"{self.frontend_url}/#/verify-email/{token}"

    def dashboard_url(self, role: Role) -> str:
        path = {
            Role.BUSINESS_OWNER: "/business/dashboard",
            Role.FREELANCER: "/freelancer/dashboard",
            Role.ADMIN: "/admin/dashboard",
        }[role]
        return f"{self.frontend_url}/#{path}"

    def _message(self, *, to_email: str, subject: str, text: str, html_body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = f"{BRAND} <{self.sender}>" if self.sender else BRAND
        msg["To"] = to_email
        msg.set_content(text)
        msg.add_alternative(html_body, subtype="html")
        return msg

    def send_verification_email(self, *, to_email: str, name: str | None, token: str) -> None:
        """Raises EmailDeliveryError when the transport fails; signup depends on it."""
        who = (name or "there").strip()
        url = self.verification_url(token)

        lines: list[str] = []
        lines.append(f"Hi {who},")
        lines.append("")
        lines.append(f"Thank you for signing up for {BRAND}!")
        lines.append("Please verify your email address by opening the link below:")
        lines.append("")
        lines.append(url)
        lines.append("")
        lines.append("This link will expire in 24 hours.")
        lines.append(f"If you didn't create an account with {BRAND}, you can safely ignore this email.")
        lines.append("")
        lines.append("Best regards,")
        lines.append(f"The {BRAND} Team")

        safe_who, safe_url = html.escape(who), html.escape(url)
        body = (
            f"<p>Hi {safe_who},</p>"
            f"<p>Thank you for signing up for {BRAND}! Please verify your email address:</p>"
            f'<p><a href="{safe_url}">Verify Email Address</a></p>'
            f"<p>Or paste this link into your browser: {safe_url}</p>"
            "<p><strong>This link will expire in 24 hours.</strong></p>"
            f"<p>Best regards,<br>The {BRAND} Team</p>"
        )
        msg = self._message(
            to_email=to_email,
            subject=f"Verify Your Email - {BRAND}",
            text="\n".join(lines),
            html_body=body,
        )
        self.send(msg)
        logger.info("Verification email sent to %s", to_email)

    def send_welcome_email(self, *, to_email: str, name: str | None, role: Role) -> None:
        who = (name or "there").strip()
        url = self.dashboard_url(role)
        if role is Role.BUSINESS_OWNER:
            perks = [
                "Post jobs",
                "Review proposals from freelancers",
                "Communicate directly with talent",
            ]
        else:
            perks = [
                "Browse and apply to projects",
                "Submit proposals to businesses",
                "Build your reputation with reviews",
            ]

        lines = [f"Hi {who},", "", f"Your email has been verified. You now have full access to {BRAND}.", ""]
        lines.extend(f"- {p}" for p in perks)
        lines.extend(["", f"Go to your dashboard: {url}", "", "Happy collaborating!", f"The {BRAND} Team"])

        safe_who, safe_url = html.escape(who), html.escape(url)
        body = (
            f"<p>Hi {safe_who},</p>"
            f"<p>Your email has been verified. You now have full access to {BRAND}.</p>"
            "<ul>" + "".join(f"<li>{p}</li>" for p in perks) + "</ul>"
            f'<p><a href="{safe_url}">Go to Dashboard</a></p>'
            f"<p>Happy collaborating!<br>The {BRAND} Team</p>"
        )
        msg = self._message(
            to_email=to_email,
            subject=f"Welcome to {BRAND} - Email Verified!",
            text="\n".join(lines),
            html_body=body,
        )
        self.send(msg)
        logger.info("Welcome email sent to %s", to_email)


class SmtpMailer(Mailer):
    """
    Sends email over SMTP (Gmail App Password recommended).

    Port 465 uses implicit SSL; any other port uses STARTTLS when `use_tls` is set.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int,
        user: str,
        password: str,
        sender: str,
        use_tls: bool,
        frontend_url: str,
        timeout: float = 15,
    ):
        super().__init__(sender=sender or user, frontend_url=frontend_url)
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "SmtpMailer":  # noqa: ANN001
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_pass,
            sender=settings.smtp_from,
            use_tls=settings.smtp_tls,
            frontend_url=settings.frontend_url,
        )

    @property
    def configured(self) -> bool:
        return bool(self.host and self.user and self.password and self.sender)

    def send(self, msg: EmailMessage) -> None:
        if not self.configured:
            err = "SMTP is not configured (missing SMTP_HOST/SMTP_USER/SMTP_PASS/SMTP_FROM)."
            logger.error(err)
            raise EmailDeliveryError(err)

        logger.debug("Connecting to %s:%s (tls=%s)", self.host, self.port, self.use_tls)
        try:
            if self.port == 465:
                with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as smtp:
                    smtp.login(self.user, self.password)
                    smtp.send_message(msg)
            else:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                    smtp.ehlo()
                    if self.use_tls:
                        smtp.starttls()
                        smtp.ehlo()
                    smtp.login(self.user, self.password)
                    smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s: %s", msg["To"], type(e).__name__, e)
            raise EmailDeliveryError(f"Failed to send email: {type(e).__name__}") from e
