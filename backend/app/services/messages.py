import logging

from sqlalchemy.orm import Session

from ..models.message import Message
from ..utils.dependencies import CurrentUser
from ..utils.error_handlers import ValidationError
from ..utils.permissions import ensure_can_message
from ..utils.serializers import message_payload
from ..utils.validation import validate_integer_field, validate_string_field
from .jobs import get_job_or_404

logger = logging.getLogger(__name__)


def send_message(db: Session, *, sender: CurrentUser, job_id, text) -> dict:
    if job_id in (None, "") or not text:
        raise ValidationError("Job ID and message text required")
    job_id = validate_integer_field(job_id, "job_id")
    text = validate_string_field(text, "Message text", max_length=5000)

    job = get_job_or_404(db, job_id)
    ensure_can_message(sender, job, action="message on")

    message = Message(job_id=job.id, sender_id=sender.id, text=text)
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.debug("Message %s posted on job %s", message.id, job.id)
    return message_payload(message)


def list_for_job(db: Session, *, user: CurrentUser, job_id: int) -> list[dict]:
    job = get_job_or_404(db, job_id)
    ensure_can_message(user, job, action="view messages for")

    messages = (
        db.query(Message)
        .filter(Message.job_id == job.id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )
    return [message_payload(m) for m in messages]
