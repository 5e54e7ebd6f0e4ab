from datetime import datetime
from flask import current_app
from ..extensions import db
from ..services.mail import send_mail, mail_configured
from ..models.notification import Notification


def deliver_notification(notification_id: int):
    """Email a stored notification. Runs on the RQ worker (or inline)."""
    n = db.session.get(Notification, notification_id)
    if n is None or n.sent_at is not None:
        return None
    if not n.sent_to:
        current_app.logger.warning('notification %s has no recipient, not sent', n.id)
        return None
    if not mail_configured():
        current_app.logger.warning('SENDGRID_API_KEY not configured, notification %s stored but not sent', n.id)
        return None
    try:
        status, headers = send_mail(n.sent_to, n.subject, n.body)
    except Exception:
        current_app.logger.exception('sending notification %s failed', n.id)
        return None
    message_id = None
    if headers:
        try:
            message_id = headers.get('X-Message-Id')
        except Exception:
            message_id = None
    n.provider_message_id = message_id or str(status)
    n.sent_at = datetime.utcnow()
    db.session.commit()
    return n.id
