import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from fastapi import BackgroundTasks
from kombu.exceptions import OperationalError

from .config import EMAIL_FROM, EMAIL_USE_CELERY, SMTP_PASSWORD, SMTP_PORT, SMTP_SERVER, SMTP_USER

logger = logging.getLogger(__name__)


def send_email_smtp(email_to: str, subject: str, body: str):
    msg = MIMEMultipart("alternative")
    msg["From"] = EMAIL_FROM
    msg["To"] = email_to
    msg["Subject"] = subject
    msg.attach(MIMEText(body, "plain"))

    with smtplib.SMTP(SMTP_SERVER, SMTP_PORT) as server:
        server.starttls()
        if SMTP_USER:
            server.login(SMTP_USER, SMTP_PASSWORD)
        server.sendmail(EMAIL_FROM, email_to, msg.as_string())


def send_email(email_to: str, subject: str, body: str):
    if not SMTP_SERVER:
        logger.info("SMTP not configured, email to %s not sent: %s", email_to, subject)
        return
    try:
        send_email_smtp(email_to, subject, body)
    except (smtplib.SMTPException, OSError):
        logger.exception("Failed to send email to %s", email_to)
        return
    logger.info("Email sent to %s: %s", email_to, subject)


def send_email_background(background_tasks: BackgroundTasks, email_to: str, subject: str, body: str):
    background_tasks.add_task(send_email, email_to, subject, body)


def notify_invited_users(background_tasks: BackgroundTasks, project_name: str, emails):
    subject = "Project invitation"
    body = (
        f"You have been invited to join the project '{project_name}'. "
        "Sign in and accept the invitation to start collaborating."
    )
    for email_to in emails:
        if EMAIL_USE_CELERY:
            from .celery_worker import send_email_async
            try:
                send_email_async.delay(email_to, subject, body)
            except (OperationalError, OSError):
                logger.exception("Failed to queue email to %s", email_to)
        else:
            send_email_background(background_tasks, email_to, subject, body)
