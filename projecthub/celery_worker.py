from celery import Celery

from .config import CELERY_BACKEND_URL, CELERY_BROKER_URL

celery = Celery("projecthub", broker=CELERY_BROKER_URL, backend=CELERY_BACKEND_URL)


@celery.task
def send_email_async(to_email: str, subject: str, body: str):
    from .email_utils import send_email
    send_email(to_email, subject, body)
