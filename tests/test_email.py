import logging

from fastapi import BackgroundTasks

from projecthub import celery_worker, email_utils


def test_notify_uses_background_tasks(monkeypatch):
    monkeypatch.setattr(email_utils, "EMAIL_USE_CELERY", False)
    background_tasks = BackgroundTasks()

    email_utils.notify_invited_users(background_tasks, "Apollo", ["a@x.com", "b@x.com"])

    assert [task.args[0] for task in background_tasks.tasks] == ["a@x.com", "b@x.com"]
    assert all("Apollo" in task.args[2] for task in background_tasks.tasks)


def test_notify_dispatches_to_celery(monkeypatch):
    sent = []

    class RecordingTask:
        def delay(self, *args):
            sent.append(args)

    monkeypatch.setattr(email_utils, "EMAIL_USE_CELERY", True)
    monkeypatch.setattr(celery_worker, "send_email_async", RecordingTask())
    background_tasks = BackgroundTasks()

    email_utils.notify_invited_users(background_tasks, "Apollo", ["a@x.com"])

    assert background_tasks.tasks == []
    assert sent[0][0] == "a@x.com"


def test_send_email_without_smtp_only_logs(monkeypatch, caplog):
    def unexpected(*args):
        raise AssertionError("SMTP should not be used")

    monkeypatch.setattr(email_utils, "SMTP_SERVER", "")
    monkeypatch.setattr(email_utils, "send_email_smtp", unexpected)

    with caplog.at_level(logging.INFO, logger="projecthub.email_utils"):
        celery_worker.send_email_async("a@x.com", "Hello", "Body")

    assert "a@x.com" in caplog.text


def test_send_email_failure_is_logged(monkeypatch, caplog):
    def broken(*args):
        raise OSError("connection refused")

    monkeypatch.setattr(email_utils, "SMTP_SERVER", "smtp.example.com")
    monkeypatch.setattr(email_utils, "send_email_smtp", broken)

    with caplog.at_level(logging.ERROR, logger="projecthub.email_utils"):
        email_utils.send_email("a@x.com", "Hello", "Body")

    assert "Failed to send email to a@x.com" in caplog.text


def test_notify_survives_broker_outage(monkeypatch, caplog):
    class UnreachableBroker:
        def delay(self, *args):
            raise ConnectionError("broker unreachable")

    monkeypatch.setattr(email_utils, "EMAIL_USE_CELERY", True)
    monkeypatch.setattr(celery_worker, "send_email_async", UnreachableBroker())

    with caplog.at_level(logging.ERROR, logger="projecthub.email_utils"):
        email_utils.notify_invited_users(BackgroundTasks(), "Apollo", ["a@x.com", "b@x.com"])

    assert "Failed to queue email to a@x.com" in caplog.text
    assert "Failed to queue email to b@x.com" in caplog.text
