import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("rental_platform")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Confirmed bookings whose rental period has started become active
    "activate-started-bookings": {
        "task": "bookings.activate_started_bookings",
        "schedule": crontab(minute=0),
    },
    # Return reminders and overdue notices
    "send-return-reminders": {
        "task": "bookings.send_return_reminders",
        "schedule": crontab(minute=30, hour="*/6"),
    },
}
