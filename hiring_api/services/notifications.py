# 🔹 FILE: hiring_api/services/notifications.py
# --------------------------------------------------------------
# Password reset links. Mail delivery is not part of this service:
# the link is handed to the log so an operator (or a log shipper
# wired to a mailer) can forward it.
# --------------------------------------------------------------
import logging

logger = logging.getLogger(__name__)


def send_reset_link(email: str, link: str) -> None:
    logger.info("Password reset requested for %s: %s", email, link)
