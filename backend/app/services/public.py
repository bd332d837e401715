"""Unauthenticated form submissions from the marketing site."""

import logging

from sqlalchemy.orm import Session

from app.core.errors import ValidationFailed
from app.db.transaction import atomic
from app.models.public import ContactMessage, InterestSignup

logger = logging.getLogger(__name__)

TIERS = ("plus", "pro")


def _text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def _email(value) -> str:
    email = _text(value).lower()
    if not email or "@" not in email:
        raise ValidationFailed("Invalid email")
    return email


def submit_contact(db: Session, name, email, message) -> ContactMessage:
    clean_name = _text(name)
    if clean_name and len(clean_name) < 2:
        raise ValidationFailed("Invalid name")
    clean_email = _email(email)
    clean_message = _text(message)
    if len(clean_message) < 5:
        raise ValidationFailed("Invalid message")

    row = ContactMessage(name=clean_name or None, email=clean_email, message=clean_message)
    with atomic(db, "store contact message"):
        db.add(row)

    logger.info("contact message stored id=%s", row.id)
    return row


def register_interest(db: Session, email, tier) -> InterestSignup:
    clean_email = _email(email)
    # Exact match only: no trimming or case folding.
    if not isinstance(tier, str) or tier not in TIERS:
        raise ValidationFailed("Invalid tier")

    row = InterestSignup(email=clean_email, tier=tier)
    with atomic(db, "store interest signup"):
        db.add(row)

    logger.info("interest signup stored id=%s tier=%s", row.id, tier)
    return row
