"""
User service for looking up and registering participants by email.
"""
import logging
from sqlalchemy.orm import Session
from app.core.utils import normalize_email
from app.models.user import User

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User:
    """Return the user with the given email, or None."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def load_or_create_user(db: Session, email: str) -> User:
    """
    Return the user for the given email address, creating it if necessary.
    The new user is flushed but not committed; the caller owns the transaction.
    """
    user = get_user_by_email(db, email)
    if user is None:
        user = User(email=normalize_email(email), verified=False)
        db.add(user)
        db.flush()
        logger.info(f"Registered new user {user.email}")
    return user
