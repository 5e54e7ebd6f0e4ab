from contextlib import contextmanager
from ..extensions import db


@contextmanager
def transaction():
    """Commit on success, roll everything back on any error."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
