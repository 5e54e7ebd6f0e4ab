from datetime import datetime
from ..extensions import db
from .base import YearScopedMixin, TimestampMixin


class Interviewer(db.Model, YearScopedMixin, TimestampMixin):
    __tablename__ = "interviewers"

    id = db.Column(db.Integer, primary_key=True)
    # YearScopedMixin: year
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(254), nullable=False)
    institution = db.Column(db.String(200))
    specialty = db.Column(db.String(200))

    # bearer credential embedded in the magic link
    access_token = db.Column(db.String(64), unique=True, index=True)
    token_issued_at = db.Column(db.DateTime)
    token_expires_at = db.Column(db.DateTime)  # NULL: no expiry
    active = db.Column(db.Boolean, nullable=False, default=True)
    deactivated_at = db.Column(db.DateTime)

    def token_is_live(self, now=None):
        if not self.active or not self.access_token:
            return False
        if self.token_expires_at is None:
            return True
        return (now or datetime.utcnow()) < self.token_expires_at

    def to_dict(self, include_token=False):
        out = {
            "id": self.id,
            "year": self.year,
            "name": self.name,
            "email": self.email,
            "institution": self.institution,
            "specialty": self.specialty,
            "active": self.active,
            "token_issued_at": self.token_issued_at.isoformat() if self.token_issued_at else None,
            "token_expires_at": self.token_expires_at.isoformat() if self.token_expires_at else None,
        }
        if include_token:
            out["access_token"] = self.access_token
        return out

    def __repr__(self) -> str:
        return f"<Interviewer id={self.id} name={self.name!r} year={self.year}>"
