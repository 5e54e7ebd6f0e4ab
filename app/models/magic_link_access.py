from ..extensions import db


class MagicLinkAccess(db.Model):
    """Audit row written for every accepted magic-link request."""
    __tablename__ = "magic_link_accesses"
    id = db.Column(db.Integer, primary_key=True)
    interviewer_id = db.Column(db.Integer, db.ForeignKey("interviewers.id"), nullable=False, index=True)
    action = db.Column(db.String(50), nullable=False)  # list/detail/criterion_score/interview_score
    application_id = db.Column(db.Integer, db.ForeignKey("applications.id"))
    remote_addr = db.Column(db.String(64))
    created_at = db.Column(db.DateTime, server_default=db.func.now(), nullable=False)
