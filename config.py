import os
from dotenv import load_dotenv
load_dotenv()


def _env_int(name, default=None):
    val = os.getenv(name)
    if val is None or val == "":
        return default
    return int(val)


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///evaluation.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    # run jobs inline instead of enqueueing them
    RQ_SYNC = os.getenv("RQ_SYNC", "0") == "1"
    SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
    MAIL_FROM = os.getenv("MAIL_FROM", "noreply@example.com")
    MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "Admissions Team")
    MAGIC_LINK_BASE_URL = os.getenv("MAGIC_LINK_BASE_URL", "http://localhost:5000/evaluate/")
    # None disables expiry
    MAGIC_LINK_TTL_DAYS = _env_int("MAGIC_LINK_TTL_DAYS", 90)
    INTERVIEW_SCORE_MAX = float(os.getenv("INTERVIEW_SCORE_MAX", "10"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
