from flask import Blueprint

bp = Blueprint("interviewers", __name__)

from . import routes  # noqa: E402,F401
