from flask import Blueprint

bp = Blueprint("ranking", __name__)

from . import routes  # noqa: E402,F401
