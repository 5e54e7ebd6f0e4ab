from flask import Blueprint

bp = Blueprint("criteria", __name__)

from . import routes  # noqa: E402,F401
