from flask import jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from . import bp
from .forms import LoginForm
from ...models.user import User
from ...utils.http import form_error_response


@bp.route("/login", methods=["POST"])
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    user = User.query.filter_by(email=form.email.data).first()
    if user and user.check_password(form.password.data):
        login_user(user)
        return jsonify({"id": user.id, "email": user.email, "role": user.role})
    current_app.logger.warning('failed login for %s', form.email.data)
    return jsonify({"error": "invalid_credentials", "message": "Invalid credentials"}), 401


@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"ok": True})


@bp.get("/me")
@login_required
def me():
    return jsonify({"id": current_user.id, "email": current_user.email, "role": current_user.role})
