from flask import request, jsonify
from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict
from ..errors import ValidationError

_SCALARS = (str, int, float)


class JsonForm(FlaskForm):
    """FlaskForm filled from the JSON body of the request."""

    class Meta:
        # API clients authenticate with the session cookie and send JSON, not form posts
        csrf = False

        def wrap_formdata(self, form, formdata):
            formdata = super().wrap_formdata(form, formdata)
            if formdata is None or not request.is_json:
                return formdata
            payload = request.get_json(silent=True)
            if not isinstance(payload, dict):
                return ImmutableMultiDict()
            # fields see strings, like a form post; null and nested values count as missing
            return ImmutableMultiDict([
                (key, str(value)) for key, value in payload.items()
                if isinstance(value, _SCALARS)
            ])


def form_error_response(form):
    return jsonify({"error": "validation_error", "message": "invalid input", "fields": form.errors}), 400


def json_body():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("request body must be a JSON object", field="body")
    return payload


def require_int(value, field):
    if value is None or value == "":
        raise ValidationError(f"{field} is required", field=field)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", field=field)


def optional_int(value, field):
    if value is None or value == "":
        return None
    return require_int(value, field)
