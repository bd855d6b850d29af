"""
stockroom/utils/http.py
───────────────────────
Helpers for answering the two kinds of caller: script-driven API clients
(JSON) and full-page browser navigation (HTML / redirects).
"""
from flask import jsonify, request


def wants_json() -> bool:
    """
    True when the caller is a script rather than a page navigation.

    Signals, in order: a JSON request body, the XHR header, or an Accept
    header that takes JSON but not HTML.
    """
    if request.is_json:
        return True
    if request.headers.get('X-Requested-With') == 'XMLHttpRequest':
        return True
    accept = request.accept_mimetypes
    return accept.accept_json and not accept.accept_html


def request_data() -> dict:
    """Submitted fields from either a JSON body or a form post."""
    if request.is_json:
        payload = request.get_json(silent=True)
        return payload if isinstance(payload, dict) else {}
    return request.form.to_dict()


def json_error(error, status_code=None):
    """Serialize a StockroomError as `{success: false, error: ...}`."""
    return jsonify(error.to_dict()), status_code or error.status_code
