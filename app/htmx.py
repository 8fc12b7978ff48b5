"""HTMX-aware response helpers."""

from flask import make_response, redirect, request

HTMX_REQUEST_HEADER = "HX-Request"
HTMX_REDIRECT_HEADER = "HX-Redirect"


def is_htmx_request():
    return request.headers.get(HTMX_REQUEST_HEADER) == "true"


def redirect_to(target, status=302, htmx_status=200):
    """Redirect to ``target``, letting HTMX clients navigate on their own.

    HTMX swaps the body of a followed redirect into the page, so partial-page
    requests get an empty response carrying ``HX-Redirect`` instead.
    """
    if is_htmx_request():
        response = make_response("", htmx_status)
        response.headers[HTMX_REDIRECT_HEADER] = target
        return response
    return redirect(target, code=status)
