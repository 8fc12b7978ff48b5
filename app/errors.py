from flask import render_template, request

from .htmx import is_htmx_request


def _error_page(template, status):
    # HTMX swaps the body into the target element; a bare fragment fits there.
    if is_htmx_request():
        return render_template("errors/_fragment.html", status=status), status
    return render_template(template), status


def register_error_handlers(app):
    @app.errorhandler(403)
    def forbidden(e):
        app.logger.warning("403 Forbidden: %s", request.path)
        return _error_page("errors/403.html", 403)

    @app.errorhandler(404)
    def not_found(e):
        return _error_page("errors/404.html", 404)

    @app.errorhandler(429)
    def too_many_requests(e):
        app.logger.warning("429 Too Many Requests: %s %s", request.method, request.path)
        return _error_page("errors/429.html", 429)

    @app.errorhandler(500)
    def internal_error(e):
        app.logger.exception("Internal server error: %s", e)
        return _error_page("errors/500.html", 500)
