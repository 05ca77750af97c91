"""mdpage: a static Markdown page served by Flask."""

from __future__ import annotations

import httpx
from flask import Blueprint, Flask, Response, abort, current_app, render_template, send_from_directory

from mdpage.config import Settings, load_settings
from mdpage.highlight import CodeHighlighter
from mdpage.loader import DocumentLoader
from mdpage.logging import configure_logging, get_logger
from mdpage.models import DocumentRequest, Failed, Loaded, Pending
from mdpage.renderer import DocumentRenderer

logger = get_logger(__name__)

site = Blueprint("site", __name__)


def create_app(settings: Settings | None = None, client: httpx.Client | None = None) -> Flask:
    """Build the site.

    ``client`` replaces the HTTP client the document loader would build
    from settings. The document request is fixed here, once; relative
    paths resolve against the client's base URL, never the Host header.
    """

    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    highlighter = CodeHighlighter(style=settings.highlight_style)
    loader = DocumentLoader(client) if client is not None else DocumentLoader.from_settings(settings)
    app.extensions["mdpage"] = {
        "settings": settings,
        "highlighter": highlighter,
        "renderer": DocumentRenderer.from_settings(settings, highlighter),
        "loader": loader,
        "document": DocumentRequest(path=settings.document_path, base=settings.document_base),
    }
    app.register_blueprint(site)
    logger.info("Serving %s (%s)", settings.document_path, settings.app_env)
    return app


def _ext(name: str):
    return current_app.extensions["mdpage"][name]


# ── Routes ────────────────────────────────────────────────────────


@site.route("/")
def index():
    state = _ext("loader").resolve(_ext("document"))

    match state:
        case Loaded(content=content):
            doc = _ext("renderer").render(content)
            return render_template("document.html", doc=doc)
        case Failed(error=error):
            return render_template("failed.html", error=error), 502
        case Pending():
            # resolve() blocks until loaded; only reachable with a non-blocking loader
            return render_template("loading.html"), 202


@site.route("/pages/<path:filename>")
def page_source(filename):
    """Serve a raw Markdown document from the pages directory."""
    if not filename.endswith(".md"):
        abort(404)
    settings: Settings = _ext("settings")
    return send_from_directory(settings.pages_dir, filename, mimetype="text/markdown")


@site.route("/highlight.css")
def highlight_css():
    return Response(_ext("highlighter").stylesheet(), mimetype="text/css")


@site.route("/favicon.ico")
def favicon():
    return "", 204


if __name__ == "__main__":
    settings = load_settings()
    create_app(settings).run(debug=settings.app_env == "dev", port=settings.port)
