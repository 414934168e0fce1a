"""Flask preview interface for embed tags."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from flask import Flask, Response, abort, redirect, render_template_string, request, url_for

from ..config import (
    EmbedConfig,
    get_db_path,
    load_config,
    save_config,
)
from ..registry import UnknownTag, client_modules, render_tag, tag_names
from ..renderers import YOUTUBE_LAZYLOAD_MODULE
from ..url_parser import Found, parse_video_url

logger = logging.getLogger(__name__)

# Attributes accepted from forms and query strings
EMBED_ATTRS = ("width", "height", "start", "autoplay", "ytid", "aoid", "vimeoid", "dmid", "nvid")

# Provider name to the tag used when auto-detecting from a URL
_AUTO_TAGS = {
    "youtube": "youtube",
    "archive.org": "aovideo",
    "vimeo": "vimeo",
    "dailymotion": "dailymotion",
    "niconico": "nicovideo",
}

# ext.youtube.lazyload: swap the commented-out iframe in when the poster is clicked
LAZYLOAD_SCRIPT = """
document.addEventListener("click", function (event) {
    var box = event.target.closest(".ext-YouTube-video--lazy");
    if (!box) {
        return;
    }
    for (var i = 0; i < box.childNodes.length; i++) {
        var node = box.childNodes[i];
        if (node.nodeType === Node.COMMENT_NODE) {
            box.innerHTML = node.nodeValue;
            box.classList.remove("ext-YouTube-video--lazy");
            return;
        }
    }
});
"""

DASHBOARD_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Media Embed - Preview</title>
    <style>
        body { font-family: system-ui, sans-serif; max-width: 1000px; margin: 2rem auto; padding: 0 1rem; }
        h1 { font-size: 1.5rem; }
        .card { background: #f5f5f5; padding: 1rem; border-radius: 8px; margin: 1rem 0; }
        .card h2 { margin-top: 0; font-size: 1rem; }
        form { display: flex; gap: 0.5rem; flex-wrap: wrap; }
        input, select { padding: 0.5rem; }
        pre { white-space: pre-wrap; word-break: break-all; background: #fff; padding: 0.5rem; }
        .btn { display: inline-block; padding: 0.5rem 1rem; background: #333; color: white;
            text-decoration: none; border-radius: 4px; border: none; }
        .btn:hover { background: #555; }
        .empty { color: #a00; }
        .ext-YouTube-video--lazy { cursor: pointer; }
    </style>
    {% if lazyload %}
    <script src="{{ url_for('lazyload_js') }}" defer></script>
    {% endif %}
</head>
<body>
    <h1>Media Embed</h1>
    <div class="card">
        <h2>Preview</h2>
        <form method="post" action="{{ url_for('preview') }}">
            <select name="tag">
                <option value="auto" {{ 'selected' if form.tag == 'auto' else '' }}>auto-detect</option>
                {% for t in tags %}
                <option value="{{ t }}" {{ 'selected' if form.tag == t else '' }}>{{ t }}</option>
                {% endfor %}
            </select>
            <input type="text" name="input" value="{{ form.input or '' }}" placeholder="Paste a URL or ID..."
                style="flex: 1; min-width: 200px;">
            <input type="text" name="width" value="{{ form.width or '' }}" placeholder="width" size="6">
            <input type="text" name="height" value="{{ form.height or '' }}" placeholder="height" size="6">
            <input type="text" name="start" value="{{ form.start or '' }}" placeholder="start" size="6">
            <label><input type="checkbox" name="autoplay" value="1" {{ 'checked' if form.autoplay else '' }}>
                autoplay</label>
            <button type="submit" class="btn">Render</button>
        </form>
    </div>
    {% if markup is not none %}
    <div class="card">
        <h2>Result{% if tag %} &lt;{{ tag }}&gt;{% endif %}</h2>
        {% if markup %}
        <pre>{{ markup }}</pre>
        <div>{{ markup | safe }}</div>
        {% else %}
        <p class="empty">No embeddable ID found.</p>
        {% endif %}
    </div>
    {% endif %}
    <div class="card">
        <h2>Current Settings</h2>
        <p><strong>Lazy-load YouTube:</strong> {{ 'On' if config.lazy_load else 'Off' }}</p>
        <p><strong>Web port:</strong> {{ config.web_port }}</p>
        <a href="{{ url_for('settings') }}" class="btn">Edit Settings</a>
    </div>
</body>
</html>
"""

SETTINGS_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Media Embed - Settings</title>
    <style>
        body { font-family: system-ui, sans-serif; max-width: 500px; margin: 2rem auto; padding: 0 1rem; }
        h1 { font-size: 1.5rem; }
        form { display: flex; flex-direction: column; gap: 1rem; }
        label { font-weight: 500; }
        input { padding: 0.5rem; font-size: 1rem; }
        .btn { padding: 0.5rem 1rem; background: #333; color: white; border: none;
            border-radius: 4px; cursor: pointer; font-size: 1rem; }
        .btn:hover { background: #555; }
        .back { display: inline-block; margin-top: 1rem; color: #666; }
    </style>
</head>
<body>
    <h1>Settings</h1>
    <form method="post">
        <label>
            <input type="checkbox" name="lazy_load" value="1" {{ 'checked' if config.lazy_load else '' }}>
            Lazy-load YouTube videos (poster image until clicked)
        </label>
        <label for="web_port">Web interface port</label>
        <input type="number" id="web_port" name="web_port" value="{{ config.web_port }}" min="1024" max="65535">
        <button type="submit" class="btn">Save</button>
    </form>
    <a href="{{ url_for('dashboard') }}" class="back">← Back to Preview</a>
</body>
</html>
"""


def _embed_attrs(source) -> dict[str, str]:
    """Pick the embed attributes out of a form or query-string mapping."""
    return {k: source[k] for k in EMBED_ATTRS if source.get(k)}


def create_app(config_path: Optional[Path] = None) -> Flask:
    """Create and configure the Flask app."""
    app = Flask(__name__)

    @app.route("/")
    def dashboard():
        config = load_config(config_path)
        return render_template_string(
            DASHBOARD_TEMPLATE,
            config=config,
            tags=tag_names(),
            form={"tag": "auto"},
            markup=None,
            tag=None,
            lazyload=False,
        )

    @app.route("/preview", methods=["POST"])
    def preview():
        """Render the submitted tag and show both its source and the live embed."""
        config = load_config(config_path)
        tag = request.form.get("tag", "auto")
        body = request.form.get("input", "").strip()
        attrs = _embed_attrs(request.form)

        if tag == "auto":
            detected = parse_video_url(body)
            tag = _AUTO_TAGS.get(detected.provider) if isinstance(detected, Found) else None

        markup = ""
        modules: tuple[str, ...] = ()
        if tag:
            try:
                markup = render_tag(tag, body, attrs, config)
                modules = client_modules(tag, config)
            except UnknownTag:
                logger.warning("Preview requested for unknown tag: %s", tag)
                tag = None

        return render_template_string(
            DASHBOARD_TEMPLATE,
            config=config,
            tags=tag_names(),
            form=dict(request.form),
            markup=markup,
            tag=tag,
            lazyload=YOUTUBE_LAZYLOAD_MODULE in modules,
        )

    @app.route("/embed/<tag>")
    def embed(tag: str):
        """Return the raw fragment for a tag.
        E.g. /embed/youtube?input=https%3A%2F%2Fyoutu.be%2FdQw4w9WgXcQ&width=640
        """
        config = load_config(config_path)
        try:
            markup = render_tag(tag, request.args.get("input", ""), _embed_attrs(request.args), config)
            modules = client_modules(tag, config)
        except UnknownTag:
            abort(404)
        response = Response(markup, mimetype="text/html")
        if modules:
            response.headers["X-Client-Modules"] = ",".join(modules)
        return response

    @app.route("/lazyload.js")
    def lazyload_js():
        return Response(LAZYLOAD_SCRIPT, mimetype="application/javascript")

    @app.route("/settings", methods=["GET", "POST"])
    def settings():
        config = load_config(config_path)
        if request.method == "POST":
            try:
                config = EmbedConfig(
                    lazy_load=request.form.get("lazy_load") == "1",
                    web_port=int(request.form.get("web_port", config.web_port)),
                )
                save_config(config, config_path)
                return redirect(url_for("dashboard"))
            except (ValueError, TypeError) as e:
                logger.warning("Invalid settings: %s", e)
        return render_template_string(SETTINGS_TEMPLATE, config=config)

    return app


def run_web_server(
    host: str = "0.0.0.0",
    port: Optional[int] = None,
    db_path: Optional[Path] = None,
) -> None:
    """Run the Flask development server."""
    path = db_path or get_db_path()
    config = load_config(path)
    port = port or config.web_port
    app = create_app(config_path=path)
    app.run(host=host, port=port, threaded=True, use_reloader=False)
