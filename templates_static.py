"""Templates for the gallery page."""

from jinja2 import DictLoader, Environment, select_autoescape

APP_CSS = """:root{--bg:#0f1115;--fg:#e5e7eb;--muted:#a1a1aa;--card:#111318;--brand:#7aa2ff}
*{box-sizing:border-box}body{margin:0;background:var(--bg);color:var(--fg);font:14px/1.4 system-ui,sans-serif}
.topbar{padding:12px 20px;border-bottom:1px solid #1f2430;display:flex;gap:16px;align-items:center}
.topbar a{color:var(--fg);text-decoration:none}.topbar a.active{color:var(--brand);font-weight:600}
.brand{font-weight:700;margin-right:12px}.container{padding:20px}.muted{color:var(--muted)}
.grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(200px,1fr));gap:12px}
.card{background:var(--card);border:1px solid #1f2430;border-radius:8px;overflow:hidden;text-align:center}
.card img{width:100%;height:200px;object-fit:contain;background:#090a0d;display:block}
.card .name{padding:6px;font-size:11px;color:var(--muted);white-space:nowrap;overflow:hidden;text-overflow:ellipsis}
"""

BASE_HTML = """<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{{ title or 'Image Random' }}</title>
  <style>{{ css|safe }}</style>
</head>
<body>
  <header class="topbar">
    <span class="brand">Image Random</span>
    {% for c in categories %}
    <a href="/?category={{ c }}" class="{{ 'active' if c == active else '' }}">{{ c }}</a>
    {% endfor %}
    <a href="/api/images/{{ active }}" target="_blank">random</a>
  </header>
  <main class="container">
    {% block content %}{% endblock %}
  </main>
</body>
</html>
"""

GALLERY_HTML = """{% extends 'base.html' %}
{% block content %}
<p class="muted">{{ names|length }} image(s) in {{ active }}</p>
{% if names %}
<div class="grid">
  {% for name in names %}
  <a class="card" href="/api/image/{{ name }}" target="_blank">
    <img src="/api/thumbnail/{{ name }}" loading="lazy" alt="{{ name }}">
    <div class="name">{{ name }}</div>
  </a>
  {% endfor %}
</div>
{% else %}
<p>No images found.</p>
{% endif %}
{% endblock %}
"""

jinja_env = Environment(
    loader=DictLoader({"base.html": BASE_HTML, "gallery.html": GALLERY_HTML}),
    autoescape=select_autoescape(["html", "xml"]),
)
jinja_env.globals["css"] = APP_CSS
