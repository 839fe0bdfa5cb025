"""HTML rendering of a DirectoryListing. Only consumes the listing data, never touches the filesystem."""

from jinja2 import Environment

from lanshare.models.share import DirectoryListing
from lanshare.services.listing import format_mtime, humanize_size

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ app_name }} - {{ listing.path }}</title>
    <style>
        body { font-family: system-ui, sans-serif; margin: 0 auto; max-width: 960px; padding: 1rem; color: #1f2937; }
        header { display: flex; justify-content: space-between; align-items: flex-start; gap: 1rem; }
        table { width: 100%; border-collapse: collapse; margin-top: 1rem; }
        th, td { text-align: left; padding: .4rem .6rem; border-bottom: 1px solid #e5e7eb; }
        td.size, td.modified { white-space: nowrap; color: #6b7280; }
        a { color: #4f46e5; text-decoration: none; }
        .empty { padding: 2rem; text-align: center; color: #6b7280; }
        .qr img { width: 150px; height: 150px; }
    </style>
</head>
<body>
<header>
    <div>
        <h1>{{ listing.path }}</h1>
        {% if not listing.is_root %}<a href="{{ listing.parent_path }}">&larr; Parent directory</a>{% endif %}
        <form method="post" action="{{ listing.upload_url }}" enctype="multipart/form-data">
            <input type="file" name="file" multiple required>
            <button type="submit">Upload</button>
        </form>
    </div>
    {% if listing.qr_code_url %}
    <div class="qr">
        <img src="{{ listing.qr_code_url }}" alt="QR code">
        <div><a href="{{ listing.current_url }}">{{ listing.current_url }}</a></div>
    </div>
    {% endif %}
</header>
{% if listing.is_empty %}
<div class="empty">This directory is empty.</div>
{% else %}
<table>
    <thead><tr><th>Name</th><th>Size</th><th>Modified</th></tr></thead>
    <tbody>
    {% for entry in listing.entries %}
        <tr>
            <td><a href="{{ entry.url }}">{{ entry.name }}{% if entry.is_dir %}/{% endif %}</a></td>
            <td class="size">{% if entry.is_dir %}-{% else %}{{ entry.size_bytes | humanize_size }}{% endif %}</td>
            <td class="modified">{{ entry.modified_at | format_mtime }}</td>
        </tr>
    {% endfor %}
    </tbody>
</table>
{% endif %}
</body>
</html>
"""

_env = Environment(autoescape=True)
_env.filters["humanize_size"] = humanize_size
_env.filters["format_mtime"] = format_mtime
_page = _env.from_string(PAGE_TEMPLATE)


def render_listing(listing: DirectoryListing, app_name: str = "LAN Share") -> str:
    return _page.render(listing=listing, app_name=app_name)
