"""Landing page served at `/`."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from notesvault import __version__

router = APIRouter(tags=["Home"])

INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>NotesVault</title>
</head>
<body>
  <h1>NotesVault</h1>
  <p>Version {version}. All note routes require HTTP Basic credentials.</p>
  <ul>
    <li><code>POST /notes</code> create a note: <code>{{"content": "..."}}</code></li>
    <li><code>GET /notes</code> list notes, newest first</li>
    <li><code>GET /notes/{{id}}</code> fetch one note</li>
    <li><code>PUT /notes/{{id}}</code> replace a note's content</li>
    <li><code>DELETE /notes/{{id}}</code> delete a note</li>
  </ul>
  <p>The same routes are available under <code>/v1/notes</code>.
     Interactive docs: <a href="/docs">/docs</a>.</p>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index() -> HTMLResponse:
    return HTMLResponse(INDEX_HTML.format(version=__version__))
