"""Browser-facing pages: post list, post detail, editor, login."""

from __future__ import annotations

import html
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from notepress.auth import (
    csrf_token,
    end_session,
    is_authenticated,
    start_session,
    verify_csrf,
)
from notepress.config import settings
from notepress.database import get_db_session
from notepress.md_render import render
from notepress.models import PostCreateRequest, PostUpdateRequest
from notepress.rate_limit import limiter
from notepress.services.admin import check_password, has_password, set_initial_password
from notepress.services.posts import (
    all_tags,
    create_post,
    delete_post,
    get_post,
    list_posts,
    update_post,
)

from .styles import SITE_CSS
from .validation import validate_body

router = APIRouter()

CATEGORY_LABELS = {"math": "Mathematics", "cp": "Competitive Programming"}
CATEGORY_SHORT = {"math": "Math", "cp": "CP"}

SUGGESTED_TAGS = {
    "math": [
        "algebra",
        "geometry",
        "number-theory",
        "calculus",
        "combinatorics",
        "probability",
        "linear-algebra",
        "graph-theory",
    ],
    "cp": [
        "dynamic-programming",
        "greedy",
        "binary-search",
        "graphs",
        "trees",
        "strings",
        "sorting",
        "data-structures",
        "codeforces",
        "leetcode",
        "atcoder",
    ],
}

MAX_CARD_TAGS = 4

_KATEX = "https://cdn.jsdelivr.net/npm/katex@0.16.9/dist"
_PRISM = "https://cdn.jsdelivr.net/npm/prismjs@1.29.0"

# KaTeX auto-render and Prism run over .content after load.
_RENDER_ASSETS = f"""\
<link rel="stylesheet" href="{_KATEX}/katex.min.css">
<link rel="stylesheet" href="{_PRISM}/themes/prism-tomorrow.min.css">
<script defer src="{_KATEX}/katex.min.js"></script>
<script defer src="{_KATEX}/contrib/auto-render.min.js"></script>
<script defer src="{_PRISM}/components/prism-core.min.js"></script>
<script defer src="{_PRISM}/plugins/autoloader/prism-autoloader.min.js"></script>
<script>
function renderMathAndCode(el) {{
  if (!el) return;
  if (window.renderMathInElement) {{
    renderMathInElement(el, {{
      delimiters: [
        {{left: "$$", right: "$$", display: true}},
        {{left: "$", right: "$", display: false}},
        {{left: "\\\\[", right: "\\\\]", display: true}},
        {{left: "\\\\(", right: "\\\\)", display: false}}
      ],
      throwOnError: false
    }});
  }}
  if (window.Prism) Prism.highlightAllUnder(el);
}}
window.addEventListener("load", function () {{
  document.querySelectorAll(".content").forEach(renderMathAndCode);
}});
</script>"""

_THEME_BOOT = """\
<script>
if (localStorage.getItem("theme") === "dark") document.documentElement.classList.add("dark");
function toggleTheme() {
  var dark = document.documentElement.classList.toggle("dark");
  localStorage.setItem("theme", dark ? "dark" : "light");
}
</script>"""


def _format_date(ms: int) -> str:
    """Epoch milliseconds as 'Jan 5, 2026'."""
    dt = datetime.fromtimestamp(ms / 1000, UTC)
    return f"{dt:%b} {dt.day}, {dt.year}"


def _e(value: object) -> str:
    return html.escape(str(value))


def _page_header(authed: bool, active: str = "") -> str:
    def nav(href: str, label: str, key: str) -> str:
        cls = ' class="nav-active"' if key == active else ""
        return f'<a href="{href}"{cls}>{label}</a>'

    links = [nav("/", "Home", "all")]
    links += [
        nav(f"/?category={_e(c)}", _e(CATEGORY_SHORT.get(c, c)), c) for c in settings.categories
    ]
    if authed:
        links.append('<a href="/posts/new">New post</a>')
        links.append(
            '<form method="POST" action="/logout">'
            f'<input type="hidden" name="csrf" value="{csrf_token()}">'
            '<button class="link" type="submit">Logout</button></form>'
        )
    else:
        links.append('<a href="/login">Login</a>')
    links.append(
        '<button class="secondary" type="button" onclick="toggleTheme()" '
        'title="Toggle theme">&#9680;</button>'
    )
    return f"""\
<div class="header">
  <a href="/"><span class="title">{_e(settings.site_title)}</span></a>
  <nav>{"".join(links)}</nav>
</div>"""


def _page(title: str, body: str, *, authed: bool, active: str = "", head: str = "") -> str:
    return f"""\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{_e(title)} - {_e(settings.site_title)}</title>
<style>{SITE_CSS}</style>
{_THEME_BOOT}
{head}
</head>
<body>
<div class="container">
{_page_header(authed, active)}
{body}
<div class="footer muted">{_e(settings.site_title)}</div>
</div>
</body>
</html>"""


def _category_badge(category: str, short: bool = False) -> str:
    labels = CATEGORY_SHORT if short else CATEGORY_LABELS
    return f'<span class="badge cat-{_e(category)}">{_e(labels.get(category, category))}</span>'


def _difficulty_badge(difficulty: str) -> str:
    return f'<span class="badge diff-{_e(difficulty)}">{_e(difficulty.capitalize())}</span>'


def _post_card(post: dict) -> str:
    tags = post["tags"]
    tags_html = "".join(f'<span class="tag">{_e(t)}</span>' for t in tags[:MAX_CARD_TAGS])
    if len(tags) > MAX_CARD_TAGS:
        tags_html += f'<span class="tag">+{len(tags) - MAX_CARD_TAGS}</span>'
    pid = _e(post["id"])
    return f"""\
<div class="card">
  <div class="row">
    <h2><a href="/posts/{pid}">{_e(post["title"])}</a></h2>
    {_difficulty_badge(post["difficulty"])}
  </div>
  <p class="desc">{_e(post["description"])}</p>
  <div class="row">
    <div>{_category_badge(post["category"], short=True)}{tags_html}</div>
    <span class="muted">{_format_date(post["timestamp"])}</span>
  </div>
</div>"""


def _render_list(
    posts: list[dict],
    tags: list[str],
    *,
    q: str,
    category: str,
    tag: str,
    authed: bool,
) -> str:
    tag_options = ['<option value="">All tags</option>'] + [
        f'<option value="{_e(t)}"{" selected" if t == tag else ""}>{_e(t)}</option>'
        for t in tags
    ]
    category_input = (
        f'<input type="hidden" name="category" value="{_e(category)}">' if category else ""
    )
    if posts:
        cards = "\n".join(_post_card(p) for p in posts)
    else:
        cards = '<div class="empty">No posts found.</div>'
    body = f"""\
<form class="search" method="GET" action="/">
  {category_input}
  <input type="search" name="q" value="{_e(q)}" placeholder="Search posts...">
  <select name="tag" onchange="this.form.submit()">{"".join(tag_options)}</select>
  <button type="submit">Search</button>
</form>
{cards}"""
    title = CATEGORY_LABELS.get(category, "Posts") if category else "Posts"
    return _page(title, body, authed=authed, active=category or "all")


def _render_detail(post: dict, *, authed: bool) -> str:
    pid = _e(post["id"])
    tags_html = "".join(f'<span class="tag">{_e(t)}</span>' for t in post["tags"])
    actions = ""
    if authed:
        actions = f"""\
<div class="actions">
  <a class="button" href="/posts/{pid}/edit">Edit</a>
  <form method="POST" action="/posts/{pid}/delete"
        onsubmit="return confirm('Are you sure you want to delete this post?')">
    <input type="hidden" name="csrf" value="{csrf_token()}">
    <button class="danger" type="submit">Delete</button>
  </form>
</div>"""
    body = f"""\
<div class="muted"><a href="/">&larr; back to posts</a></div>
<h1>{_e(post["title"])}</h1>
<div>
  {_category_badge(post["category"])}
  {_difficulty_badge(post["difficulty"])}
  <span class="muted">{_format_date(post["timestamp"])}</span>
</div>
<div style="margin-top:8px">{tags_html}</div>
<div class="content">{render(post["content"])}</div>
{actions}"""
    return _page(
        post["title"], body, authed=authed, active=post["category"], head=_RENDER_ASSETS
    )


def _render_not_found(post_id: str, *, authed: bool) -> str:
    body = f"""\
<div class="muted"><a href="/">&larr; back to posts</a></div>
<p>Post <code>{_e(post_id)}</code> not found.</p>"""
    return _page("Not Found", body, authed=authed)


def _options(values: list[str], selected: str, labels: dict[str, str] | None = None) -> str:
    labels = labels or {}
    return "".join(
        f'<option value="{_e(v)}"{" selected" if v == selected else ""}>'
        f"{_e(labels.get(v, v.capitalize()))}</option>"
        for v in values
    )


def _render_form(form: dict, *, post_id: str | None, error: str = "") -> str:
    editing = post_id is not None
    action = f"/posts/{_e(post_id)}/edit" if editing else "/posts/new"
    heading = "Edit Post" if editing else "Create New Post"
    submit = "Update Post" if editing else "Publish Post"
    cancel = f"/posts/{_e(post_id)}" if editing else "/"
    error_html = f'<div class="error">{_e(error)}</div>' if error else ""
    suggestions = "".join(
        f'<button class="secondary" type="button" data-category="{_e(cat)}" '
        f'onclick="addTag(this.textContent)">{_e(t)}</button> '
        for cat, tags in SUGGESTED_TAGS.items()
        if cat in settings.categories
        for t in tags
    )
    body = f"""\
<h1>{heading}</h1>
{error_html}
<form method="POST" action="{action}">
  <input type="hidden" name="csrf" value="{csrf_token()}">
  <div class="form-row">
    <label for="title">Title</label>
    <input type="text" id="title" name="title" value="{_e(form.get("title", ""))}">
  </div>
  <div class="form-row">
    <label for="description">Description</label>
    <input type="text" id="description" name="description"
           value="{_e(form.get("description", ""))}">
  </div>
  <div class="form-row">
    <label for="category">Category</label>
    <select id="category" name="category" onchange="showSuggestions()">
      {_options(settings.categories, form.get("category", ""), CATEGORY_LABELS)}
    </select>
    <label for="difficulty" style="margin-top:8px">Difficulty</label>
    <select id="difficulty" name="difficulty">
      {_options(settings.difficulties, form.get("difficulty", ""))}
    </select>
  </div>
  <div class="form-row">
    <label for="tags">Tags (comma separated)</label>
    <input type="text" id="tags" name="tags" value="{_e(form.get("tags", ""))}">
    <div id="suggested" style="margin-top:6px">{suggestions}</div>
  </div>
  <div class="form-row">
    <label for="content">Content (headings, lists, ```code``` fences, $math$)</label>
    <textarea id="content" name="content">{_e(form.get("content", ""))}</textarea>
  </div>
  <div class="actions">
    <button type="submit">{submit}</button>
    <button class="secondary" type="button" onclick="preview()">Preview</button>
    <a class="button secondary" href="{cancel}">Cancel</a>
  </div>
</form>
<div id="preview" class="content card" style="display:none;margin-top:16px"></div>
<script>
function addTag(tag) {{
  var input = document.getElementById("tags");
  var tags = input.value.split(",").map(function (t) {{ return t.trim(); }}).filter(Boolean);
  if (tags.indexOf(tag) === -1) tags.push(tag);
  input.value = tags.join(", ");
}}
function showSuggestions() {{
  var cat = document.getElementById("category").value;
  document.querySelectorAll("#suggested button").forEach(function (b) {{
    b.style.display = b.dataset.category === cat ? "" : "none";
  }});
}}
function preview() {{
  var box = document.getElementById("preview");
  fetch("/api/render", {{
    method: "POST",
    headers: {{"Content-Type": "application/json", "Accept": "application/json"}},
    body: JSON.stringify({{content: document.getElementById("content").value}})
  }}).then(function (r) {{ return r.json(); }}).then(function (data) {{
    box.innerHTML = data.html;
    box.style.display = "";
    renderMathAndCode(box);
  }});
}}
showSuggestions();
</script>"""
    return _page(heading, body, authed=True, head=_RENDER_ASSETS)


def _render_password_page(kind: str, error: str = "") -> str:
    setup = kind == "setup"
    heading = "Set Admin Password" if setup else "Admin Login"
    hint = (
        f'<p class="muted">Choose a password of at least '
        f"{settings.min_password_length} characters.</p>"
        if setup
        else ""
    )
    error_html = f'<div class="error">{_e(error)}</div>' if error else ""
    body = f"""\
<div class="login-box card">
  <h2>{heading}</h2>
  {hint}
  {error_html}
  <form method="POST" action="/{kind}">
    <input type="hidden" name="csrf" value="{csrf_token()}">
    <input type="password" name="password" placeholder="Password" autofocus>
    <button type="submit">{"Set password" if setup else "Login"}</button>
  </form>
</div>"""
    return _page(heading, body, authed=False)


def _form_to_dict(form) -> dict:
    return {
        k: str(form.get(k, ""))
        for k in ("title", "description", "content", "category", "difficulty", "tags")
    }


def _login_redirect() -> RedirectResponse:
    return RedirectResponse("/login", status_code=303)


# ---------------------------------------------------------------------------
# List / detail
# ---------------------------------------------------------------------------


@router.get("/", include_in_schema=False, response_class=HTMLResponse)
async def home(
    request: Request,
    q: str = "",
    category: str = "",
    tag: str = "",
    session: AsyncSession = Depends(get_db_session),
):
    if not await has_password(session):
        return RedirectResponse("/setup", status_code=303)
    if category not in settings.categories:
        category = ""
    posts = await list_posts(
        session,
        query=q.strip() or None,
        category=category or None,
        tag=tag or None,
        limit=settings.page_size,
    )
    tags = await all_tags(session)
    return HTMLResponse(
        _render_list(
            posts, tags, q=q, category=category, tag=tag, authed=is_authenticated(request)
        )
    )


@router.get("/posts/new", include_in_schema=False, response_class=HTMLResponse)
async def new_post_page(request: Request):
    if not is_authenticated(request):
        return _login_redirect()
    form = {
        "category": settings.default_category,
        "difficulty": settings.default_difficulty,
    }
    return HTMLResponse(_render_form(form, post_id=None))


@router.post("/posts/new", include_in_schema=False)
@limiter.limit(settings.rate_limit_write)
async def new_post_submit(request: Request, session=Depends(get_db_session)):
    if not is_authenticated(request):
        return _login_redirect()
    form = await request.form()
    data = _form_to_dict(form)
    if not verify_csrf(str(form.get("csrf", ""))):
        return HTMLResponse(
            _render_form(data, post_id=None, error="Invalid request, please retry"),
            status_code=400,
        )
    try:
        req = validate_body(PostCreateRequest, data)
        post = await create_post(session, req)
    except HTTPException as e:
        return HTMLResponse(
            _render_form(data, post_id=None, error=str(e.detail)), status_code=e.status_code
        )
    return RedirectResponse(f"/posts/{post['id']}", status_code=303)


@router.get("/posts/{post_id}", include_in_schema=False, response_class=HTMLResponse)
async def post_detail(
    request: Request, post_id: str, session: AsyncSession = Depends(get_db_session)
):
    authed = is_authenticated(request)
    try:
        post = await get_post(session, post_id)
    except HTTPException:
        return HTMLResponse(_render_not_found(post_id, authed=authed), status_code=404)
    return HTMLResponse(_render_detail(post, authed=authed))


# ---------------------------------------------------------------------------
# Edit / delete
# ---------------------------------------------------------------------------


@router.get("/posts/{post_id}/edit", include_in_schema=False, response_class=HTMLResponse)
async def edit_post_page(
    request: Request, post_id: str, session: AsyncSession = Depends(get_db_session)
):
    if not is_authenticated(request):
        return _login_redirect()
    try:
        post = await get_post(session, post_id)
    except HTTPException:
        return HTMLResponse(_render_not_found(post_id, authed=True), status_code=404)
    form = {**post, "tags": ", ".join(post["tags"])}
    return HTMLResponse(_render_form(form, post_id=post_id))


@router.post("/posts/{post_id}/edit", include_in_schema=False)
@limiter.limit(settings.rate_limit_write)
async def edit_post_submit(
    request: Request, post_id: str, session=Depends(get_db_session)
):
    if not is_authenticated(request):
        return _login_redirect()
    form = await request.form()
    data = _form_to_dict(form)
    if not verify_csrf(str(form.get("csrf", ""))):
        return HTMLResponse(
            _render_form(data, post_id=post_id, error="Invalid request, please retry"),
            status_code=400,
        )
    try:
        req = validate_body(PostUpdateRequest, data)
        await update_post(session, post_id, req)
    except HTTPException as e:
        return HTMLResponse(
            _render_form(data, post_id=post_id, error=str(e.detail)), status_code=e.status_code
        )
    return RedirectResponse(f"/posts/{post_id}", status_code=303)


@router.post("/posts/{post_id}/delete", include_in_schema=False)
@limiter.limit(settings.rate_limit_write)
async def delete_post_submit(
    request: Request, post_id: str, session=Depends(get_db_session)
):
    if not is_authenticated(request):
        return _login_redirect()
    form = await request.form()
    if not verify_csrf(str(form.get("csrf", ""))):
        return RedirectResponse(f"/posts/{post_id}", status_code=303)
    try:
        await delete_post(session, post_id)
    except HTTPException:
        return HTMLResponse(_render_not_found(post_id, authed=True), status_code=404)
    return RedirectResponse("/", status_code=303)


# ---------------------------------------------------------------------------
# Login / setup / logout
# ---------------------------------------------------------------------------


@router.get("/setup", include_in_schema=False, response_class=HTMLResponse)
async def setup_page(error: str = "", session: AsyncSession = Depends(get_db_session)):
    if await has_password(session):
        return RedirectResponse("/login", status_code=303)
    return HTMLResponse(_render_password_page("setup", error))


@router.post("/setup", include_in_schema=False)
@limiter.limit(settings.rate_limit_login)
async def setup_submit(request: Request, session=Depends(get_db_session)):
    form = await request.form()
    if not verify_csrf(str(form.get("csrf", ""))):
        return RedirectResponse("/setup?error=Invalid+request", status_code=303)
    try:
        await set_initial_password(session, str(form.get("password", "")))
    except HTTPException as e:
        return HTMLResponse(_render_password_page("setup", str(e.detail)), status_code=400)
    return start_session(RedirectResponse("/", status_code=303), request)


@router.get("/login", include_in_schema=False, response_class=HTMLResponse)
async def login_page(error: str = "", session: AsyncSession = Depends(get_db_session)):
    if not await has_password(session):
        return RedirectResponse("/setup", status_code=303)
    return HTMLResponse(_render_password_page("login", error))


@router.post("/login", include_in_schema=False)
@limiter.limit(settings.rate_limit_login)
async def login_submit(request: Request, session=Depends(get_db_session)):
    form = await request.form()
    if not verify_csrf(str(form.get("csrf", ""))):
        return RedirectResponse("/login?error=Invalid+request", status_code=303)
    try:
        await check_password(session, str(form.get("password", "")))
    except HTTPException as e:
        return HTMLResponse(_render_password_page("login", str(e.detail)), status_code=e.status_code)
    return start_session(RedirectResponse("/", status_code=303), request)


@router.post("/logout", include_in_schema=False)
async def logout(request: Request):
    form = await request.form()
    resp = RedirectResponse("/", status_code=303)
    if not verify_csrf(str(form.get("csrf", ""))):
        return resp
    return end_session(resp)
