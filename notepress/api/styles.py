"""Inline CSS for the public pages. Dark mode hangs off ``html.dark``."""

SITE_CSS = """\
  :root {
    --bg: #f7f7fb;
    --card: #ffffff;
    --fg: #1f2330;
    --muted: #667085;
    --accent: #2563eb;
    --border: #e4e7ec;
    --code-bg: #f2f4f7;
  }
  html.dark {
    --bg: #000000;
    --card: #0b0b10;
    --fg: #f2f2f7;
    --muted: #a0a3b1;
    --accent: #a78bfa;
    --border: rgba(139, 92, 246, 0.35);
    --code-bg: #16161d;
  }
  body {
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
    font-size: 15px;
    background: var(--bg);
    color: var(--fg);
    margin: 0;
    padding: 0;
  }
  a { color: var(--accent); text-decoration: none; }
  a:hover { text-decoration: underline; }
  .container {
    max-width: 860px;
    margin: 0 auto;
    padding: 0 16px 40px;
  }
  .header {
    display: flex;
    align-items: center;
    justify-content: space-between;
    flex-wrap: wrap;
    gap: 8px;
    padding: 16px 0;
    border-bottom: 1px solid var(--border);
    margin-bottom: 16px;
  }
  .header .title { font-size: 20px; font-weight: bold; color: var(--fg); }
  .header nav a, .header nav button {
    margin-left: 10px;
    font-size: 14px;
  }
  .header nav form { display: inline; }
  .header nav button.link {
    background: none;
    color: var(--accent);
    padding: 0;
  }
  .nav-active { font-weight: bold; text-decoration: underline; }
  button, .button {
    background: var(--accent);
    color: #fff;
    border: none;
    border-radius: 6px;
    padding: 6px 12px;
    font-size: 14px;
    cursor: pointer;
  }
  button.secondary {
    background: transparent;
    color: var(--fg);
    border: 1px solid var(--border);
  }
  button.danger { background: #dc2626; }
  input[type=text], input[type=password], input[type=search], select, textarea {
    background: var(--card);
    color: var(--fg);
    border: 1px solid var(--border);
    border-radius: 6px;
    padding: 6px 8px;
    font-size: 14px;
    box-sizing: border-box;
  }
  textarea { width: 100%; font-family: monospace; min-height: 320px; }
  .search { display: flex; gap: 8px; margin-bottom: 16px; }
  .search input { flex: 1; }
  .card {
    background: var(--card);
    border: 1px solid var(--border);
    border-radius: 10px;
    padding: 16px 20px;
    margin-bottom: 12px;
  }
  .card h2 { margin: 0 0 6px; font-size: 18px; }
  .card .desc { color: var(--muted); margin: 0 0 10px; }
  .row { display: flex; justify-content: space-between; align-items: center; gap: 8px; }
  .badge {
    display: inline-block;
    padding: 2px 8px;
    border-radius: 999px;
    font-size: 12px;
    margin-right: 4px;
  }
  .cat-math { background: #dbeafe; color: #1e40af; }
  .cat-cp { background: #f3e8ff; color: #6b21a8; }
  .diff-easy { background: #dcfce7; color: #166534; }
  .diff-medium { background: #fef9c3; color: #854d0e; }
  .diff-hard { background: #fee2e2; color: #991b1b; }
  .tag {
    display: inline-block;
    background: var(--code-bg);
    color: var(--muted);
    padding: 1px 6px;
    border-radius: 4px;
    font-size: 12px;
    margin-right: 4px;
  }
  .muted { color: var(--muted); font-size: 13px; }
  .empty { text-align: center; color: var(--muted); padding: 40px 0; }
  .error {
    background: #fee2e2;
    color: #991b1b;
    padding: 8px 12px;
    border-radius: 6px;
    margin-bottom: 12px;
  }
  .content { line-height: 1.65; }
  .content h1 { font-size: 24px; }
  .content h2 { font-size: 20px; }
  .content h3 { font-size: 17px; }
  .content pre {
    background: var(--code-bg);
    border-radius: 8px;
    padding: 12px;
    overflow: auto;
  }
  .form-row { margin-bottom: 12px; }
  .form-row label { display: block; font-size: 13px; color: var(--muted); margin-bottom: 4px; }
  .form-row input[type=text] { width: 100%; }
  .login-box { max-width: 340px; margin: 80px auto; }
  .login-box input { width: 100%; margin-bottom: 10px; }
  .actions { display: flex; gap: 8px; margin-top: 16px; }
  .actions form { margin: 0; }
  .footer {
    margin-top: 32px;
    padding-top: 12px;
    border-top: 1px solid var(--border);
    text-align: center;
  }"""
