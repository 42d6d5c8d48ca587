"""
Shared HTML layout for the placeholder pages.
"""
import html

from fastapi.responses import HTMLResponse


def render_page(title: str, body: str, user: dict | None = None, status_code: int = 200) -> HTMLResponse:
    """
    Shared layout: dark background, nav bar, and optional 'signed in as' line.
    """
    if user:
        auth_links = """
          <a href="/dashboard">Dashboard</a>
          <form method="post" action="/api/auth/logout" data-auth-form="logout" data-redirect="/login">
            <button type="submit" class="link">Logout</button>
          </form>
        """
        signed_in_text = f'Signed in as <strong>{html.escape(user.get("email") or "")}</strong>'
    else:
        auth_links = """
          <a href="/login">Login</a>
          <a href="/register">Register</a>
        """
        signed_in_text = "Not signed in"

    page = f"""
    <!DOCTYPE html>
    <html>
      <head>
        <meta charset="utf-8" />
        <title>{html.escape(title)}</title>
        <style>
          :root {{ color-scheme: dark; }}
          * {{ box-sizing: border-box; }}
          body {{
            font-family: system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
            margin: 0;
            background: #020617;
            color: #e5e7eb;
          }}
          .page {{ max-width: 960px; margin: 0 auto; padding: 1.5rem 1rem 3rem; }}
          header {{
            display: flex;
            justify-content: space-between;
            align-items: center;
            padding: 0.75rem 1rem;
            border: 1px solid #1f2937;
            border-radius: 0.75rem;
          }}
          header h1 {{ font-size: 1.4rem; margin: 0; }}
          nav {{ display: flex; gap: 0.6rem; align-items: center; }}
          nav a, button.link {{
            color: #e5e7eb;
            background: rgba(255,255,255,0.04);
            border: none;
            padding: 6px 10px;
            border-radius: 8px;
            text-decoration: none;
            cursor: pointer;
            margin: 0;
          }}
          .signed-in, .muted {{ font-size: 0.85rem; color: #9ca3af; }}
          .card {{ margin-top: 1rem; border: 1px solid #1f2937; border-radius: 0.75rem; padding: 1rem 1.25rem; }}
          label {{ display: block; margin-top: 1rem; }}
          input {{ width: 100%; padding: 0.5rem; margin-top: 0.25rem; background: #020617; color: #e5e7eb;
                   border: 1px solid #4b5563; border-radius: 0.375rem; }}
          button {{ margin-top: 1.5rem; padding: 0.75rem 1.5rem; border-radius: 0.5rem; border: none;
                    background: #22c55e; color: #022c22; font-weight: 600; cursor: pointer; }}
          .error {{ color: #f97373; }}
        </style>
      </head>
      <body>
        <div class="page">
          <header>
            <div>
              <h1>{html.escape(title)}</h1>
              <div class="signed-in">{signed_in_text}</div>
            </div>
            <nav>
              <a href="/">Canvas</a>
              {auth_links}
            </nav>
          </header>
          <main>
            {body}
          </main>
        </div>
        <script>{FORM_SCRIPT}</script>
      </body>
    </html>
    """
    return HTMLResponse(content=page, status_code=status_code)


# Submits any form marked data-auth-form as JSON and follows data-redirect on success.
FORM_SCRIPT = """
document.querySelectorAll("form[data-auth-form]").forEach(function (form) {
  form.addEventListener("submit", async function (event) {
    event.preventDefault();
    var payload = Object.fromEntries(new FormData(form).entries());
    var resp = await fetch(form.action, {
      method: "POST",
      headers: {"Content-Type": "application/json"},
      body: JSON.stringify(payload),
      credentials: "same-origin"
    });
    var data = await resp.json().catch(function () { return {}; });
    var out = form.querySelector(".error");
    if (resp.ok && form.dataset.redirect) {
      window.location.assign(form.dataset.redirect);
    } else if (out) {
      out.textContent = data.message || "";
    }
  });
});
"""
