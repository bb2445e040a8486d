"""Pinterest URLs, login form selectors, and timing constants."""

# ── URLs ─────────────────────────────────────────────────────────────────────

PINTEREST_BASE = "https://pinterest.com"
PINTEREST_LOGIN_URL = f"{PINTEREST_BASE}/login"

# ── Login Form Selectors ─────────────────────────────────────────────────────

SELECTORS = {
    "login_email": "input#email",
    "login_password": "input#password",
    # The submit control is matched by its label; it is not always a <button type=submit>.
    "login_button": "xpath=//div[text()='Log in']",
}

# ── Timing ───────────────────────────────────────────────────────────────────

FIELD_POLL_INTERVAL_MS = 50
SUBMIT_POLL_INTERVAL_MS = 50
TYPE_DELAY_MS = 30

# ── Browser Hardening ────────────────────────────────────────────────────────

FIREFOX_USER_PREFS = {
    "devtools.debugger.remote-enabled": False,
    "devtools.chrome.enabled": False,
    "devtools.console.stdout.content": False,
    "browser.dom.window.dump.enabled": False,
}

HIDE_WEBDRIVER_SCRIPT = (
    "Object.defineProperty(navigator, 'webdriver', {get: () => undefined});"
)

# Playwright event names forwarded to the session's drain task
CONTEXT_EVENTS = ["console", "request", "response", "requestfailed", "close"]
PAGE_EVENTS = ["framenavigated", "domcontentloaded", "load"]
