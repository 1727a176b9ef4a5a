"""HTML bodies for account e-mails."""

from __future__ import annotations

from datetime import datetime
from html import escape

_FOOTER = """
      <p style="margin-top:1em;font-size:0.9em;color:#888">
        &copy; {year} &middot; <a href="{url}">{url}</a>
      </p>
"""


def verification_code_email(name: str, code: str, landing_url: str, now: datetime) -> tuple[str, str]:
    """Return (subject, html) for the login verification code."""
    body = f"""
    <html>
    <body style="font-family:sans-serif;color:#333">
      <h2>Hello {escape(name)},</h2>
      <p>Use this one-time code to finish signing in:</p>
      <p style="font-size:1.6em;letter-spacing:0.3em;font-weight:bold">{escape(code)}</p>
      <p>The code expires in a few minutes. If you did not try to sign in, ignore this e-mail.</p>
      {_FOOTER.format(year=now.year, url=escape(landing_url))}
    </body>
    </html>
    """
    return "Email verification", body


def reset_password_email(
    name: str,
    email: str,
    reset_link: str,
    landing_url: str,
    now: datetime,
) -> tuple[str, str]:
    """Return (subject, html) for the password reset link."""
    body = f"""
    <html>
    <body style="font-family:sans-serif;color:#333">
      <h2>Hello {escape(name)},</h2>
      <p>A password reset was requested for {escape(email)}.</p>
      <p><a href="{escape(reset_link)}">Choose a new password</a></p>
      <p>The link expires in a few minutes and can be used once.</p>
      {_FOOTER.format(year=now.year, url=escape(landing_url))}
    </body>
    </html>
    """
    return "Reset Password", body
