"""Email bodies (plain text + HTML) for transactional mail."""
from dataclasses import dataclass
from html import escape
from urllib.parse import quote

from shutterconnect.lib.settings import settings


@dataclass(frozen=True)
class EmailContent:
    subject: str
    text: str
    html: str


_LAYOUT = """
<html>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
      <div style="background: #667eea; color: white; padding: 24px; text-align: center; border-radius: 10px 10px 0 0;">
        <h1 style="margin: 0;">ShutterConnect</h1>
        <h2 style="margin: 8px 0 0 0;">{heading}</h2>
      </div>
      <div style="background: #f9f9f9; padding: 24px; border-radius: 0 0 10px 10px;">
        {body}
        <p>Best regards,<br>The ShutterConnect Team</p>
      </div>
    </div>
  </body>
</html>
"""

_BUTTON = (
    '<p style="text-align: center;"><a href="{url}" style="display: inline-block; '
    'background: #667eea; color: white; padding: 12px 30px; text-decoration: none; '
    'border-radius: 5px;">{label}</a></p>'
    '<p>If the button doesn\'t work, copy this link into your browser:</p>'
    '<p style="word-break: break-all; background: #eee; padding: 10px;">{url}</p>'
)


def _render(heading: str, body: str) -> str:
    return _LAYOUT.format(heading=escape(heading), body=body)


def verification_email(first_name: str, token: str) -> EmailContent:
    url = f"{settings.app_base_url}/auth/verify-email?token={token}"
    hours = settings.verification_token_ttl_hours
    text = f"""Hi {first_name},

Thank you for signing up for ShutterConnect! Please verify your email address:

{url}

This verification link will expire in {hours} hours.

If you didn't create an account with ShutterConnect, you can safely ignore this email.

Best regards,
The ShutterConnect Team
"""
    body = (
        f"<p>Hi {escape(first_name)},</p>"
        "<p>Thank you for signing up for ShutterConnect! Please verify your email address.</p>"
        + _BUTTON.format(url=escape(url), label="Verify Email Address")
        + f"<p><strong>This verification link will expire in {hours} hours.</strong></p>"
    )
    return EmailContent(
        subject="Verify Your Email Address - ShutterConnect",
        text=text,
        html=_render("Welcome to ShutterConnect!", body),
    )


def password_reset_email(first_name: str, token: str) -> EmailContent:
    url = f"{settings.app_base_url}/auth/reset-password?token={token}"
    minutes = settings.reset_token_ttl_minutes
    text = f"""Hi {first_name},

We received a request to reset your ShutterConnect password. Reset it here:

{url}

This link will expire in {minutes} minutes. If you didn't request a reset, ignore this email.

Best regards,
The ShutterConnect Team
"""
    body = (
        f"<p>Hi {escape(first_name)},</p>"
        "<p>We received a request to reset your ShutterConnect password.</p>"
        + _BUTTON.format(url=escape(url), label="Reset Password")
        + f"<p><strong>This link will expire in {minutes} minutes.</strong> "
        "If you didn't request a reset, ignore this email.</p>"
    )
    return EmailContent(
        subject="Reset Your Password - ShutterConnect",
        text=text,
        html=_render("Password Reset Request", body),
    )


def newsletter_welcome_email(email: str) -> EmailContent:
    unsubscribe_url = f"{settings.api_base_url}/newsletter/unsubscribe?email={quote(email)}"
    text = f"""Welcome to the ShutterConnect newsletter!

You'll receive photography tips, featured photographers and platform updates.

Unsubscribe at any time: {unsubscribe_url}
"""
    body = (
        "<p>Thanks for subscribing!</p>"
        "<p>You'll receive photography tips, featured photographers and platform updates.</p>"
        f'<p style="font-size: 12px; color: #666;"><a href="{escape(unsubscribe_url)}">Unsubscribe</a></p>'
    )
    return EmailContent(
        subject="Welcome to ShutterConnect Newsletter!",
        text=text,
        html=_render("Newsletter Subscription", body),
    )
