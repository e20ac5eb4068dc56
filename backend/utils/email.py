"""Email service using Brevo API for RachaFácil"""

import os
import logging
import requests
import html

# Configure logging
logger = logging.getLogger(__name__)

# Environment configuration
BREVO_API_KEY = os.getenv("BREVO_API_KEY")  # Your Brevo API key
FROM_EMAIL = os.getenv("FROM_EMAIL")  # Verified sender email in Brevo
FROM_NAME = os.getenv("FROM_NAME", "RachaFácil")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# Brevo API endpoint
BREVO_API_URL = "https://api.brevo.com/v3/smtp/email"


def is_email_configured() -> bool:
    """Check if email service is properly configured"""
    return bool(BREVO_API_KEY and FROM_EMAIL)


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
    text_content: str
) -> bool:
    """
    Send an email via Brevo API

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML version of email body
        text_content: Plain text version of email body

    Returns:
        bool: True if email sent successfully, False otherwise
    """
    if not is_email_configured():
        logger.error("Email service not configured: BREVO_API_KEY and FROM_EMAIL required")
        return False

    headers = {
        "accept": "application/json",
        "api-key": BREVO_API_KEY,
        "content-type": "application/json"
    }
    payload = {
        "sender": {"name": FROM_NAME, "email": FROM_EMAIL},
        "to": [{"email": to_email}],
        "subject": subject,
        "htmlContent": html_content,
        "textContent": text_content
    }

    try:
        response = requests.post(BREVO_API_URL, json=payload, headers=headers, timeout=10)
    except requests.exceptions.Timeout:
        logger.error("Brevo API request timed out")
        return False
    except requests.exceptions.RequestException as e:
        logger.error(f"Brevo API request failed: {e}")
        return False

    if response.status_code == 201:
        logger.info(f"Email sent to {to_email} (Message ID: {response.json().get('messageId')})")
        return True

    logger.error(f"Brevo API error ({response.status_code}): {response.text}")
    return False


async def send_password_reset_email(user_email: str, user_name: str, reset_token: str) -> bool:
    """Send the password reset link. The token is the raw (unhashed) value."""
    reset_link = f"{FRONTEND_URL}/auth/reset-password?token={reset_token}"
    safe_user_name = html.escape(user_name)

    subject = "Redefinir sua senha - RachaFácil"

    html_content = f"""
    <!DOCTYPE html>
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
            <h1 style="color: #059669;">RachaFácil</h1>
            <p>Olá {safe_user_name},</p>
            <p>Recebemos um pedido para redefinir a senha da sua conta.</p>
            <p><a href="{reset_link}" style="display: inline-block; padding: 12px 24px; background-color: #059669; color: white; text-decoration: none; border-radius: 5px;">Redefinir senha</a></p>
            <p>O link expira em 1 hora. Se você não pediu a redefinição, ignore este e-mail.</p>
        </div>
    </body>
    </html>
    """

    text_content = f"""Olá {user_name},

Recebemos um pedido para redefinir a senha da sua conta.

Abra o link abaixo para escolher uma nova senha:
{reset_link}

O link expira em 1 hora. Se você não pediu a redefinição, ignore este e-mail.
"""

    return await send_email(user_email, subject, html_content, text_content)


async def send_password_changed_notification(user_email: str, user_name: str) -> bool:
    """Tell the user their password was changed."""
    safe_user_name = html.escape(user_name)
    subject = "Sua senha foi alterada - RachaFácil"

    html_content = f"""
    <!DOCTYPE html>
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
            <h1 style="color: #059669;">RachaFácil</h1>
            <p>Olá {safe_user_name},</p>
            <p>A senha da sua conta foi alterada. Se não foi você, redefina sua senha imediatamente.</p>
        </div>
    </body>
    </html>
    """

    text_content = f"""Olá {user_name},

A senha da sua conta foi alterada. Se não foi você, redefina sua senha imediatamente.
"""

    return await send_email(user_email, subject, html_content, text_content)
