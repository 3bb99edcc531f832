import html
import logging
from typing import Dict, Optional

import httpx

from app.settings import settings
from domain.errors import ExternalServiceError

logger = logging.getLogger(__name__)


def render_contact_email(company_name: str, message: str, job_title: Optional[str] = None) -> str:
    regarding = (
        f'<p style="color: #666;"><strong>Regarding:</strong> {html.escape(job_title)}</p>'
        if job_title else ""
    )
    return f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #333;">Message from {html.escape(company_name)}</h2>
        {regarding}
        <div style="background-color: #f5f5f5; padding: 20px; border-radius: 5px; margin: 20px 0;">
          <p style="color: #333; white-space: pre-wrap;">{html.escape(message)}</p>
        </div>
        <p style="color: #666; font-size: 14px;">
          This email was sent via the 3amal recruitment platform.
        </p>
      </div>
    """


async def send_email(to: str, subject: str, html_body: str, reply_to: Optional[str] = None) -> Dict:
    if not settings.RESEND_API_KEY:
        raise ExternalServiceError("RESEND_API_KEY is not configured", status_code=500)
    payload = {"from": settings.CONTACT_FROM, "to": [to], "subject": subject, "html": html_body}
    if reply_to:
        payload["reply_to"] = reply_to
    headers = {"Authorization": f"Bearer {settings.RESEND_API_KEY}"}
    try:
        async with httpx.AsyncClient(timeout=20) as client:
            r = await client.post(settings.RESEND_URL, headers=headers, json=payload)
    except httpx.RequestError as exc:
        raise ExternalServiceError(f"Failed to send email: {exc}") from exc
    if r.status_code >= 400:
        logger.error("Resend API error %s: %s", r.status_code, r.text[:500])
        raise ExternalServiceError(f"Failed to send email: {r.text}")
    return r.json()
