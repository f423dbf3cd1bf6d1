"""Notification service: compliance alert emails via Mailgun."""
import logging

import httpx

from app.config import get_settings

logger = logging.getLogger(__name__)

MAILGUN_US_BASE = "https://api.mailgun.net"


def mailgun_configured() -> bool:
    settings = get_settings()
    return bool(settings.mailgun_api_key and settings.mailgun_domain)


def send_email(to_email: str, subject: str, html_content: str, text_content: str | None = None) -> bool:
    """Send through Mailgun. Returns False (and logs) when unconfigured or the API rejects it."""
    settings = get_settings()
    if not mailgun_configured():
        logger.info("Email not sent (Mailgun not configured): to=%s subject=%s", to_email, subject)
        return False

    base = (settings.mailgun_base_url or MAILGUN_US_BASE).strip().rstrip("/")
    domain = settings.mailgun_domain.strip().lower()
    from_addr = settings.mailgun_from_email.strip()
    if "@" not in from_addr or from_addr.split("@")[-1].lower() != domain:
        # Mailgun drops mail whose sender domain differs from the sending domain
        from_addr = f"noreply@{domain}"
    data = {
        "from": f"{settings.mailgun_from_name} <{from_addr}>",
        "to": to_email,
        "subject": subject,
        "text": text_content or "",
        "html": html_content or "",
    }
    try:
        with httpx.Client(timeout=10.0) as client:
            r = client.post(f"{base}/v3/{domain}/messages", auth=("api", settings.mailgun_api_key), data=data)
    except httpx.HTTPError as e:
        logger.warning("Mailgun request failed: to=%s error=%s", to_email, e)
        return False
    if 200 <= r.status_code < 300:
        logger.info("Mailgun accepted email: to=%s subject=%s", to_email, subject)
        return True
    logger.warning("Mailgun API failed: status=%s to=%s body=%s", r.status_code, to_email, r.text[:500])
    return False


def send_compliance_alert(
    to_email: str,
    *,
    employee_name: str,
    threshold: int,
    days_used: int,
    days_remaining: int,
    reference_date: str,
) -> bool:
    if days_used > 90:
        headline = f"{employee_name} is over the 90-day Schengen limit"
    else:
        headline = f"{employee_name} has reached {threshold} days in the Schengen area"
    subject = f"[Schengen Compliance] {headline}"
    text = (
        f"{headline}. As of {reference_date}, {days_used} of 90 days are used in the current "
        f"180-day window ({days_remaining} remaining)."
    )
    html = f"""
    <p><strong>{headline}</strong></p>
    <p>As of {reference_date}, <strong>{days_used}</strong> of 90 days are used in the current 180-day window
    ({days_remaining} remaining).</p>
    <p>Review upcoming trips before booking further travel.</p>
    """
    return send_email(to_email, subject, html, text_content=text)
