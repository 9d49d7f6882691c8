"""
Email content rendering for contact requests.

Turns a validated SubmissionPayload into the subject line plus a plain-text
and an HTML body. Everything here is pure: same payload in, same strings out.

Public API:
  INTEREST_LABELS
  interest_label(value) -> str
  escape_html(value) -> str
  build_subject(payload) -> str
  render_email(payload) -> RenderedEmail
"""

from typing import Optional

from app.models.contact import RenderedEmail, SubmissionPayload

SITE_NAME = "nordvind-ai.de"
NOT_SPECIFIED = "Nicht angegeben"
NO_MESSAGE = "Keine Nachricht hinterlassen."

# Form <select> values → labels shown in the email.
INTEREST_LABELS: dict[str, str] = {
    "prozessanalyse": "Prozessanalyse",
    "tool-implementierung": "Tool-Empfehlung & Implementierung",
    "ki-loesungen": "Individuelle KI-Lösungen",
    "software": "Software-Entwicklung mit KI",
    "marketing": "Marketing mit KI",
    "ecommerce": "E-Commerce & Visual Content",
    "betreuung": "Laufende Betreuung & Support",
    "sonstiges": "Sonstiges",
}

# Order matters: "&" first so the other entities are not double-escaped.
_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)

_RULE = "──────────────────────────────────"


def interest_label(value: Optional[str]) -> str:
    """Known keys map to their label, unknown values pass through verbatim."""
    if not value:
        return NOT_SPECIFIED
    return INTEREST_LABELS.get(value, value)


def escape_html(value: object) -> str:
    text = str(value)
    for char, entity in _HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


def build_subject(payload: SubmissionPayload) -> str:
    subject = f"Neue Kontaktanfrage: {payload.name}"
    if payload.company:
        subject += f" ({payload.company})"
    return subject


def _render_text(payload: SubmissionPayload, interest: str) -> str:
    return (
        f"Neue Kontaktanfrage über {SITE_NAME}\n"
        f"{_RULE}\n"
        "\n"
        f"Name: {payload.name}\n"
        f"E-Mail: {payload.email}\n"
        f"Unternehmen: {payload.company or NOT_SPECIFIED}\n"
        f"Interesse: {interest}\n"
        "\n"
        "Nachricht:\n"
        f"{payload.message or NO_MESSAGE}\n"
        "\n"
        f"{_RULE}\n"
        f"Gesendet über das Kontaktformular auf {SITE_NAME}"
    )


_LABEL_CELL = "padding: 8px 0; color: #64748b; font-size: 14px;"
_VALUE_CELL = "padding: 8px 0; color: #1e293b; font-size: 14px;"


def _render_html(payload: SubmissionPayload, interest: str) -> str:
    name = escape_html(payload.name)
    email = escape_html(payload.email)
    company = escape_html(payload.company or NOT_SPECIFIED)
    message = escape_html(payload.message or NO_MESSAGE)

    return f"""
<div style="font-family: 'Segoe UI', Arial, sans-serif; max-width: 600px; margin: 0 auto; background: #f8fafc; border-radius: 12px; overflow: hidden;">
  <div style="background: linear-gradient(135deg, #0a1628, #1e3a5f); padding: 24px 32px;">
    <h1 style="color: #00d4ff; margin: 0; font-size: 18px; font-weight: 600;">Neue Kontaktanfrage</h1>
    <p style="color: #94a3b8; margin: 4px 0 0; font-size: 13px;">über {SITE_NAME}</p>
  </div>
  <div style="padding: 24px 32px;">
    <table style="width: 100%; border-collapse: collapse;">
      <tr>
        <td style="{_LABEL_CELL} width: 120px;">Name</td>
        <td style="{_VALUE_CELL} font-weight: 500;">{name}</td>
      </tr>
      <tr>
        <td style="{_LABEL_CELL}">E-Mail</td>
        <td style="{_VALUE_CELL}"><a href="mailto:{email}" style="color: #0066cc;">{email}</a></td>
      </tr>
      <tr>
        <td style="{_LABEL_CELL}">Unternehmen</td>
        <td style="{_VALUE_CELL}">{company}</td>
      </tr>
      <tr>
        <td style="{_LABEL_CELL}">Interesse</td>
        <td style="{_VALUE_CELL}">{escape_html(interest)}</td>
      </tr>
    </table>
    <div style="margin-top: 16px; padding: 16px; background: white; border-radius: 8px; border: 1px solid #e2e8f0;">
      <p style="margin: 0 0 8px; color: #64748b; font-size: 13px; font-weight: 600; text-transform: uppercase; letter-spacing: 0.5px;">Nachricht</p>
      <p style="margin: 0; color: #334155; font-size: 14px; line-height: 1.6; white-space: pre-wrap;">{message}</p>
    </div>
  </div>
  <div style="padding: 16px 32px; background: #f1f5f9; border-top: 1px solid #e2e8f0;">
    <p style="margin: 0; color: #94a3b8; font-size: 12px;">Gesendet über das Kontaktformular auf {SITE_NAME}</p>
  </div>
</div>"""


def render_email(payload: SubmissionPayload) -> RenderedEmail:
    """
    Render subject, plain-text body and HTML body for a submission.

    User-supplied values are HTML-escaped in the HTML body only; the
    plain-text body carries them unchanged.
    """
    interest = interest_label(payload.interest)
    return RenderedEmail(
        subject=build_subject(payload),
        text=_render_text(payload, interest),
        html=_render_html(payload, interest),
    )
