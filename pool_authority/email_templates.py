"""
Email Templates
Merge-tag processing for caller-supplied templates and the branded HTML
shell every outgoing email is wrapped in
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .config import DEFAULT_COMPANY_NAME

# Default brand colors - Navy/Sky color scheme
THEME = {
    "primary": "#1e3a5f",
    "accent": "#5bb4d8",
    "background": "#f5f5f5",
    "footer_bg": "#f8f9fa",
    "text": "#333",
    "text_muted": "#666",
}

MERGE_TAG_PATTERN = re.compile(r"\{\{(\w+)\}\}")
CONDITIONAL_PATTERN = re.compile(r"\{\{#if (\w+)\}\}([\s\S]*?)\{\{/if\}\}")
BOLD_PATTERN = re.compile(r"\*\*(.*?)\*\*")

TEST_EMAIL_SUBJECT = "Pool Authority - Email Test"
TEST_EMAIL_HTML = (
    "<h1>✅ Email is working!</h1>"
    "<p>Your Pool Authority email configuration is correct.</p>"
)


@dataclass(frozen=True)
class ResolvedCompanySettings:
    """Company branding with every field populated"""

    company_name: str
    owner_name: str
    phone: str
    email: str
    address: str
    logo_url: str
    primary_color: str
    accent_color: str


def resolve_company_settings(settings: Optional[Any] = None) -> ResolvedCompanySettings:
    """
    Fill in defaults for any missing company setting.

    Accepts a CompanySettings schema, a camelCase dict as sent by the
    front-end, or None.
    """
    if settings is None:
        values: Mapping[str, Any] = {}
    elif isinstance(settings, Mapping):
        values = settings
    else:
        values = settings.model_dump(by_alias=True)

    def pick(key: str, default: str = "") -> str:
        return values.get(key) or default

    return ResolvedCompanySettings(
        company_name=pick("companyName", DEFAULT_COMPANY_NAME),
        owner_name=pick("ownerName"),
        phone=pick("phone"),
        email=pick("email"),
        address=pick("address"),
        logo_url=pick("logoUrl"),
        primary_color=pick("primaryColor", THEME["primary"]),
        accent_color=pick("accentColor", THEME["accent"]),
    )


def build_merge_data(
    company: ResolvedCompanySettings,
    data: Optional[Mapping[str, Any]] = None,
    payment_link: Optional[str] = None,
) -> dict[str, Any]:
    """Company-derived merge tags, overridden by caller data on collision"""
    merge_data: dict[str, Any] = {
        "company_name": company.company_name,
        "owner_name": company.owner_name,
        "company_phone": company.phone,
        "company_email": company.email,
    }
    if payment_link is not None:
        merge_data["payment_link"] = payment_link or ""
    merge_data.update(data or {})
    return merge_data


def _as_text(value: Any) -> str:
    if not value:
        return ""
    # JSON booleans read as true/false in the email text
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def convert_newlines(text: str) -> str:
    return text.replace("\n", "<br>")


def render_template(template: str, data: Mapping[str, Any]) -> str:
    """
    Resolve merge tags and conditionals in a template.

    Steps run in a fixed order:
    1. {{key}} -> data[key] (empty string when falsy or unknown)
    2. {{#if key}}...{{/if}} kept only when data[key] is truthy
    3. **bold** -> <strong>bold</strong>
    4. newlines -> <br>

    Conditionals are matched flat and non-greedy, nested blocks are not
    supported.
    """
    result = template or ""

    # Unknown tags are dropped from the template before values go in
    result = MERGE_TAG_PATTERN.sub(
        lambda match: match.group(0) if match.group(1) in data else "", result
    )
    for key, value in data.items():
        result = result.replace(f"{{{{{key}}}}}", _as_text(value))

    result = CONDITIONAL_PATTERN.sub(
        lambda match: match.group(2) if data.get(match.group(1)) else "", result
    )

    result = BOLD_PATTERN.sub(r"<strong>\1</strong>", result)

    return convert_newlines(result)


def payment_button(payment_link: str) -> str:
    """Call-to-action block appended to invoices"""
    return f'<br><br><a href="{payment_link}" class="btn">💳 Pay Now</a>'


def wrap_in_html_email(content: str, settings: Optional[Any] = None) -> str:
    """
    Base HTML wrapper for all emails.

    The content is injected verbatim; callers rely on being able to send
    their own markup.
    """
    company = (
        settings
        if isinstance(settings, ResolvedCompanySettings)
        else resolve_company_settings(settings)
    )

    logo = ""
    if company.logo_url:
        logo = (
            f'<img src="{company.logo_url}" alt="Logo" '
            f'style="max-height: 60px; margin-bottom: 10px;">'
        )

    return f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <style>
    body {{ font-family: 'Segoe UI', Arial, sans-serif; line-height: 1.6; color: {THEME['text']}; margin: 0; padding: 0; background: {THEME['background']}; }}
    .container {{ max-width: 600px; margin: 20px auto; background: white; border-radius: 12px; overflow: hidden; box-shadow: 0 2px 10px rgba(0,0,0,0.1); }}
    .header {{ background: linear-gradient(135deg, {company.primary_color} 0%, {company.accent_color} 100%); color: white; padding: 30px; text-align: center; }}
    .header h1 {{ margin: 0; font-size: 24px; }}
    .content {{ padding: 30px; }}
    .footer {{ background: {THEME['footer_bg']}; padding: 20px; text-align: center; font-size: 12px; color: {THEME['text_muted']}; }}
    .btn {{ display: inline-block; padding: 12px 30px; background: {company.primary_color}; color: white; text-decoration: none; border-radius: 6px; margin: 10px 0; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      {logo}
      <h1>{company.company_name}</h1>
    </div>
    <div class="content">
      {content}
    </div>
    <div class="footer">
      {company.company_name}<br>
      {company.address}<br>
      {company.phone} | {company.email}
    </div>
  </div>
</body>
</html>"""
