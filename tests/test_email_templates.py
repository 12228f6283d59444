from pool_authority.email_templates import (
    THEME,
    build_merge_data,
    payment_button,
    render_template,
    resolve_company_settings,
    wrap_in_html_email,
)
from pool_authority.schemas import CompanySettings


def test_render_merge_tags_and_truthy_conditional():
    template = "Hello {{name}}, {{#if urgent}}call now!{{/if}}"
    assert render_template(template, {"name": "Sam", "urgent": True}) == "Hello Sam, call now!"


def test_render_drops_block_for_falsy_condition():
    template = "Hello {{name}}, {{#if urgent}}call now!{{/if}}"
    assert render_template(template, {"name": "Sam", "urgent": False}) == "Hello Sam, "


def test_render_replaces_every_occurrence():
    out = render_template("{{name}} and {{name}} again", {"name": "Ana"})
    assert out == "Ana and Ana again"


def test_render_falsy_and_unknown_tags_become_empty():
    out = render_template("[{{balance}}][{{missing}}][{{note}}]", {"balance": 0, "note": None})
    assert out == "[][][]"


def test_render_substitutes_values_literally():
    out = render_template("Total: {{amount}}", {"amount": "$5.00 \\1"})
    assert out == "Total: $5.00 \\1"


def test_render_condition_on_missing_key_removes_block():
    out = render_template("A{{#if paid}} thanks{{/if}}B", {})
    assert out == "AB"


def test_render_conditional_spanning_lines():
    template = "Hi\n{{#if chem}}Chlorine: {{chem}}\n{{/if}}Bye"
    assert render_template(template, {"chem": "3 ppm"}) == "Hi<br>Chlorine: 3 ppm<br>Bye"
    assert render_template(template, {}) == "Hi<br>Bye"


def test_render_bold_and_newlines():
    out = render_template("**Due:** today\n**Amount:** $80", {})
    assert out == "<strong>Due:</strong> today<br><strong>Amount:</strong> $80"


def test_render_plain_text_only_converts_bold_and_newlines():
    text = "Nothing to merge here.\nSee you next week."
    assert render_template(text, {"name": "x"}) == text.replace("\n", "<br>")


def test_resolve_company_settings_defaults():
    company = resolve_company_settings(None)
    assert company.company_name == "Pool Service"
    assert company.primary_color == THEME["primary"]
    assert company.accent_color == THEME["accent"]
    assert company.owner_name == ""
    assert company.logo_url == ""


def test_resolve_company_settings_from_camel_case_dict_and_schema():
    raw = {"companyName": "Blue Wave Pools", "phone": "555-0100", "accentColor": "#00ffcc"}
    from_dict = resolve_company_settings(raw)
    from_schema = resolve_company_settings(CompanySettings(**raw))

    for company in (from_dict, from_schema):
        assert company.company_name == "Blue Wave Pools"
        assert company.phone == "555-0100"
        assert company.accent_color == "#00ffcc"
        assert company.primary_color == THEME["primary"]


def test_build_merge_data_caller_data_wins():
    company = resolve_company_settings({"companyName": "Blue Wave Pools", "email": "hi@bw.test"})
    merge_data = build_merge_data(company, {"company_name": "Override Co", "client": "Jo"})

    assert merge_data["company_name"] == "Override Co"
    assert merge_data["company_email"] == "hi@bw.test"
    assert merge_data["client"] == "Jo"
    assert "payment_link" not in merge_data


def test_build_merge_data_includes_payment_link_for_invoices():
    company = resolve_company_settings(None)
    assert build_merge_data(company, None, payment_link="")["payment_link"] == ""
    assert build_merge_data(company, None, payment_link="https://pay")["payment_link"] == "https://pay"


def test_wrap_in_html_email_branding():
    html = wrap_in_html_email(
        "<p>Your pool is sparkling</p>",
        {
            "companyName": "Blue Wave Pools",
            "logoUrl": "https://cdn.test/logo.png",
            "primaryColor": "#112233",
            "accentColor": "#445566",
            "address": "1 Shore Rd",
            "phone": "555-0100",
            "email": "hi@bw.test",
        },
    )

    assert html.lstrip().startswith("<!DOCTYPE html>")
    assert "linear-gradient(135deg, #112233 0%, #445566 100%)" in html
    assert '<img src="https://cdn.test/logo.png"' in html
    assert "<h1>Blue Wave Pools</h1>" in html
    assert "<p>Your pool is sparkling</p>" in html
    assert "1 Shore Rd<br>" in html
    assert "555-0100 | hi@bw.test" in html


def test_wrap_in_html_email_without_settings_keeps_layout():
    html = wrap_in_html_email("<b>raw</b>", None)

    assert "<img" not in html
    assert "<h1>Pool Service</h1>" in html
    assert '<div class="footer">' in html
    assert " | " in html
    assert "<b>raw</b>" in html


def test_payment_button_links_to_payment():
    assert payment_button("https://pay.test/abc") == (
        '<br><br><a href="https://pay.test/abc" class="btn">💳 Pay Now</a>'
    )


def test_render_keeps_braces_inside_values():
    out = render_template("Note: {{note}} {{unknown}}", {"note": "use {{code}}"})
    assert out == "Note: use {{code}} "


def test_render_booleans_as_lowercase():
    assert render_template("Paid: {{paid}}", {"paid": True}) == "Paid: true"
