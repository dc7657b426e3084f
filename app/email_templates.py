"""
MJML Email Templates
Customer e-mails sent for the waitlist and table bookings
"""

from typing import Optional

THEME = {
    "primary": "#b45309",
    "background": "#fafaf9",
    "text_primary": "#1c1917",
    "text_secondary": "#44403c",
    "text_muted": "#78716c",
    "border": "#e7e5e4",
}


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base MJML layout shared by every customer e-mail"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section padding="20px 0">
          <mj-column>
            <mj-button href="{cta_url}" background-color="{THEME['primary']}" color="#ffffff"
              font-weight="600" border-radius="8px" padding="18px 40px" font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="#ffffff" padding="40px 40px 48px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" padding="0 0 16px 0">
              {title}
            </mj-text>
            {content_sections}
          </mj-column>
        </mj-section>
        {cta_section}
        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="{THEME['text_muted']}" padding="0">
              You are receiving this e-mail because you joined our waitlist or booked a table.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _detail_rows(rows: list[tuple[str, str]]) -> str:
    cells = "".join(
        f'<tr><td style="padding:4px 16px 4px 0;color:{THEME["text_muted"]}">{label}</td>'
        f'<td style="padding:4px 0;font-weight:600">{value}</td></tr>'
        for label, value in rows
    )
    return f'<mj-table font-size="15px" padding="8px 0 0 0">{cells}</mj-table>'


def waitlist_joined_template(
    customer_name: str,
    branch_name: str,
    preferred_time: str,
    guest_count: int,
    estimated_wait: str,
    expires_at: str,
) -> str:
    content = f"""
    <mj-text padding="0 0 16px 0">
      Hi {customer_name}, you are on the waitlist at <strong>{branch_name}</strong>.
      We will e-mail you as soon as a table frees up.
    </mj-text>
    {_detail_rows([
        ("Preferred time", preferred_time),
        ("Guests", str(guest_count)),
        ("Estimated wait", estimated_wait),
        ("Waiting until", expires_at),
    ])}
    """
    return get_base_template(
        title="You're on the waitlist",
        preview_text=f"Estimated wait: {estimated_wait}",
        content_sections=content,
    )


def table_available_template(
    customer_name: str,
    branch_name: str,
    table_name: str,
    time_start: str,
    time_end: str,
    total_deposit: float,
    payment_deadline: str,
    payment_url: Optional[str] = None,
) -> str:
    content = f"""
    <mj-text padding="0 0 16px 0">
      Good news {customer_name}! A table is now available at <strong>{branch_name}</strong>
      and we are holding it for you.
    </mj-text>
    {_detail_rows([
        ("Table", table_name),
        ("From", time_start),
        ("To", time_end),
        ("Deposit", f"{total_deposit:,.0f}"),
        ("Pay before", payment_deadline),
    ])}
    <mj-text padding="16px 0 0 0" color="{THEME['text_muted']}">
      The table is released if the deposit is not paid before the deadline.
    </mj-text>
    """
    return get_base_template(
        title="Your table is ready",
        preview_text=f"Table {table_name} is held until {payment_deadline}",
        content_sections=content,
        cta_url=payment_url,
        cta_label="Pay deposit" if payment_url else None,
    )
