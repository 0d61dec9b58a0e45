"""
MJML Email Templates
Booking emails sent to clients and administrators
"""

from html import escape
from typing import Optional

THEME = {
    "primary": "#a3785b",
    "background": "#faf7f5",
    "text_primary": "#2b2320",
    "text_secondary": "#4a3f3a",
    "text_muted": "#8a7d76",
    "border": "#eadfd8",
    "danger": "#c0504d",
}

BUSINESS_NAME = "Massage & Bien-être"


def get_base_template(title: str, preview_text: str, content_sections: str) -> str:
    """Base MJML template wrapper for all emails"""
    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="#ffffff" padding="32px 40px 48px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        <mj-section padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="{THEME['text_muted']}" padding="0">
              {escape(BUSINESS_NAME)}
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _detail_rows(rows: list[tuple[str, Optional[str]]]) -> str:
    """Label/value lines, skipping empty values"""
    lines = [
        f"<strong>{escape(label)} :</strong> {escape(str(value))}"
        for label, value in rows
        if value not in (None, "")
    ]
    body = "<br/>".join(lines)
    return f"""
    <mj-text padding="16px 0" border-top="1px solid {THEME['border']}">
      {body}
    </mj-text>
    """


def booking_confirmation_template(
    client_name: str,
    massage_name: str,
    booking_date: str,
    booking_time: str,
    duration_minutes: int,
    price: float,
) -> str:
    """Confirmation sent to the client after a reservation"""
    details = _detail_rows(
        [
            ("Massage", massage_name),
            ("Date", booking_date),
            ("Heure", booking_time),
            ("Durée", f"{duration_minutes} minutes"),
            ("Prix", f"{price:.2f} €"),
        ]
    )
    content = f"""
    <mj-text>
      Bonjour {escape(client_name)},
    </mj-text>

    <mj-text>
      Votre demande de rendez-vous a bien été enregistrée. Nous avons hâte de vous accueillir.
    </mj-text>

    {details}
    """

    return get_base_template(
        title="Confirmation de votre rendez-vous",
        preview_text=f"{escape(massage_name)} le {booking_date} à {booking_time}",
        content_sections=content,
    )


def booking_cancellation_template(
    client_name: str,
    massage_name: str,
    booking_date: str,
    booking_time: str,
    duration_minutes: int,
    price: float,
) -> str:
    """Notice sent to the client when a reservation is cancelled"""
    details = _detail_rows(
        [
            ("Massage", massage_name),
            ("Date", booking_date),
            ("Heure", booking_time),
            ("Durée", f"{duration_minutes} minutes"),
            ("Prix", f"{price:.2f} €"),
        ]
    )
    content = f"""
    <mj-text>
      Bonjour {escape(client_name)},
    </mj-text>

    <mj-text color="{THEME['danger']}">
      Votre rendez-vous a été annulé.
    </mj-text>

    {details}

    <mj-text>
      N'hésitez pas à réserver un nouveau créneau quand vous le souhaitez.
    </mj-text>
    """

    return get_base_template(
        title="Annulation de votre rendez-vous",
        preview_text=f"Votre rendez-vous du {booking_date} est annulé",
        content_sections=content,
    )


def admin_notification_template(
    client_name: str,
    client_email: str,
    client_phone: Optional[str],
    massage_name: str,
    booking_date: str,
    booking_time: str,
    duration_minutes: int,
    price: float,
    notes: Optional[str] = None,
) -> str:
    """New reservation notice sent to every administrator"""
    details = _detail_rows(
        [
            ("Client", client_name),
            ("Email", client_email),
            ("Téléphone", client_phone),
            ("Massage", massage_name),
            ("Date", booking_date),
            ("Heure", booking_time),
            ("Durée", f"{duration_minutes} minutes"),
            ("Prix", f"{price:.2f} €"),
            ("Commentaires", notes),
        ]
    )
    content = f"""
    <mj-text>
      Une nouvelle réservation vient d'être effectuée.
    </mj-text>

    {details}
    """

    return get_base_template(
        title="Nouvelle réservation",
        preview_text=f"{escape(client_name)} a réservé {escape(massage_name)}",
        content_sections=content,
    )
