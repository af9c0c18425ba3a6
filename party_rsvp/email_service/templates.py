import html
from dataclasses import dataclass

from party_rsvp.events.dtos import EventDTO
from party_rsvp.rsvps.dtos import EmailVariant, Language


@dataclass(frozen=True)
class VariantCopy:
    subject: str
    badge: str
    greeting: str
    main_text: str
    closing_text: str
    link_intro: str
    button_label: str
    link_hint: str


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html_body: str
    text_body: str


@dataclass
class EmailTemplates:
    # Copy per language and variant. {name} and {title} are filled in, already escaped.
    COPY = {
        Language.ES: {
            EmailVariant.CONFIRMATION: VariantCopy(
                subject="Confirmación - {title}",
                badge="",
                greeting="¡Hola {name}!",
                main_text="Tu asistencia ha sido confirmada para {title}.",
                closing_text="¡Nos vemos ahí! 🎉",
                link_intro="Si necesitas modificar tus datos o cancelar tu asistencia:",
                button_label="Modificar o Cancelar",
                link_hint="Si cancelas, puedes usar este mismo enlace para reconfirmar después.",
            ),
            EmailVariant.REMINDER: VariantCopy(
                subject="Recordatorio - {title}",
                badge="Recordatorio",
                greeting="¡Hola {name}! 👋",
                main_text="Te recordamos que tu asistencia está confirmada para {title}.",
                closing_text="¡Te esperamos! 🎊",
                link_intro="Si necesitas modificar tus datos o cancelar tu asistencia:",
                button_label="Modificar o Cancelar",
                link_hint="Si cancelas, puedes usar este mismo enlace para reconfirmar después.",
            ),
            EmailVariant.RE_INVITATION: VariantCopy(
                subject="Te extrañamos - {title}",
                badge="Te extrañamos",
                greeting="¡Hola {name}! 👋",
                main_text=(
                    "Sabemos que habías cancelado tu asistencia a {title}, pero las puertas "
                    "siguen abiertas por si tus planes cambian."
                ),
                closing_text="Sin presión, nos encantaría verte ahí. 🌟",
                link_intro="Si decides acompañarnos, haz clic abajo para reconfirmar tu asistencia.",
                button_label="Reconfirmar Asistencia ✨",
                link_hint="Puedes cambiar de opinión las veces que necesites.",
            ),
        },
        Language.EN: {
            EmailVariant.CONFIRMATION: VariantCopy(
                subject="Confirmation - {title}",
                badge="",
                greeting="Hi {name}!",
                main_text="Your attendance to {title} is confirmed.",
                closing_text="See you there! 🎉",
                link_intro="Need to change your details or cancel?",
                button_label="Change or Cancel",
                link_hint="If you cancel, the same link lets you reconfirm later.",
            ),
            EmailVariant.REMINDER: VariantCopy(
                subject="Reminder - {title}",
                badge="Reminder",
                greeting="Hi {name}! 👋",
                main_text="A friendly reminder that you are confirmed for {title}.",
                closing_text="We're waiting for you! 🎊",
                link_intro="Need to change your details or cancel?",
                button_label="Change or Cancel",
                link_hint="If you cancel, the same link lets you reconfirm later.",
            ),
            EmailVariant.RE_INVITATION: VariantCopy(
                subject="We miss you - {title}",
                badge="We miss you",
                greeting="Hi {name}! 👋",
                main_text=(
                    "We know you cancelled your attendance to {title}, but the doors are "
                    "still open if your plans change."
                ),
                closing_text="No pressure, we'd love to see you there. 🌟",
                link_intro="If you can make it, click below to reconfirm your attendance.",
                button_label="Reconfirm Attendance ✨",
                link_hint="You can change your mind as many times as you need.",
            ),
        },
    }

    LABELS = {
        Language.ES: {
            "date": "Fecha",
            "time": "Hora",
            "location": "Lugar",
            "plus_one": "Acompañante",
            "plus_one_value": "+1 Confirmado",
            "copy_link": "O copia y pega este enlace en tu navegador:",
            "contact": "¿Preguntas? Contáctanos:",
            "footer": "Este email fue enviado porque confirmaste tu asistencia a {title}",
        },
        Language.EN: {
            "date": "Date",
            "time": "Time",
            "location": "Location",
            "plus_one": "Plus one",
            "plus_one_value": "+1 Confirmed",
            "copy_link": "Or copy and paste this link into your browser:",
            "contact": "Questions? Contact us:",
            "footer": "You received this email because you RSVP'd to {title}",
        },
    }

    RE_INVITATION_BUTTON_COLOR = "#059669"

    HTML_LAYOUT = """<!DOCTYPE html>
<html lang="{lang}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <meta name="color-scheme" content="light only">
  <title>{subject}</title>
</head>
<body style="margin: 0; padding: 0; font-family: 'Segoe UI', Arial, sans-serif; background-color: {background_color};">
  <table role="presentation" style="width: 100%; border-collapse: collapse; background-color: {background_color};">
    <tr>
      <td align="center" style="background-image: url('{background_image_url}'); background-size: cover; background-position: center top; padding: 48px 20px;">
        <table role="presentation" style="width: 580px; max-width: 100%; border-collapse: collapse;">
          <tr>
            <td style="padding: 0 0 32px 0; text-align: center;">
              {badge_html}
              <h1 style="margin: 0; color: {text_color}; font-size: 36px; letter-spacing: 4px; text-transform: uppercase;">{title}</h1>
              <h2 style="margin: 8px 0 0 0; color: {text_color}; font-size: 18px; letter-spacing: 3px; text-transform: uppercase;">{subtitle}</h2>
            </td>
          </tr>
          <tr>
            <td style="background-color: rgba(255,255,255,0.9); border-radius: 16px; border-top: 4px solid {primary_color}; padding: 40px 36px;">
              <p style="margin: 0 0 16px 0; font-size: 20px; color: #1a1a1a;">{greeting}</p>
              <p style="margin: 0 0 8px 0; font-size: 15px; line-height: 1.7; color: #4a4a4a;">{main_text}</p>
              <p style="margin: 0 0 32px 0; font-size: 15px; line-height: 1.7; color: #4a4a4a;">{closing_text}</p>

              <table role="presentation" style="width: 100%; border-collapse: collapse; background-color: #f7f7f7; border-radius: 12px; margin-bottom: 32px;">
                <tr><td style="padding: 20px 28px 0 28px;">
                  <p style="margin: 0; font-size: 11px; color: #888888; text-transform: uppercase;">📅 {date_label}</p>
                  <p style="margin: 0; font-size: 16px; color: #1a1a1a; font-weight: 600;">{date}</p>
                </td></tr>
                <tr><td style="padding: 16px 28px 0 28px;">
                  <p style="margin: 0; font-size: 11px; color: #888888; text-transform: uppercase;">⏰ {time_label}</p>
                  <p style="margin: 0; font-size: 16px; color: #1a1a1a; font-weight: 600;">{time}</p>
                </td></tr>
                <tr><td style="padding: 16px 28px 20px 28px;">
                  <p style="margin: 0; font-size: 11px; color: #888888; text-transform: uppercase;">📍 {location_label}</p>
                  <p style="margin: 0; font-size: 16px; color: #1a1a1a; font-weight: 600;">{location}</p>
                </td></tr>
                {plus_one_html}
              </table>

              {details_html}

              <p style="margin: 0 0 24px 0; font-size: 14px; line-height: 1.6; color: #666666; text-align: center;">{link_intro}</p>
              <p style="text-align: center; margin: 0 0 24px 0;">
                <a href="{cancel_url}" target="_blank" style="background-color: {button_color}; border-radius: 8px; color: #ffffff; display: inline-block; font-size: 15px; line-height: 52px; text-decoration: none; width: 260px;">{button_label}</a>
              </p>
              <p style="margin: 0 0 16px 0; font-size: 12px; color: #999999; text-align: center;">💡 {link_hint}</p>
              <p style="margin: 0; font-size: 11px; line-height: 1.6; color: #aaaaaa; text-align: center;">
                {copy_link_label}<br>
                <span style="color: #666666; word-break: break-all;">{cancel_url}</span>
              </p>
            </td>
          </tr>
          <tr>
            <td style="padding: 32px 0 0 0; text-align: center;">
              {contact_html}
              <p style="margin: 0; font-size: 11px; color: {accent_color};">{footer}</p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""

    BADGE_HTML = """<p style="margin: 0 auto 16px auto; color: {accent_color}; font-size: 11px; font-weight: 600; text-transform: uppercase; letter-spacing: 2px;">{badge}</p>"""

    PLUS_ONE_HTML = """<tr><td style="padding: 0 28px 20px 28px;">
                  <p style="margin: 0; font-size: 11px; color: #888888; text-transform: uppercase;">👥 {label}</p>
                  <p style="margin: 0; font-size: 16px; color: {primary_color}; font-weight: 600;">{value}</p>
                </td></tr>"""

    DETAILS_HTML = """<p style="margin: 0 0 32px 0; font-size: 14px; color: #4a4a4a; line-height: 1.8;">{details}</p>"""

    CONTACT_HTML = """<p style="margin: 0 0 8px 0; font-size: 13px; color: {text_color};">{label} {host_email}</p>"""

    TEXT_LAYOUT = """{greeting}

{main_text}
{closing_text}

{date_label}: {date}
{time_label}: {time}
{location_label}: {location}
{plus_one_line}{details_block}
{link_intro}
{cancel_url}

{link_hint}
{contact_line}"""

    @classmethod
    def get_copy(cls, language: Language, variant: EmailVariant) -> VariantCopy:
        return cls.COPY.get(language, cls.COPY[Language.ES])[variant]

    @classmethod
    def render(
        cls,
        *,
        event: EventDTO,
        variant: EmailVariant,
        guest_name: str,
        plus_one: bool,
        cancel_url: str,
        app_url: str,
        language: Language = Language.ES,
    ) -> RenderedEmail:
        copy = cls.get_copy(language, variant)
        labels = cls.LABELS.get(language, cls.LABELS[Language.ES])
        theme = event.theme

        subject = copy.subject.format(title=event.title)
        text_body = cls._render_text(event, copy, labels, guest_name, plus_one, cancel_url)

        esc = html.escape
        title = esc(event.title)
        name_html = f"<strong>{esc(guest_name)}</strong>"
        title_html = f"<strong>{title}</strong>"

        background_image_url = event.background_image_url or "/background.png"
        if not background_image_url.startswith("http"):
            background_image_url = f"{app_url.rstrip('/')}{background_image_url}"

        html_body = cls.HTML_LAYOUT.format(
            lang=language.value,
            subject=esc(subject),
            background_color=esc(theme.background_color),
            background_image_url=esc(background_image_url),
            badge_html=(
                cls.BADGE_HTML.format(accent_color=esc(theme.accent_color), badge=esc(copy.badge))
                if copy.badge
                else ""
            ),
            text_color=esc(theme.text_color),
            primary_color=esc(theme.primary_color),
            accent_color=esc(theme.accent_color),
            title=title,
            subtitle=esc(event.subtitle),
            greeting=copy.greeting.format(name=name_html),
            main_text=copy.main_text.format(title=title_html),
            closing_text=copy.closing_text,
            date_label=labels["date"],
            date=esc(event.date),
            time_label=labels["time"],
            time=esc(event.time),
            location_label=labels["location"],
            location=esc(event.location),
            plus_one_html=(
                cls.PLUS_ONE_HTML.format(
                    label=labels["plus_one"],
                    value=labels["plus_one_value"],
                    primary_color=esc(theme.primary_color),
                )
                if plus_one
                else ""
            ),
            details_html=(
                cls.DETAILS_HTML.format(details="<br>".join(esc(line) for line in event.details.splitlines()))
                if event.details
                else ""
            ),
            link_intro=copy.link_intro,
            cancel_url=esc(cancel_url),
            button_color=(
                cls.RE_INVITATION_BUTTON_COLOR
                if variant == EmailVariant.RE_INVITATION
                else esc(theme.primary_color)
            ),
            button_label=copy.button_label,
            link_hint=copy.link_hint,
            copy_link_label=labels["copy_link"],
            contact_html=(
                cls.CONTACT_HTML.format(
                    text_color=esc(theme.text_color),
                    label=labels["contact"],
                    host_email=esc(event.host_email),
                )
                if event.host_email
                else ""
            ),
            footer=labels["footer"].format(title=title),
        )

        return RenderedEmail(subject=subject, html_body=html_body, text_body=text_body)

    @classmethod
    def _render_text(
        cls,
        event: EventDTO,
        copy: VariantCopy,
        labels: dict[str, str],
        guest_name: str,
        plus_one: bool,
        cancel_url: str,
    ) -> str:
        return cls.TEXT_LAYOUT.format(
            greeting=copy.greeting.format(name=guest_name),
            main_text=copy.main_text.format(title=event.title),
            closing_text=copy.closing_text,
            date_label=labels["date"],
            date=event.date,
            time_label=labels["time"],
            time=event.time,
            location_label=labels["location"],
            location=event.location,
            plus_one_line=f"{labels['plus_one']}: {labels['plus_one_value']}\n" if plus_one else "",
            details_block=f"\n{event.details}\n" if event.details else "",
            link_intro=copy.link_intro,
            cancel_url=cancel_url,
            link_hint=copy.link_hint,
            contact_line=f"{labels['contact']} {event.host_email}\n" if event.host_email else "",
        )
