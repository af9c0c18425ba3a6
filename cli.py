"""CLI commands for party RSVP management."""

import asyncio
from datetime import UTC, datetime
from typing import Optional

import typer

from party_rsvp.config.settings import settings
from party_rsvp.events.dtos import (
    EventAlreadyExistsError,
    EventCreateDTO,
    EventNotFoundError,
    InvalidEventError,
)
from party_rsvp.events.repository.read_models import SqlEventReadModel
from party_rsvp.events.repository.write_models import SqlEventWriteModel
from party_rsvp.rsvps.dependencies import get_reminder_service
from party_rsvp.rsvps.dtos import DuplicateGuestError, RSVPCreateDTO, RSVPStatus, RSVPUpdateDTO
from party_rsvp.rsvps.repository.read_models import SqlRSVPReadModel
from party_rsvp.rsvps.repository.write_models import SqlRSVPWriteModel
from party_rsvp.rsvps.tokens import get_token_service

app = typer.Typer(help="CLI commands for party RSVP management")

DEMO_GUESTS = [
    {
        "name": "María González",
        "email": "maria.gonzalez@example.com",
        "phone": "+52 1 55 2345 6789",
        "plus_one": False,
    },
    {
        "name": "Carlos Ramírez",
        "email": "carlos.ramirez@example.com",
        "phone": "+52 1 55 3456 7890",
        "plus_one": True,
    },
    {
        "name": "Ana López",
        "email": "ana.lopez@example.com",
        "phone": "+52 1 55 4567 8901",
        "plus_one": False,
    },
]
# One demo guest has changed their mind
CANCELLED_DEMO_EMAIL = "ana.lopez@example.com"


@app.command()
def create_event(
    slug: str = typer.Argument(..., help="URL slug, e.g. rooftop-party"),
    title: str = typer.Option(..., "--title", "-t", help="Event title"),
    date: str = typer.Option("", help='Free text date, e.g. "Sábado 15 de Marzo 2025"'),
    time: str = typer.Option("", help='Free text time, e.g. "22:00"'),
    location: str = typer.Option("", help="Where the party is"),
    host_email: str = typer.Option("", help="Contact address shown in emails"),
    reminder_at: Optional[datetime] = typer.Option(
        None,
        help="When the reminder email goes out, in UTC",
    ),
    no_confirmation: bool = typer.Option(False, help="Do not email guests when they RSVP"),
):
    """Create an event guests can RSVP to."""
    if reminder_at is not None:
        reminder_at = reminder_at.replace(tzinfo=UTC)

    async def _create_event():
        return await SqlEventWriteModel().create_event(
            EventCreateDTO(
                slug=slug,
                title=title,
                date=date,
                time=time,
                location=location,
                host_email=host_email,
                email_confirmation_enabled=not no_confirmation,
                reminder_scheduled_at=reminder_at,
            )
        )

    try:
        event = asyncio.run(_create_event())
    except InvalidEventError as e:
        typer.secho(e.reason, fg=typer.colors.RED)
        raise typer.Exit(code=1)
    except EventAlreadyExistsError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    typer.secho("Event created!", fg=typer.colors.GREEN)
    typer.secho(f"  Slug: {event.slug}", fg=typer.colors.BLUE)
    typer.secho(f"  ID: {event.id}", fg=typer.colors.CYAN)
    if event.reminder_enabled:
        typer.secho(f"  Reminder scheduled at: {event.reminder_scheduled_at}", fg=typer.colors.CYAN)


@app.command()
def add_demo_data(
    event: str = typer.Option(settings.default_event_slug, help="Event slug to add the guests to"),
):
    """Add three demo guests to an event. Guests that already exist are skipped."""

    async def _add_demo_data():
        found = await SqlEventReadModel().get_event(event)
        if found is None:
            raise EventNotFoundError(event)

        write_model = SqlRSVPWriteModel(token_service=get_token_service())
        added, skipped = [], []
        for guest in DEMO_GUESTS:
            try:
                rsvp = await write_model.create(RSVPCreateDTO(event_id=found.slug, **guest))
            except DuplicateGuestError:
                skipped.append(guest["email"])
                continue
            if rsvp.email == CANCELLED_DEMO_EMAIL:
                rsvp = await write_model.update(rsvp.id, RSVPUpdateDTO(status=RSVPStatus.CANCELLED))
            added.append(rsvp)
        return added, skipped

    try:
        added, skipped = asyncio.run(_add_demo_data())
    except EventNotFoundError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    typer.secho(f"Added {len(added)} demo guest(s) to {event}", fg=typer.colors.GREEN)
    for rsvp in added:
        typer.secho(f"  - {rsvp.name} <{rsvp.email}> ({rsvp.status.value})", fg=typer.colors.BLUE)
    for email in skipped:
        typer.secho(f"  Skipped {email}: already registered", fg=typer.colors.YELLOW)


@app.command()
def send_reminders():
    """Send every reminder that is due now."""
    runs = asyncio.run(get_reminder_service().send_scheduled_reminders())

    if not runs:
        typer.secho("No reminders due", fg=typer.colors.YELLOW)
        return

    for run in runs:
        if run.skipped:
            typer.secho(f"{run.event_id}: event already took place, skipped", fg=typer.colors.YELLOW)
            continue
        color = typer.colors.GREEN if not run.failed else typer.colors.RED
        typer.secho(f"{run.event_id}: {run.sent} sent, {run.failed} failed", fg=color)
        for error in run.errors:
            typer.secho(f"  {error}", fg=typer.colors.RED)


@app.command()
def stats(
    event: str = typer.Option(settings.default_event_slug, help="Event slug"),
):
    """Show RSVP counts for an event."""
    event_stats = asyncio.run(SqlRSVPReadModel().compute_stats(event))

    typer.secho(f"RSVPs for {event}", fg=typer.colors.GREEN)
    typer.secho(f"  Total: {event_stats.total}", fg=typer.colors.BLUE)
    typer.secho(f"  Confirmed: {event_stats.confirmed}", fg=typer.colors.BLUE)
    typer.secho(f"  Cancelled: {event_stats.cancelled}", fg=typer.colors.BLUE)


if __name__ == "__main__":
    app()
