from party_rsvp.email_service import get_email_service
from party_rsvp.events.repository.read_models import SqlEventReadModel
from party_rsvp.events.repository.write_models import SqlEventWriteModel
from party_rsvp.rsvps.lifecycle import RSVPLifecycleService
from party_rsvp.rsvps.notifications import NotificationDispatcher
from party_rsvp.rsvps.reminders import ReminderService
from party_rsvp.rsvps.repository.read_models import SqlRSVPReadModel
from party_rsvp.rsvps.repository.write_models import SqlRSVPWriteModel
from party_rsvp.rsvps.tokens import get_token_service


def get_rsvp_lifecycle() -> RSVPLifecycleService:
    """Dependency to get the lifecycle service. Override in tests."""
    token_service = get_token_service()
    return RSVPLifecycleService(
        read_model=SqlRSVPReadModel(),
        write_model=SqlRSVPWriteModel(token_service=token_service),
        dispatcher=NotificationDispatcher(
            email_service=get_email_service(),
            token_service=token_service,
        ),
        token_service=token_service,
        event_read_model=SqlEventReadModel(),
    )


def get_reminder_service() -> ReminderService:
    """Dependency to get the scheduled reminder service. Override in tests."""
    token_service = get_token_service()
    return ReminderService(
        event_read_model=SqlEventReadModel(),
        event_write_model=SqlEventWriteModel(),
        rsvp_read_model=SqlRSVPReadModel(),
        rsvp_write_model=SqlRSVPWriteModel(token_service=token_service),
        dispatcher=NotificationDispatcher(
            email_service=get_email_service(),
            token_service=token_service,
        ),
    )
