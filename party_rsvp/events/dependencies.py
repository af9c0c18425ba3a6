from party_rsvp.events.repository.read_models import EventReadModel, SqlEventReadModel
from party_rsvp.events.repository.write_models import EventWriteModel, SqlEventWriteModel


def get_event_read_model() -> EventReadModel:
    """Dependency to get the event read model. Override in tests."""
    return SqlEventReadModel()


def get_event_write_model() -> EventWriteModel:
    """Dependency to get the event write model. Override in tests."""
    return SqlEventWriteModel()
