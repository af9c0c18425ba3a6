from fastapi import APIRouter

from .features.admin_send_bulk_email.router import router as admin_send_bulk_email_router
from .features.admin_send_email.router import router as admin_send_email_router
from .features.admin_update_rsvp.router import router as admin_update_rsvp_router
from .features.cancel_rsvp.router import router as cancel_rsvp_router
from .features.create_rsvp.router import router as create_rsvp_router
from .features.cron_send_reminders.router import router as cron_send_reminders_router
from .features.get_rsvp.router import router as get_rsvp_router
from .features.list_rsvps.router import router as list_rsvps_router
from .features.stats.router import router as stats_router
from .features.update_rsvp.router import router as update_rsvp_router

router = APIRouter()

router.include_router(create_rsvp_router, tags=["RSVP"])
router.include_router(list_rsvps_router, tags=["RSVP"])
router.include_router(cancel_rsvp_router, tags=["RSVP"])
router.include_router(get_rsvp_router, tags=["RSVP"])
router.include_router(update_rsvp_router, tags=["RSVP"])
router.include_router(stats_router, tags=["Admin"])
router.include_router(admin_send_email_router, tags=["Admin"])
router.include_router(admin_send_bulk_email_router, tags=["Admin"])
router.include_router(admin_update_rsvp_router, tags=["Admin"])
router.include_router(cron_send_reminders_router, tags=["Cron"])
