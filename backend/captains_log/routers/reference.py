from fastapi import APIRouter

from captains_log.utils.timezone import COMMON_TIMEZONES

router = APIRouter()


@router.get("/timezones")
async def list_timezones():
    """Common IANA timezones for select boxes."""
    return {"timezones": COMMON_TIMEZONES}
