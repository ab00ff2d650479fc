# keyledger/api/deps.py

import logging
import secrets
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import Depends, Header, Request

from keyledger.config import Settings, get_settings
from keyledger.core.vin import VinDecoder
from keyledger.errors import AuthorizationFailure

logger = logging.getLogger(__name__)


def get_today(settings: Settings = Depends(get_settings)) -> date:
    """Business-local calendar date; the core never looks at the clock itself."""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


def get_now(settings: Settings = Depends(get_settings)) -> datetime:
    return datetime.now(ZoneInfo(settings.TIMEZONE)).replace(tzinfo=None)


def require_cron_secret(
    x_cron_secret: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    expected = settings.CRON_SECRET_TOKEN
    if not expected or not x_cron_secret or not secrets.compare_digest(
        x_cron_secret, expected
    ):
        logger.warning("Unauthorized attempt to access cron endpoint")
        raise AuthorizationFailure("Unauthorized")


def get_vin_decoder(request: Request) -> VinDecoder:
    return request.app.state.vin_decoder
