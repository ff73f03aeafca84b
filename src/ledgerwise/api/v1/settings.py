"""User settings endpoints."""

from fastapi import APIRouter, Depends

from ledgerwise.api.deps import get_settings_service
from ledgerwise.periods.definitions import PeriodMode, period_mode_label
from ledgerwise.schemas.analytics import PeriodModeSetting, PeriodModeUpdate
from ledgerwise.services.settings import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


def _to_response(mode: PeriodMode) -> PeriodModeSetting:
    return PeriodModeSetting(period_mode=mode, label=period_mode_label(mode))


@router.get("/period-mode", response_model=PeriodModeSetting)
async def get_period_mode(service: SettingsService = Depends(get_settings_service)) -> PeriodModeSetting:
    return _to_response(await service.get_period_mode())


@router.put("/period-mode", response_model=PeriodModeSetting)
async def set_period_mode(
    payload: PeriodModeUpdate,
    service: SettingsService = Depends(get_settings_service),
) -> PeriodModeSetting:
    return _to_response(await service.set_period_mode(payload.period_mode))
