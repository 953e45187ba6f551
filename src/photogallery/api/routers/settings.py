"""Site settings endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from ...logging_config import log_user_action
from ...services.auth import ADMIN_USER_ID
from ...services.settings_store import SettingsStore
from ..dependencies import get_settings, require_admin

router = APIRouter(prefix="/api/settings", tags=["Settings"])


@router.get("")
def read_settings(settings_store: SettingsStore = Depends(get_settings)) -> dict[str, Any]:
    return settings_store.get()


@router.put("", dependencies=[Depends(require_admin)])
def replace_settings(document: Any = Body(None), settings_store: SettingsStore = Depends(get_settings)) -> dict[str, Any]:
    settings_store.put(document)
    log_user_action(ADMIN_USER_ID, "update_settings")
    return {"success": True}
