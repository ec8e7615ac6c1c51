"""Endpoints for recording and reading library activity."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from mangashelf.application.use_cases.activity import ActivityRecorder
from mangashelf.domain.entities import ActivityEntry
from mangashelf.domain.visibility import AuthState
from mangashelf.interfaces.api.dependencies import (
    get_activity_recorder,
    get_auth_state,
    require_admin,
)
from mangashelf.interfaces.api.schemas import ActivityCreate, ActivityEntryRead

router = APIRouter(prefix="/activity", tags=["activity"])


def _entry_to_schema(entry: ActivityEntry) -> ActivityEntryRead:
    return ActivityEntryRead(
        message=entry.message,
        timestamp=entry.timestamp,
        user=entry.user,
        context=entry.context,
        details=list(entry.details),
    )


@router.post(
    "/",
    response_model=ActivityEntryRead,
    status_code=status.HTTP_201_CREATED,
    responses={204: {"description": "Empty message, nothing recorded"}},
)
async def record_activity(
    payload: ActivityCreate,
    auth: AuthState = Depends(get_auth_state),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
):
    """Record an activity entry and notify the activity webhook."""

    if payload.webhook_override and not auth.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins may choose the webhook target",
        )

    identity = auth.identity
    entry = await recorder.record(
        payload.message,
        email=identity.email if identity else None,
        name=identity.display_name if identity else None,
        target_override=payload.webhook_override,
        persist_locally=payload.persist_locally,
        context=payload.context,
        list_name=payload.list_name,
        action=payload.action,
        details=payload.details,
    )
    if entry is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return _entry_to_schema(entry)


@router.get("/", response_model=list[ActivityEntryRead])
def list_activity(
    recorder: ActivityRecorder = Depends(get_activity_recorder),
    _: AuthState = Depends(require_admin),
) -> list[ActivityEntryRead]:
    """Return the local activity log, newest first."""

    return [_entry_to_schema(entry) for entry in recorder.recent()]


__all__ = ["router"]
