from __future__ import annotations

from fastapi import Header, HTTPException

DEVICE_ID_HEADER = "X-Device-Id"


async def get_caller_id(
    x_device_id: str | None = Header(default=None, alias=DEVICE_ID_HEADER),
) -> str:
    """Resolve the caller identity from the device id header.

    The value is passed through untouched; there is no verification.
    """
    if x_device_id is None or not x_device_id.strip():
        raise HTTPException(status_code=400, detail="Missing device id")
    return x_device_id
