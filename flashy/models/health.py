from pydantic import BaseModel


class HealthStatus(BaseModel):
    ok: bool
    db_time: str | None = None
    error: str | None = None
