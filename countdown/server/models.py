"""Server API models."""

from datetime import datetime

from pydantic import BaseModel


class StatusResponse(BaseModel):
    """Response for /status endpoint."""

    status: str = "running"
    version: str
    timestamp: datetime
    static_dir: str
    index_present: bool
