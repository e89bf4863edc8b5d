from typing import Optional

from pydantic import BaseModel


class HealthRead(BaseModel):
    status: str
    service: str
    version: str
    clients: int
    messages: Optional[int] = None
    upload_dir: Optional[str] = None
