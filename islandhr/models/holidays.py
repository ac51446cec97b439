from datetime import date
from pydantic import BaseModel, ConfigDict


class Holiday(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    name: str
