from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PropertyBase(BaseModel):
    name: str = Field(min_length=1)


class PropertyCreate(PropertyBase):
    pass


class PropertyOut(PropertyBase):
    id: int
    owner_id: int

    model_config = ConfigDict(from_attributes=True)


class PropertyUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
