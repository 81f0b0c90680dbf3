from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SearchKind(str, Enum):
    ENTITY = "entity"
    FIELD = "field"


class FieldDescriptor(BaseModel):
    """field of an entity; identity is api_name, selected/alias are presentation state"""

    model_config = ConfigDict(populate_by_name=True)

    label: str
    api_name: str = Field(..., alias="apiName")
    data_type: str = Field(default="", alias="dataType")
    ordinal: int = 0
    selected: bool = False
    alias: str = ""

    @property
    def search_term(self) -> str:
        return self.label.upper() + self.api_name.upper()


class EntityDescriptor(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    label: str
    api_name: str = Field(..., alias="apiName")
    fields: list[FieldDescriptor] = Field(default_factory=list)

    @property
    def search_term(self) -> str:
        return self.label.upper() + self.api_name.upper()

    def get_field(self, api_name: str) -> FieldDescriptor | None:
        for f in self.fields:
            if f.api_name == api_name:
                return f
        return None
