from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Operator(str, Enum):
    EQUALS = "Equals"
    NOT_EQUAL = "NotEqual"
    CONTAINS = "Contains"
    STARTS_WITH = "StartsWith"
    LESS_THAN = "LessThan"
    LESS_OR_EQUAL = "LessOrEqual"
    GREATER_THAN = "GreaterThan"
    GREATER_OR_EQUAL = "GreaterOrEqual"
    INCLUDES = "Includes"
    EXCLUDES = "Excludes"


# the only operators that accept a blank operand
BLANK_OPERATORS = frozenset({Operator.EQUALS, Operator.NOT_EQUAL})


class LogicMode(str, Enum):
    AND = "AND"
    OR = "OR"
    CUSTOM = "CUSTOM"


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class FilterRow(BaseModel):
    """editable filter row; id is never reused within a session"""

    id: int
    field_api_name: str = ""
    operator: Operator = Operator.EQUALS
    raw_value: str = ""


class FilterCondition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field_api_name: str = Field(..., alias="fieldApiName")
    operator: Operator
    operand_labels: list[str] = Field(default_factory=list, alias="operandLabels")


class SortOrder(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field_api_name: str = Field(..., alias="fieldApiName")
    is_ascending: bool = Field(default=True, alias="isAscending")


class ListViewConfiguration(BaseModel):
    """normalized snapshot emitted on every edit"""

    model_config = ConfigDict(populate_by_name=True)

    api_name: str = Field(default="", alias="apiName")
    label: str = ""
    entity_api_name: str = Field(
        default="",
        validation_alias=AliasChoices("objectApiName", "entityApiName", "entity_api_name"),
        serialization_alias="objectApiName",
    )
    field_api_names: list[str] = Field(default_factory=list, alias="fieldApiNames")
    filtered_by_info: list[FilterCondition] | None = Field(default=None, alias="filteredByInfo")
    filter_logic_expression: str | None = Field(default=None, alias="filterLogicExpression")
    order_by: SortOrder | None = Field(default=None, alias="orderBy")

    @property
    def conditions(self) -> list[FilterCondition]:
        return list(self.filtered_by_info or [])

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json", by_alias=True)
        if self.filter_logic_expression is None:
            payload.pop("filterLogicExpression")
        return payload


class PendingFilter(BaseModel):
    """draft filter given as a single value instead of operand labels"""

    model_config = ConfigDict(populate_by_name=True)

    field_api_name: str = Field(..., alias="fieldApiName")
    operator: Operator = Operator.EQUALS
    value: str = ""


class PendingContext(BaseModel):
    """externally supplied draft, merged once the schema is ready"""

    model_config = ConfigDict(populate_by_name=True)

    api_name: str | None = Field(default=None, alias="apiName")
    label: str | None = None
    entity_api_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("objectApiName", "entityApiName", "entity_api_name"),
    )
    field_api_names: list[str] = Field(default_factory=list, alias="fieldApiNames")
    filtered_by_info: list[FilterCondition] | None = Field(default=None, alias="filteredByInfo")
    filters: list[PendingFilter] | None = None
    filter_logic_expression: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "filterLogicExpression", "filterLogicString", "filter_logic_expression"
        ),
    )
    order_by: SortOrder | None = Field(default=None, alias="orderBy")
