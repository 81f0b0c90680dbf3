from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from listview.entities.configuration import FilterCondition


class Visibility(str, Enum):
    PRIVATE = "Private"
    PUBLIC = "Public"


class SubmissionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_SUBMISSION_STATES = {SubmissionState.SUCCEEDED, SubmissionState.FAILED}


class Severity(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


class CreateListViewRequest(BaseModel):
    """request handed to the creation endpoint"""

    model_config = ConfigDict(populate_by_name=True)

    entity_api_name: str = Field(..., alias="entityApiName")
    list_view_api_name: str = Field(..., alias="listViewApiName")
    label: str = ""
    visibility: Visibility = Visibility.PRIVATE
    display_columns: list[str] = Field(default_factory=list, alias="displayColumns")
    filtered_by_info: list[FilterCondition] | None = Field(default=None, alias="filteredByInfo")
    filter_logic_expression: str | None = Field(default=None, alias="filterLogicExpression")

    def to_payload(self) -> dict[str, Any]:
        """camelCase body; filter keys are omitted when there are no conditions"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProvisioningResult(BaseModel):
    identifier: str | None = None
    canonical_url: str | None = None
    errors: list[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors and self.identifier is not None


class Notification(BaseModel):
    title: str
    message: str
    severity: Severity = Severity.INFO


class NavigationTarget(BaseModel):
    target_kind: str = "standard__objectPage"
    entity_api_name: str
    action: str = "list"
    filter_name: str
