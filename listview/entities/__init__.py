"""domain entities organized by concern"""

from listview.entities.configuration import (
    BLANK_OPERATORS,
    FilterCondition,
    FilterRow,
    ListViewConfiguration,
    LogicMode,
    Operator,
    PendingContext,
    PendingFilter,
    SortDirection,
    SortOrder,
)
from listview.entities.provisioning import (
    TERMINAL_SUBMISSION_STATES,
    CreateListViewRequest,
    NavigationTarget,
    Notification,
    ProvisioningResult,
    Severity,
    SubmissionState,
    Visibility,
)
from listview.entities.schema import EntityDescriptor, FieldDescriptor, SearchKind

__all__ = [
    # Schema domain
    "EntityDescriptor",
    "FieldDescriptor",
    "SearchKind",
    # Configuration domain
    "Operator",
    "BLANK_OPERATORS",
    "LogicMode",
    "SortDirection",
    "FilterRow",
    "FilterCondition",
    "SortOrder",
    "ListViewConfiguration",
    "PendingContext",
    "PendingFilter",
    # Provisioning domain
    "Visibility",
    "CreateListViewRequest",
    "ProvisioningResult",
    "SubmissionState",
    "TERMINAL_SUBMISSION_STATES",
    "Severity",
    "Notification",
    "NavigationTarget",
]
