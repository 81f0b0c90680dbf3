"""root-level access to the list view domain models"""

from listview.entities import (
    CreateListViewRequest,
    EntityDescriptor,
    FieldDescriptor,
    FilterCondition,
    ListViewConfiguration,
    Operator,
    PendingContext,
    ProvisioningResult,
    SortOrder,
    SubmissionState,
)

__all__ = [
    "EntityDescriptor",
    "FieldDescriptor",
    "Operator",
    "FilterCondition",
    "SortOrder",
    "ListViewConfiguration",
    "PendingContext",
    "CreateListViewRequest",
    "ProvisioningResult",
    "SubmissionState",
]
