"""
Sort/filter/logic editing state and the normalized ListViewConfiguration.

Every edit is followed by a full recompute; the emitted configuration is
always a complete snapshot and never patched incrementally.
"""

import logging
import re
from typing import Any

from config import settings
from listview.entities import (
    BLANK_OPERATORS,
    FieldDescriptor,
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
from listview.schema_index import SchemaIndex
from listview.signals import Signal

logger = logging.getLogger(__name__)

SORT_DIRECTION_OPTIONS = [
    {"label": "Ascending", "value": SortDirection.ASC.value},
    {"label": "Descending", "value": SortDirection.DESC.value},
]


def build_conditions(rows: list[FilterRow]) -> list[FilterCondition]:
    """rows without a field, or with a blank value on a non-blank operator, are dropped"""
    conditions = []
    for row in rows:
        if not row.field_api_name:
            continue
        value = row.raw_value.strip()
        if not value and row.operator not in BLANK_OPERATORS:
            continue
        conditions.append(
            FilterCondition(
                field_api_name=row.field_api_name,
                operator=row.operator,
                operand_labels=[value],
            )
        )
    return conditions


def synthesize_logic(count: int, mode: LogicMode = LogicMode.AND) -> str:
    """e.g. 3 conditions in AND mode -> '(1 AND 2 AND 3)'"""
    keyword = LogicMode.OR.value if mode == LogicMode.OR else LogicMode.AND.value
    return "(" + f" {keyword} ".join(str(i) for i in range(1, count + 1)) + ")"


def normalize_pending_filters(draft: PendingContext) -> list[PendingFilter]:
    normalized = []
    incoming = [
        PendingFilter(
            field_api_name=c.field_api_name,
            operator=c.operator,
            value=c.operand_labels[0] if c.operand_labels else "",
        )
        for c in draft.filtered_by_info or []
    ]
    incoming.extend(draft.filters or [])

    for f in incoming:
        if f.operator not in BLANK_OPERATORS and not f.value.strip():
            continue
        normalized.append(f)
    return normalized


class ConfigurationBuilder:
    """reconciles user edits into a ListViewConfiguration"""

    def __init__(self, index: SchemaIndex, default_entity: str | None = None) -> None:
        self.index = index
        self.default_entity = settings.DEFAULT_ENTITY if default_entity is None else default_entity

        self.label = ""
        self.explicit_api_name = ""
        self.entity_api_name: str | None = None
        self.selected_fields: dict[str, FieldDescriptor] = {}

        self.sort_field = ""
        self.sort_direction = SortDirection.ASC

        self.filter_rows: list[FilterRow] = []
        self._next_id = 1

        self.logic_mode = LogicMode.AND
        self.custom_logic = ""

        self._pending: PendingContext | None = None
        self._applying = False

        self.configuration_changed = Signal("configuration-changed")
        self.configuration = self.recompute()

        index.schema_loaded.connect(self._on_schema_loaded)
        index.entity_selected.connect(self._on_entity_selected)
        index.selection_changed.connect(self._on_selection_changed)

    # ============ Recompute ============

    def recompute(self) -> ListViewConfiguration:
        """pure function of the current editing state"""
        order_by = None
        if self.sort_field:
            order_by = SortOrder(
                field_api_name=self.sort_field,
                is_ascending=self.sort_direction == SortDirection.ASC,
            )

        conditions = build_conditions(self.filter_rows)

        logic = None
        if len(conditions) >= 2:
            if self.logic_mode == LogicMode.CUSTOM:
                logic = self.custom_logic.strip() or None
            else:
                logic = synthesize_logic(len(conditions), self.logic_mode)

        return ListViewConfiguration(
            api_name=self.computed_api_name,
            label=self.label,
            entity_api_name=self.entity_api_name or self.default_entity,
            field_api_names=list(self.selected_fields),
            filtered_by_info=conditions or None,
            filter_logic_expression=logic,
            order_by=order_by,
        )

    @property
    def computed_api_name(self) -> str:
        if self.explicit_api_name.strip():
            return self.explicit_api_name.strip()
        return re.sub(r"\s+", "_", self.label or "")

    def _emit(self) -> None:
        self.configuration = self.recompute()
        logger.debug(f"configuration recomputed: {self.configuration.to_payload()}")
        self.configuration_changed.emit(self.configuration)

    # ============ SchemaIndex signals ============

    def _on_schema_loaded(self) -> None:
        self.try_apply_pending()

    def _on_entity_selected(self, entity_api_name: str) -> None:
        self.entity_api_name = entity_api_name
        self.selected_fields = {}
        self.sort_field = ""
        self.filter_rows = []
        self.logic_mode = LogicMode.AND
        self.custom_logic = ""

        if not self.try_apply_pending():
            self._emit()

    def _on_selection_changed(self, fields: list[FieldDescriptor]) -> None:
        self.selected_fields = {f.api_name: f for f in fields}
        if self._applying:
            return

        if self.sort_field and self.sort_field not in self.selected_fields:
            self.sort_field = ""

        # rows without a field are unfinished and stay
        self.filter_rows = [
            r
            for r in self.filter_rows
            if not r.field_api_name or r.field_api_name in self.selected_fields
        ]

        if not self.try_apply_pending():
            self._emit()

    # ============ Label ============

    def set_label(self, label: str) -> None:
        self.label = label
        self._emit()

    def set_api_name(self, api_name: str) -> None:
        self.explicit_api_name = api_name
        self._emit()

    # ============ Filter rows ============

    def _take_id(self) -> int:
        row_id = self._next_id
        self._next_id += 1
        return row_id

    def _find_row(self, row_id: int) -> FilterRow | None:
        for row in self.filter_rows:
            if row.id == row_id:
                return row
        logger.debug(f"filter row {row_id} not found")
        return None

    def add_filter_row(self) -> FilterRow:
        row = FilterRow(id=self._take_id())
        self.filter_rows.append(row)
        self._emit()
        return row

    def remove_filter_row(self, row_id: int) -> None:
        if self._find_row(row_id) is None:
            return
        self.filter_rows = [r for r in self.filter_rows if r.id != row_id]
        self._emit()

    def set_filter_field(self, row_id: int, field_api_name: str) -> None:
        row = self._find_row(row_id)
        if row is None:
            return
        row.field_api_name = field_api_name or ""
        self._emit()

    def set_filter_operator(self, row_id: int, operator: Operator | str) -> None:
        row = self._find_row(row_id)
        if row is None:
            return
        row.operator = Operator(operator)
        self._emit()

    def set_filter_value(self, row_id: int, value: str) -> None:
        row = self._find_row(row_id)
        if row is None:
            return
        row.raw_value = value if value is not None else ""
        self._emit()

    # ============ Sort ============

    def set_sort(self, field_api_name: str) -> None:
        self.sort_field = field_api_name or ""
        self._emit()

    def set_sort_direction(self, direction: SortDirection | str) -> None:
        self.sort_direction = SortDirection(str(getattr(direction, "value", direction)).upper())
        self._emit()

    @property
    def has_sort_options(self) -> bool:
        return len(self.selected_fields) > 0

    @property
    def sort_field_options(self) -> list[dict[str, str]]:
        return [
            {"label": f.label or f.api_name, "value": f.api_name}
            for f in self.selected_fields.values()
        ]

    @property
    def sort_direction_options(self) -> list[dict[str, str]]:
        return [dict(option) for option in SORT_DIRECTION_OPTIONS]

    # ============ Logic ============

    def set_logic_mode(self, mode: LogicMode | str) -> None:
        self.logic_mode = LogicMode(str(getattr(mode, "value", mode)).upper())
        self._emit()

    def set_custom_logic(self, text: str) -> None:
        self.custom_logic = text or ""
        self.logic_mode = LogicMode.CUSTOM
        self._emit()

    # ============ Pending context ============

    @property
    def has_pending_context(self) -> bool:
        return self._pending is not None

    def preload_context(self, draft: PendingContext | dict[str, Any]) -> bool:
        """hold a draft until the schema is ready, then merge it once"""
        if self._pending is not None:
            logger.debug("replacing unapplied pending context")
        self._pending = PendingContext.model_validate(draft)
        return self.try_apply_pending()

    def try_apply_pending(self) -> bool:
        """merge the pending draft if every gate passes; retried on later events"""
        draft = self._pending
        if draft is None or self._applying:
            return False

        entity = self.index.current_entity
        if not self.index.loaded or entity is None:
            return False
        if draft.entity_api_name and draft.entity_api_name != entity.api_name:
            logger.debug(
                f"pending context waits for entity '{draft.entity_api_name}', "
                f"current is '{entity.api_name}'"
            )
            return False

        self._applying = True
        try:
            self._merge(draft)
        finally:
            self._applying = False

        self._pending = None
        self._emit()
        return True

    def _merge(self, draft: PendingContext) -> None:
        filters = normalize_pending_filters(draft)

        wanted: list[str] = []
        candidates = list(draft.field_api_names) + [f.field_api_name for f in filters]
        if draft.order_by is not None:
            candidates.append(draft.order_by.field_api_name)
        for api_name in candidates:
            if api_name and api_name not in wanted:
                wanted.append(api_name)

        for api_name in wanted:
            if not self.index.set_field_selected(api_name, True):
                logger.debug(f"pending context field '{api_name}' not in catalog")

        # pickers see every wanted field even before the index signal arrives
        entity = self.index.current_entity
        for api_name in wanted:
            if api_name in self.selected_fields:
                continue
            descriptor = entity.get_field(api_name) if entity else None
            self.selected_fields[api_name] = (
                descriptor.model_copy(update={"selected": True})
                if descriptor
                else FieldDescriptor(label=api_name, api_name=api_name, selected=True)
            )

        self.filter_rows = [
            FilterRow(
                id=self._take_id(),
                field_api_name=f.field_api_name,
                operator=f.operator,
                raw_value=f.value,
            )
            for f in filters
        ]

        logic = (draft.filter_logic_expression or "").strip()
        if logic and len(filters) >= 2:
            self.logic_mode = LogicMode.CUSTOM
            self.custom_logic = logic
        else:
            self.logic_mode = LogicMode.AND
            self.custom_logic = ""

        if draft.order_by is not None:
            self.sort_field = draft.order_by.field_api_name
            self.sort_direction = (
                SortDirection.ASC if draft.order_by.is_ascending else SortDirection.DESC
            )

        if draft.label is not None:
            self.label = draft.label
        if draft.api_name:
            self.explicit_api_name = draft.api_name

        logger.info(
            f"pending context applied: {len(wanted)} fields, {len(self.filter_rows)} filters"
        )
