"""One editing session: schema index -> configuration builder -> provisioning client."""

from typing import Any

from loguru import logger

from listview.builder import ConfigurationBuilder
from listview.entities import (
    ListViewConfiguration,
    LogicMode,
    Operator,
    PendingContext,
    ProvisioningResult,
    SearchKind,
    SortDirection,
)
from listview.interfaces import Clipboard, CreationEndpoint, Navigator, Notifier, SchemaDirectory
from listview.provisioning import ProvisioningClient
from listview.schema_index import SchemaIndex


class ListViewSession:
    """wires the three components and exposes the host operations"""

    def __init__(
        self,
        directory: SchemaDirectory,
        endpoint: CreationEndpoint,
        notifier: Notifier,
        navigator: Navigator | None = None,
        clipboard: Clipboard | None = None,
        instance_url: str | None = None,
        pause_ms: int | None = None,
        filter_ms: int | None = None,
    ) -> None:
        self.index = SchemaIndex(directory, pause_ms=pause_ms, filter_ms=filter_ms)
        self.builder = ConfigurationBuilder(self.index)
        self.provisioning = ProvisioningClient(
            endpoint,
            notifier,
            instance_url=instance_url,
            navigator=navigator,
            clipboard=clipboard,
        )

    @property
    def configuration(self) -> ListViewConfiguration:
        return self.builder.configuration

    @property
    def is_loading(self) -> bool:
        return not self.index.loaded

    async def load_schema(self) -> None:
        await self.index.load()
        logger.debug(f"session ready with {len(self.index.entities)} entities")

    def select_entity(self, api_name: str) -> bool:
        return self.index.select_entity(api_name)

    def set_field_selected(self, api_name: str, selected: bool = True) -> bool:
        return self.index.set_field_selected(api_name, selected)

    def set_field_alias(self, api_name: str, alias: str) -> None:
        self.index.set_field_alias(api_name, alias)

    def search(self, kind: SearchKind | str, term: str) -> None:
        self.index.search(kind, term)

    def set_label(self, label: str) -> None:
        self.builder.set_label(label)

    def set_api_name(self, api_name: str) -> None:
        self.builder.set_api_name(api_name)

    def add_filter(self, field_api_name: str, operator: Operator | str, value: str = "") -> int:
        """add a row and fill it in one go; returns the row id"""
        row = self.builder.add_filter_row()
        self.builder.set_filter_field(row.id, field_api_name)
        self.builder.set_filter_operator(row.id, operator)
        self.builder.set_filter_value(row.id, value)
        return row.id

    def remove_filter(self, row_id: int) -> None:
        self.builder.remove_filter_row(row_id)

    def set_filter_field(self, row_id: int, field_api_name: str) -> None:
        self.builder.set_filter_field(row_id, field_api_name)

    def set_filter_operator(self, row_id: int, operator: Operator | str) -> None:
        self.builder.set_filter_operator(row_id, operator)

    def set_filter_value(self, row_id: int, value: str) -> None:
        self.builder.set_filter_value(row_id, value)

    def set_sort(self, field_api_name: str, direction: SortDirection | str = SortDirection.ASC) -> None:
        self.builder.set_sort(field_api_name)
        self.builder.set_sort_direction(direction)

    def set_sort_direction(self, direction: SortDirection | str) -> None:
        self.builder.set_sort_direction(direction)

    def set_logic(self, logic: str) -> None:
        """'and' / 'or' pick a mode, anything else is a custom expression"""
        if logic.strip().upper() in (LogicMode.AND.value, LogicMode.OR.value):
            self.builder.set_logic_mode(logic.strip().upper())
        else:
            self.builder.set_custom_logic(logic)

    def preload_context(self, draft: PendingContext | dict[str, Any]) -> bool:
        applied = self.builder.preload_context(draft)
        if not applied:
            logger.debug("pending context held until schema and entity are ready")
        return applied

    async def submit(self) -> ProvisioningResult:
        return await self.provisioning.submit(self.builder.configuration)
