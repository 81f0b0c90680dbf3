"""
Search and selection over the entity/field catalog.

The catalog is loaded once from the schema directory. Two flat search
corpora are built at load time (one entry per entity, one per field tagged
with its owning entity) so a search is a single scan over precomputed
upper-cased terms.
"""

import json
import logging
import re
from typing import Any

import httpx

from config import settings
from listview.debounce import Debouncer
from listview.entities import EntityDescriptor, FieldDescriptor, SearchKind
from listview.errors import CatalogLoadError, ListViewError
from listview.interfaces import SchemaDirectory
from listview.signals import Signal

logger = logging.getLogger(__name__)


def _maybe_json(value: Any) -> Any:
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value


def _parse_field(raw: dict[str, Any], ordinal: int) -> FieldDescriptor:
    api_name = raw.get("apiName") or raw.get("value")
    if not api_name:
        raise CatalogLoadError("field without api name", detail={"field": raw})
    return FieldDescriptor(
        label=raw.get("label") or api_name,
        api_name=api_name,
        data_type=raw.get("dataType") or raw.get("type") or "",
        ordinal=ordinal,
    )


def parse_catalog(raw: Any) -> list[EntityDescriptor]:
    """parse the directory payload into entities sorted by label

    accepts either the native shape (a JSON string of [label, apiName, fieldsJson]
    triples whose fields are themselves JSON) or already decoded lists/dicts
    """
    try:
        entries = _maybe_json(raw) or []
    except ValueError as e:
        raise CatalogLoadError(f"catalog is not valid JSON: {e}") from e

    if not isinstance(entries, list):
        raise CatalogLoadError("catalog must be a list", detail={"type": type(entries).__name__})

    entities: list[EntityDescriptor] = []
    for entry in entries:
        try:
            if isinstance(entry, dict):
                label = entry.get("label")
                api_name = entry.get("apiName") or entry.get("value")
                raw_fields = _maybe_json(entry.get("fields") or [])
            else:
                label, api_name, raw_fields = entry[0], entry[1], _maybe_json(entry[2])
        except (IndexError, TypeError, ValueError) as e:
            raise CatalogLoadError(f"malformed catalog entry: {e}", detail={"entry": entry}) from e

        if not api_name:
            raise CatalogLoadError("entity without api name", detail={"entry": entry})

        try:
            fields = [_parse_field(f, i) for i, f in enumerate(raw_fields)]
        except (AttributeError, TypeError, ValueError) as e:
            raise CatalogLoadError(
                f"malformed fields for entity '{api_name}': {e}", detail={"entry": entry}
            ) from e
        fields.sort(key=lambda f: f.api_name.upper())
        try:
            entities.append(
                EntityDescriptor(label=label or api_name, api_name=api_name, fields=fields)
            )
        except ValueError as e:
            raise CatalogLoadError(f"malformed catalog entry: {e}", detail={"entry": entry}) from e

    entities.sort(key=lambda e: e.label.upper())
    return entities


def _matcher(term: str) -> re.Pattern[str]:
    return re.compile(re.escape(term.upper()))


class SchemaIndex:
    """catalog of selectable entities and fields with the current field selection"""

    def __init__(
        self,
        directory: SchemaDirectory,
        pause_ms: int | None = None,
        filter_ms: int | None = None,
        debouncer: Debouncer | None = None,
    ) -> None:
        self.directory = directory
        self.pause_ms = settings.SEARCH_PAUSE_MS if pause_ms is None else pause_ms
        self.filter_ms = settings.SEARCH_FILTER_MS if filter_ms is None else filter_ms
        self._debouncer = debouncer or Debouncer()

        self.entities: list[EntityDescriptor] = []
        self.current_entity: EntityDescriptor | None = None
        self.selection: dict[str, FieldDescriptor] = {}  # api_name -> descriptor, selection order

        # search corpora, built once at load
        self._entity_terms: list[str] = []
        self._field_terms: list[tuple[str, str]] = []  # (term, entity api name)
        self._all_fields: list[FieldDescriptor] = []  # parallel to _field_terms

        self.filtered_entities: list[EntityDescriptor] = []
        self.filtered_fields: list[FieldDescriptor] = []
        self.entity_term = ""
        self.field_term = ""

        self.loaded = False
        self.is_loading = False

        self.schema_loaded = Signal("schema-loaded")
        self.entity_selected = Signal("entity-selected")
        self.selection_changed = Signal("selection-changed")
        self.search_completed = Signal("search-completed")

    # ============ Loading ============

    async def load(self) -> None:
        """fetch the catalog once; degrades to an empty catalog on failure"""
        if self.loaded or self.is_loading:
            logger.debug("schema already loaded, skipping")
            return

        self.is_loading = True
        try:
            raw = await self.directory.fetch_catalog()
            entities = parse_catalog(raw)
        except ListViewError as e:
            logger.warning(f"catalog load failed, continuing with empty catalog: {e.message}")
            entities = []
        except httpx.HTTPError as e:
            logger.warning(f"schema directory unreachable, continuing with empty catalog: {e}")
            entities = []
        finally:
            self.is_loading = False

        self._build_index(entities)
        self.loaded = True
        logger.info(f"schema loaded: {len(self.entities)} entities, {len(self._all_fields)} fields")

        if self.current_entity is not None:
            self.entity_selected.emit(self.current_entity.api_name)
        self.schema_loaded.emit()

    def _build_index(self, entities: list[EntityDescriptor]) -> None:
        self.entities = entities
        self._entity_terms = [e.search_term for e in entities]
        self._field_terms = []
        self._all_fields = []
        for entity in entities:
            for f in entity.fields:
                self._field_terms.append((f.search_term, entity.api_name))
                self._all_fields.append(f)

        self.filtered_entities = list(entities)
        self.current_entity = entities[0] if entities else None
        self.selection = {}
        self.filtered_fields = list(self.current_entity.fields) if self.current_entity else []

    def get_entity(self, api_name: str) -> EntityDescriptor | None:
        for entity in self.entities:
            if entity.api_name == api_name:
                return entity
        return None

    # ============ Entity selection ============

    def select_entity(self, api_name: str) -> bool:
        """switch the current entity; clears the field selection atomically"""
        entity = self.get_entity(api_name)
        if entity is None:
            logger.warning(f"select_entity ignored, unknown entity '{api_name}'")
            return False

        self._switch_entity(entity)
        self.entity_selected.emit(entity.api_name)
        return True

    def _switch_entity(self, entity: EntityDescriptor) -> None:
        for f in self.selection.values():
            f.selected = False
        self.selection = {}
        for f in entity.fields:
            f.selected = False

        self.current_entity = entity
        self.filtered_fields = self._filter_fields()
        logger.info(f"entity selected: {entity.api_name}")

    # ============ Search ============

    def search(self, kind: SearchKind | str, term: str) -> None:
        """record the term now, filter after two debounce windows"""
        kind = SearchKind(kind)
        if kind == SearchKind.ENTITY:
            self.entity_term = term
        else:
            self.field_term = term

        self._debouncer.schedule(
            f"{kind.value}:pause",
            self.pause_ms,
            lambda: self._debouncer.schedule(
                f"{kind.value}:filter", self.filter_ms, lambda: self.run_search(kind)
            ),
        )

    def is_search_pending(self, kind: SearchKind | str) -> bool:
        kind = SearchKind(kind)
        return self._debouncer.is_pending(f"{kind.value}:pause") or self._debouncer.is_pending(
            f"{kind.value}:filter"
        )

    def run_search(self, kind: SearchKind | str) -> list[Any]:
        """execute the filter for the recorded term immediately"""
        kind = SearchKind(kind)
        if kind == SearchKind.ENTITY:
            results: list[Any] = self._run_entity_search()
        else:
            self.filtered_fields = self._filter_fields()
            results = self.filtered_fields

        self.search_completed.emit(kind, list(results))
        return results

    def _run_entity_search(self) -> list[EntityDescriptor]:
        term = self.entity_term.strip()
        if not term:
            self.filtered_entities = list(self.entities)
            return self.filtered_entities

        pattern = _matcher(term)
        self.filtered_entities = [
            self.entities[i] for i, t in enumerate(self._entity_terms) if pattern.search(t)
        ]

        if self.filtered_entities:
            first = self.filtered_entities[0]
            if self.current_entity is None or first.api_name != self.current_entity.api_name:
                self.select_entity(first.api_name)
            elif self.field_term:
                self.filtered_fields = self._filter_fields()
        else:
            self.filtered_fields = []

        return self.filtered_entities

    def _filter_fields(self) -> list[FieldDescriptor]:
        if self.current_entity is None:
            return []

        term = self.field_term.strip()
        if not term:
            return list(self.current_entity.fields)

        pattern = _matcher(term)
        entity_name = self.current_entity.api_name
        matched = [
            self._all_fields[i]
            for i, (t, owner) in enumerate(self._field_terms)
            if owner == entity_name and pattern.search(t)
        ]

        # selected fields never disappear from view
        seen = {f.api_name for f in matched}
        for f in self.current_entity.fields:
            if f.api_name in self.selection and f.api_name not in seen:
                matched.append(f)

        return matched

    # ============ Field selection ============

    def selected_fields(self) -> list[FieldDescriptor]:
        return [f.model_copy() for f in self.selection.values()]

    def set_field_selected(self, api_name: str, selected: bool) -> bool:
        field = self.current_entity.get_field(api_name) if self.current_entity else None
        if field is None:
            logger.debug(f"set_field_selected ignored, unknown field '{api_name}'")
            return False

        if selected == (api_name in self.selection):
            return True

        field.selected = selected
        if selected:
            self.selection[api_name] = field
        else:
            del self.selection[api_name]

        self.selection_changed.emit(self.selected_fields())
        return True

    def set_selected_fields(self, api_names: list[str]) -> None:
        """replace the whole selection, keeping the entity's field order"""
        if self.current_entity is None:
            return

        picked = set(api_names)
        self.selection = {}
        for f in self.current_entity.fields:
            f.selected = f.api_name in picked
            if f.selected:
                self.selection[f.api_name] = f

        self.selection_changed.emit(self.selected_fields())

    def set_field_alias(self, api_name: str, alias: str) -> None:
        field = self.current_entity.get_field(api_name) if self.current_entity else None
        if field is None:
            return

        field.alias = alias
        if field.selected:
            self.selection_changed.emit(self.selected_fields())

    def clear_selection(self) -> None:
        self.selection = {}
        if self.current_entity is not None:
            for f in self.current_entity.fields:
                f.selected = False
                f.alias = ""
        self.field_term = ""
        self.filtered_fields = self._filter_fields()

        self.selection_changed.emit([])
