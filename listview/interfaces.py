"""narrow capability interfaces for the external collaborators"""

from typing import Any, Protocol, runtime_checkable

from listview.entities import CreateListViewRequest, NavigationTarget, Notification


@runtime_checkable
class SchemaDirectory(Protocol):
    async def fetch_catalog(self) -> Any:
        """catalog of (entityLabel, entityApiName, fields) entries"""
        ...


@runtime_checkable
class CreationEndpoint(Protocol):
    async def create(self, request: CreateListViewRequest) -> str:
        """provision the list view and return its identifier

        raises ListViewValidationError or ProvisioningTransportError
        """
        ...


@runtime_checkable
class Clipboard(Protocol):
    async def write_text(self, text: str) -> None: ...


@runtime_checkable
class Notifier(Protocol):
    def show(self, notification: Notification) -> None: ...


@runtime_checkable
class Navigator(Protocol):
    def open(self, target: NavigationTarget) -> None: ...
