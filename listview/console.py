"""Terminal-side collaborators used by the CLI host."""

import webbrowser

from rich.console import Console

from config import settings
from listview.entities import NavigationTarget, Notification, Severity
from listview.provisioning import compose_list_view_url

SEVERITY_STYLES = {
    Severity.SUCCESS: ("green", "✓"),
    Severity.WARNING: ("yellow", "!"),
    Severity.ERROR: ("red", "✗"),
    Severity.INFO: ("cyan", "•"),
}


class ConsoleNotifier:
    """prints notifications as one-line rich messages"""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def show(self, notification: Notification) -> None:
        style, mark = SEVERITY_STYLES[notification.severity]
        line = f"[{style}]{mark}[/{style}] {notification.title}"
        if notification.message:
            line += f": {notification.message}"
        self.console.print(line)


class BrowserNavigator:
    """opens the list view page in the default browser"""

    def __init__(self, origin: str | None = None):
        self.origin = origin or settings.instance_origin

    def url_for(self, target: NavigationTarget) -> str:
        return compose_list_view_url(self.origin, target.entity_api_name, target.filter_name)

    def open(self, target: NavigationTarget) -> None:
        webbrowser.open(self.url_for(target))
