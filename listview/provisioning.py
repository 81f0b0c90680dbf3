"""
Turns a ListViewConfiguration into a creation request, submits it and
reports the outcome.
"""

from urllib.parse import quote

from loguru import logger

from config import settings
from listview.builder import synthesize_logic
from listview.entities import (
    CreateListViewRequest,
    FilterCondition,
    ListViewConfiguration,
    NavigationTarget,
    Notification,
    ProvisioningResult,
    TERMINAL_SUBMISSION_STATES,
    Severity,
    SubmissionState,
    Visibility,
)
from listview.errors import ListViewValidationError, ProvisioningError
from listview.interfaces import Clipboard, CreationEndpoint, Navigator, Notifier
from listview.signals import Signal

GENERIC_ERROR_MESSAGE = "Unknown error"
ERROR_SEPARATOR = "; "

TRUE_TOKENS = frozenset({"true", "1", "yes", "y"})
FALSE_TOKENS = frozenset({"false", "0", "no", "n"})


def normalize_operand(value: str) -> str:
    """trim and canonicalize boolean-like tokens to '1'/'0'"""
    value = (value or "").strip()
    lowered = value.lower()
    if lowered in TRUE_TOKENS:
        return "1"
    if lowered in FALSE_TOKENS:
        return "0"
    return value


def build_display_columns(config: ListViewConfiguration) -> list[str]:
    columns = list(config.field_api_names)
    if config.order_by is not None and config.order_by.field_api_name in columns:
        columns.remove(config.order_by.field_api_name)
        columns.insert(0, config.order_by.field_api_name)
    return columns


def flatten_errors(error: BaseException) -> list[str]:
    """collect top, operation and field level messages, distinct and in order"""
    candidates: list[str] = []
    if isinstance(error, ListViewValidationError):
        candidates.append(error.top_message or "")
        candidates.extend(error.operation_errors)
        for messages in error.field_errors.values():
            candidates.extend(messages)
    elif isinstance(error, ProvisioningError):
        candidates.append(error.message)
    else:
        candidates.append(str(error))

    flattened: list[str] = []
    for message in candidates:
        message = (message or "").strip()
        if message and message not in flattened:
            flattened.append(message)
    return flattened or [GENERIC_ERROR_MESSAGE]


def compose_list_view_url(origin: str, entity_api_name: str, api_name: str) -> str:
    return (
        f"{origin.rstrip('/')}/lightning/o/{quote(entity_api_name)}/list"
        f"?filterName={quote(api_name)}"
    )


class ProvisioningClient:
    """submits list view configurations to the creation endpoint"""

    def __init__(
        self,
        endpoint: CreationEndpoint,
        notifier: Notifier,
        instance_url: str | None = None,
        navigator: Navigator | None = None,
        clipboard: Clipboard | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.notifier = notifier
        self.instance_url = instance_url or settings.instance_origin
        self.navigator = navigator
        self.clipboard = clipboard

        self.state = SubmissionState.IDLE
        self.result: ProvisioningResult | None = None
        self.config: ListViewConfiguration | None = None
        self._generation = 0

        self.submission_result = Signal("submission-result")

    def build_request(self, config: ListViewConfiguration) -> CreateListViewRequest:
        conditions = [
            FilterCondition(
                field_api_name=c.field_api_name,
                operator=c.operator,
                operand_labels=[normalize_operand(v) for v in c.operand_labels],
            )
            for c in config.conditions
        ]

        logic = None
        if conditions:
            logic = (config.filter_logic_expression or "").strip() or None
            if logic is None and len(conditions) >= 2:
                logic = synthesize_logic(len(conditions))

        return CreateListViewRequest(
            entity_api_name=config.entity_api_name,
            list_view_api_name=config.api_name,
            label=config.label,
            visibility=Visibility.PRIVATE,
            display_columns=build_display_columns(config),
            filtered_by_info=conditions or None,
            filter_logic_expression=logic,
        )

    async def submit(self, config: ListViewConfiguration) -> ProvisioningResult:
        """idle -> submitting -> succeeded | failed; never raises for endpoint failures"""
        self._generation += 1
        generation = self._generation
        self.state = SubmissionState.SUBMITTING
        self.config = config
        self.result = None

        request = self.build_request(config)
        logger.info(f"submitting list view '{request.list_view_api_name}' on {request.entity_api_name}")

        try:
            identifier = await self.endpoint.create(request)
            result = ProvisioningResult(
                identifier=identifier,
                canonical_url=compose_list_view_url(
                    self.instance_url, config.entity_api_name, config.api_name
                ),
            )
        except ProvisioningError as e:
            result = ProvisioningResult(errors=flatten_errors(e))
        except Exception as e:
            logger.exception(f"unexpected provisioning failure: {e}")
            result = ProvisioningResult(errors=flatten_errors(e))

        if generation != self._generation:
            logger.warning(f"dropping stale submission result (generation {generation})")
            return result

        self.result = result
        if result.errors:
            self.state = SubmissionState.FAILED
            logger.warning(f"list view creation failed: {result.errors}")
            self.notifier.show(
                Notification(
                    title="Failed to create list view",
                    message=ERROR_SEPARATOR.join(result.errors),
                    severity=Severity.ERROR,
                )
            )
        else:
            self.state = SubmissionState.SUCCEEDED
            logger.info(f"list view created: {result.identifier} {result.canonical_url}")
            self.notifier.show(
                Notification(
                    title="List view created",
                    message=result.canonical_url or "",
                    severity=Severity.SUCCESS,
                )
            )

        self.submission_result.emit(result)
        return result

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_SUBMISSION_STATES

    # ============ Result actions ============

    @property
    def card_title(self) -> str:
        label = self.config.label if self.config is not None else ""
        return f"List View: {label or ''}"

    @property
    def supports_navigation(self) -> bool:
        return self.navigator is not None

    def open_list_view(self) -> bool:
        if self.navigator is None or self.config is None or self.state != SubmissionState.SUCCEEDED:
            return False

        self.navigator.open(
            NavigationTarget(
                target_kind="standard__objectPage",
                entity_api_name=self.config.entity_api_name,
                action="list",
                filter_name=self.config.api_name,
            )
        )
        return True

    async def copy_link(self) -> bool:
        url = self.result.canonical_url if self.result is not None else None
        try:
            if self.clipboard is None or not url:
                raise ProvisioningError("clipboard unavailable")
            await self.clipboard.write_text(url)
        except Exception as e:
            logger.warning(f"copy link failed: {e}")
            self.notifier.show(
                Notification(
                    title="Copy failed",
                    message="Could not copy link.",
                    severity=Severity.WARNING,
                )
            )
            return False

        self.notifier.show(
            Notification(
                title="Link copied",
                message="List view link copied to clipboard.",
                severity=Severity.SUCCESS,
            )
        )
        return True
