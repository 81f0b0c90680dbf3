"""
End-to-end tests for a full editing session with fake collaborators.
"""

import asyncio

import pytest

from listview.entities import LogicMode, Operator, SubmissionState
from listview.session import ListViewSession
from tests.conftest import FakeDirectory


@pytest.fixture
def session(endpoint, notifier, navigator):
    return ListViewSession(
        directory=FakeDirectory(),
        endpoint=endpoint,
        notifier=notifier,
        navigator=navigator,
        instance_url="https://org.test",
        pause_ms=5,
        filter_ms=10,
    )


@pytest.mark.asyncio
async def test_build_and_submit(session, endpoint):
    assert session.is_loading
    await session.load_schema()
    assert not session.is_loading

    session.select_entity("Contact")
    session.set_label("Opted Out")
    session.set_field_selected("Name")
    session.set_field_selected("HasOptedOutOfEmail")
    session.add_filter("HasOptedOutOfEmail", Operator.EQUALS, "yes")
    session.add_filter("Name", "StartsWith", "A")
    session.set_logic("or")
    session.set_sort("HasOptedOutOfEmail", "desc")

    config = session.configuration
    assert config.filter_logic_expression == "(1 OR 2)"
    assert config.order_by.is_ascending is False

    result = await session.submit()

    assert result.success
    assert session.provisioning.state == SubmissionState.SUCCEEDED
    request = endpoint.create.await_args.args[0]
    assert request.display_columns == ["HasOptedOutOfEmail", "Name"]
    assert request.filtered_by_info[0].operand_labels == ["1"]
    assert request.filter_logic_expression == "(1 OR 2)"
    assert result.canonical_url == "https://org.test/lightning/o/Contact/list?filterName=Opted_Out"


@pytest.mark.asyncio
async def test_custom_logic_through_session(session):
    await session.load_schema()
    session.select_entity("Contact")
    for name in ("Name", "Email", "Phone"):
        session.set_field_selected(name)
        session.add_filter(name, Operator.CONTAINS, "x")

    session.set_logic("(1 OR (2 AND 3))")

    assert session.builder.logic_mode == LogicMode.CUSTOM
    assert session.configuration.filter_logic_expression == "(1 OR (2 AND 3))"


@pytest.mark.asyncio
async def test_preload_before_load(session):
    assert not session.preload_context(
        {"objectApiName": "Account", "label": "Big Accounts", "fieldApiNames": ["Name", "Industry"]}
    )

    await session.load_schema()

    config = session.configuration
    assert config.entity_api_name == "Account"
    assert config.label == "Big Accounts"
    assert config.field_api_names == ["Name", "Industry"]


@pytest.mark.asyncio
async def test_debounced_search_through_session(session):
    await session.load_schema()
    session.select_entity("Contact")

    session.search("field", "pho")
    await asyncio.sleep(0.1)

    assert [f.api_name for f in session.index.filtered_fields] == ["Phone"]


@pytest.mark.asyncio
async def test_failure_reported(session, endpoint, notifier):
    from listview.errors import ListViewValidationError

    endpoint.create.side_effect = ListViewValidationError(operation_errors=["Quota exceeded"])
    await session.load_schema()
    session.set_label("Anything")

    result = await session.submit()

    assert result.errors == ["Quota exceeded"]
    assert notifier.notifications[-1].message == "Quota exceeded"


@pytest.mark.asyncio
async def test_row_sort_and_alias_edits_through_session(session):
    await session.load_schema()
    session.select_entity("Contact")
    session.set_field_selected("Name")
    session.set_field_selected("Email")

    first = session.add_filter("Name", Operator.CONTAINS, "a")
    second = session.add_filter("Name", Operator.EQUALS, "b")
    session.set_filter_field(second, "Email")
    session.set_filter_operator(second, "StartsWith")
    session.set_filter_value(second, "ops")

    conditions = session.configuration.filtered_by_info
    assert [(c.field_api_name, c.operator, c.operand_labels) for c in conditions] == [
        ("Name", Operator.CONTAINS, ["a"]),
        ("Email", Operator.STARTS_WITH, ["ops"]),
    ]

    session.remove_filter(first)
    assert [c.field_api_name for c in session.configuration.filtered_by_info] == ["Email"]

    session.set_sort("Email")
    session.set_sort_direction("DESC")
    assert session.configuration.order_by.is_ascending is False

    session.set_field_alias("Email", "Work Email")
    assert session.builder.selected_fields["Email"].alias == "Work Email"
