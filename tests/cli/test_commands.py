"""
Tests for lvb CLI commands.
Uses typer CliRunner with a fake client instead of a running instance.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from listview.errors import CatalogLoadError, ListViewValidationError
from tests.conftest import native_catalog

runner = CliRunner()


@pytest.fixture
def mock_client():
    """fake ListViewApiClient serving the sample catalog"""
    client = AsyncMock()
    client.fetch_catalog.return_value = native_catalog()
    client.create.return_value = "00BXX0000001"
    return client


@pytest.fixture
def cli_app(mock_client):
    """import the app with mocked client"""
    from listview.cli.main import app

    with patch("listview.cli.main.get_client", return_value=mock_client):
        yield app


class TestSchemaCommands:
    def test_objects_lists_catalog(self, cli_app):
        result = runner.invoke(cli_app, ["objects"])
        assert result.exit_code == 0
        assert "Account" in result.output
        assert "Contact" in result.output
        assert "Opportunity" in result.output

    def test_objects_search(self, cli_app):
        result = runner.invoke(cli_app, ["objects", "--search", "opp"])
        assert result.exit_code == 0
        assert "Opportunity" in result.output
        assert "Contact" not in result.output

    def test_objects_empty_catalog(self, cli_app, mock_client):
        mock_client.fetch_catalog.side_effect = CatalogLoadError("down")
        result = runner.invoke(cli_app, ["objects"])
        assert result.exit_code == 1
        assert "No objects" in result.output

    def test_fields_with_search(self, cli_app):
        result = runner.invoke(cli_app, ["fields", "Contact", "--search", "pho"])
        assert result.exit_code == 0
        assert "Phone" in result.output
        assert "MailingStreet" not in result.output

    def test_fields_unknown_object(self, cli_app):
        result = runner.invoke(cli_app, ["fields", "Nope"])
        assert result.exit_code == 1
        assert "Unknown object" in result.output


class TestCreateCommand:
    def test_dry_run_prints_configuration(self, cli_app, mock_client):
        result = runner.invoke(
            cli_app,
            [
                "create",
                "--object", "Contact",
                "--label", "My Contacts",
                "-f", "Name",
                "-f", "Email",
                "--filter", "Email:Equals",
                "--sort", "Email",
                "--dry-run",
            ],
        )
        assert result.exit_code == 0
        assert "My_Contacts" in result.output
        assert '"operandLabels"' in result.output
        mock_client.create.assert_not_called()

    def test_create_submits(self, cli_app, mock_client):
        result = runner.invoke(
            cli_app,
            [
                "create",
                "--object", "Contact",
                "--label", "Hot",
                "-f", "Name",
                "--filter", "HasOptedOutOfEmail:Equals:yes",
                "--filter", "Name:StartsWith:A",
                "--logic", "(1 OR 2)",
            ],
        )
        assert result.exit_code == 0
        assert "Created 00BXX0000001" in result.output

        request = mock_client.create.await_args.args[0]
        assert request.filter_logic_expression == "(1 OR 2)"
        assert request.filtered_by_info[0].operand_labels == ["1"]

    def test_create_failure(self, cli_app, mock_client):
        mock_client.create.side_effect = ListViewValidationError(
            top_message="Duplicate name"
        )
        result = runner.invoke(cli_app, ["create", "--object", "Contact", "--label", "Dup"])
        assert result.exit_code == 1
        assert "Failed to create list view" in result.output
        assert "Duplicate name" in result.output

    def test_create_from_draft(self, cli_app, tmp_path):
        draft = tmp_path / "draft.json"
        draft.write_text(
            json.dumps(
                {
                    "objectApiName": "Opportunity",
                    "label": "Big Deals",
                    "fieldApiNames": ["Name", "Amount"],
                    "filteredByInfo": [
                        {"fieldApiName": "Amount", "operator": "GreaterThan", "operandLabels": ["1000"]}
                    ],
                }
            )
        )
        result = runner.invoke(cli_app, ["create", "--draft", str(draft), "--dry-run"])
        assert result.exit_code == 0
        assert "Big_Deals" in result.output
        assert "GreaterThan" in result.output

    def test_missing_draft(self, cli_app):
        result = runner.invoke(cli_app, ["create", "--draft", "/nonexistent.json"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_operator(self, cli_app):
        result = runner.invoke(
            cli_app, ["create", "--object", "Contact", "--label", "X", "--filter", "Email:Like:a"]
        )
        assert result.exit_code != 0

    def test_label_required(self, cli_app):
        result = runner.invoke(cli_app, ["create", "--object", "Contact", "--dry-run"])
        assert result.exit_code == 1
        assert "label or API name" in result.output


class TestConfigureCommand:
    def test_show(self, cli_app):
        result = runner.invoke(cli_app, ["configure", "--show"])
        assert result.exit_code == 0
        assert "Endpoint" in result.output

    def test_save_endpoint(self, cli_app, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(cli_app, ["configure", "--endpoint", "https://new.test"])
        assert result.exit_code == 0
        assert "LISTVIEW_API_ENDPOINT=https://new.test" in (tmp_path / ".env").read_text()
