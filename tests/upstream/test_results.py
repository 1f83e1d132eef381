"""
Unit tests for the extraction of table rows from Icinga responses.

The tests follow the Arrange-Act-Assert (AAA) pattern.
"""

import json
from typing import Any

import pytest

from icinga_dashboard.domain import MonitoredRow, ObjectType
from icinga_dashboard.upstream.results import UpstreamContractError, extract_state, parse_results


def encode(document: Any) -> bytes:
    return json.dumps(document).encode("utf-8")


class TestParseResults:
    """Tests for the parse_results function."""

    def test_parse_results_should_extract_host_rows(self) -> None:
        """
        Tests that a host result yields its name as host and an empty service.
        """
        # Arrange
        body = encode(
            {"results": [{"attrs": {"name": "h1", "state": 0, "last_check_result": {"output": "OK"}}}]}
        )

        # Act
        rows = parse_results(ObjectType.HOSTS, body)

        # Assert
        assert rows == [MonitoredRow(host="h1", service="", output="OK", state=0)]

    def test_parse_results_should_extract_service_rows(self) -> None:
        """
        Tests that a service result yields the owning host and the service name.
        """
        # Arrange
        body = encode(
            {
                "results": [
                    {
                        "attrs": {
                            "host_name": "h1",
                            "name": "disk",
                            "state": 2.0,
                            "last_check_result": {"output": "DISK CRITICAL"},
                        }
                    }
                ]
            }
        )

        # Act
        rows = parse_results(ObjectType.SERVICES, body)

        # Assert
        assert rows == [MonitoredRow(host="h1", service="disk", output="DISK CRITICAL", state=2)]

    def test_parse_results_should_default_missing_fields(self) -> None:
        """
        Tests that missing names, state and check result fall back to their defaults.
        """
        # Arrange
        body = encode({"results": [{"attrs": {}}, {"name": "no attrs"}]})

        # Act
        rows = parse_results(ObjectType.SERVICES, body)

        # Assert
        assert rows == [
            MonitoredRow(host="", service="", output="", state=5),
            MonitoredRow(host="", service="", output="", state=5),
        ]

    def test_parse_results_should_return_no_rows_for_empty_results(self) -> None:
        assert parse_results(ObjectType.HOSTS, encode({"results": []})) == []

    def test_parse_results_should_default_malformed_entries(self) -> None:
        """
        Tests that entries which are not objects, or whose attrs are not objects, still yield rows.
        """
        # Arrange
        body = encode(
            {
                "results": [
                    {"attrs": {"name": "h1", "state": 0}},
                    None,
                    42,
                    {"attrs": None},
                    {"attrs": ["h2"]},
                    {"attrs": {"name": "h3", "state": 1, "last_check_result": "CRITICAL"}},
                ]
            }
        )

        # Act
        rows = parse_results(ObjectType.HOSTS, body)

        # Assert
        default = MonitoredRow(host="", service="", output="", state=5)
        assert rows == [
            MonitoredRow(host="h1", service="", output="", state=0),
            default,
            default,
            default,
            default,
            MonitoredRow(host="h3", service="", output="", state=1),
        ]

    @pytest.mark.parametrize(
        "body",
        [
            b"<html>not json</html>",
            b"\x80\x81",
            encode([1, 2, 3]),
            encode({"error": 401}),
            encode({"results": {"attrs": {"name": "h1"}}}),
            encode({"results": "h1"}),
            encode({"results": None}),
        ],
    )
    def test_parse_results_should_reject_malformed_documents(self, body: bytes) -> None:
        """
        Tests that documents without a results array are contract violations.
        """
        with pytest.raises(UpstreamContractError):
            parse_results(ObjectType.HOSTS, body)


class TestExtractState:
    """Tests for the extract_state function."""

    @pytest.mark.parametrize(
        "attrs, expected",
        [
            ({"state": 0}, 0),
            ({"state": 3}, 3),
            ({"state": 1.0}, 1),
            ({"state": 6}, 6),
            ({}, 5),
            ({"state": None}, 5),
            ({"state": "2"}, 5),
            ({"state": True}, 5),
            ({"state": 7}, 6),
            ({"state": 300}, 6),
            ({"state": -1}, 6),
            ({"state": 1.5}, 6),
        ],
    )
    def test_extract_state_should_default_and_clamp(self, attrs: dict, expected: int) -> None:
        assert extract_state(attrs) == expected
