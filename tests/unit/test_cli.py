#!/usr/bin/env python3
"""Tests for the command-line interface."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from xsd_openapi.cli import build_options, build_parser, main

FIXTURES_DIR = Path(__file__).parents[1] / "fixtures" / "schemas"

INLINE_XSD = (
    '<xsd:schema xmlns:xsd="http://www.w3.org/2001/XMLSchema">'
    '<xsd:element name="PingReq" type="xsd:string"/>'
    '</xsd:schema>'
)


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the CLI from reconfiguring logging for the test session"""
    with patch("xsd_openapi.cli.setup_logging") as mock_setup:
        yield mock_setup


class TestBuildOptions:
    """Test suite for merging option sources"""

    def test_defaults(self):
        args = build_parser().parse_args(["--input", "a.xsd"])

        options = build_options(args)

        assert options.request_suffix == "Req"
        assert options.http_method == "post"
        assert options.error is None

    def test_flags(self):
        args = build_parser().parse_args([
            "--input", "a.xsd",
            "--request-suffix", "Request",
            "--response-suffix", "Response",
            "--use-schema-name-in-path",
            "--http-method", "put",
            "--default-type", "object",
            "--error-xsd", "error.xsd",
            "--error-status-code", "400",
        ])

        options = build_options(args)

        assert options.request_suffix == "Request"
        assert options.response_suffix == "Response"
        assert options.use_schema_name_in_path is True
        assert options.http_method == "put"
        assert options.default_type == "object"
        assert options.error.error_xsd_file_path == "error.xsd"
        assert options.error.error_status_code == "400"

    def test_config_file_with_flag_override(self, tmp_path):
        """Test that flags win over values read from the options file"""
        config_path = tmp_path / "options.yaml"
        config_path.write_text(yaml.safe_dump({
            "http_method": "get",
            "content_type": "application/xml",
            "error": {"error_schema": {"type": "object"}, "error_description": "Failure"},
        }), encoding="utf-8")
        args = build_parser().parse_args([
            "--input", "a.xsd", "--config", str(config_path), "--http-method", "patch",
        ])

        options = build_options(args)

        assert options.http_method == "patch"
        assert options.content_type == "application/xml"
        assert options.error.error_schema == {"type": "object"}
        assert options.error.error_description == "Failure"

    def test_config_file_unquoted_status_code(self, tmp_path, capsys):
        """Test that an integer status code in the options file is accepted"""
        config_path = tmp_path / "options.yaml"
        config_path.write_text(
            "error:\n"
            f"  error_xsd_file_path: {FIXTURES_DIR / 'error.xsd'}\n"
            "  error_status_code: 400\n",
            encoding="utf-8",
        )

        exit_code = main(["--input", str(FIXTURES_DIR / "ordering.xsd"), "--config", str(config_path)])

        assert exit_code == 0
        document = json.loads(capsys.readouterr().out)
        responses = document["paths"]["/PlaceOrder"]["post"]["responses"]
        assert set(responses) == {"200", "400"}

    def test_config_file_must_be_mapping(self, tmp_path):
        config_path = tmp_path / "options.yaml"
        config_path.write_text("- just\n- a list\n", encoding="utf-8")
        args = build_parser().parse_args(["--input", "a.xsd", "--config", str(config_path)])

        with pytest.raises(ValueError, match="must contain a mapping"):
            build_options(args)


class TestMain:
    """Test suite for the CLI entry point"""

    def test_prints_json_without_output(self, capsys):
        exit_code = main(["--xsd-content", INLINE_XSD, "--schema-name", "Ping"])

        assert exit_code == 0
        document = json.loads(capsys.readouterr().out)
        assert document["info"]["title"] == "ping"
        assert list(document["paths"]) == ["/Ping"]

    def test_writes_output_file(self, tmp_path, capsys):
        output_path = tmp_path / "ordering.yaml"

        exit_code = main(["--input", str(FIXTURES_DIR / "ordering.xsd"), "--output", str(output_path)])

        assert exit_code == 0
        assert "OK: wrote OpenAPI document" in capsys.readouterr().err
        document = yaml.safe_load(output_path.read_text(encoding="utf-8"))
        assert set(document["paths"]) == {"/PlaceOrder", "/GetUserDetails"}

    def test_missing_input_file(self, tmp_path, capsys):
        exit_code = main(["--input", str(tmp_path / "absent.xsd")])

        assert exit_code == 1
        assert "Input file not found" in capsys.readouterr().err

    def test_invalid_options(self, capsys):
        exit_code = main(["--xsd-content", INLINE_XSD, "--request-suffix", ""])

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().err

    def test_source_is_required(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 2

    def test_log_level_is_passed_on(self, no_logging_setup, capsys):
        main(["--xsd-content", INLINE_XSD, "--log-level", "debug"])

        no_logging_setup.assert_called_once_with("DEBUG")
