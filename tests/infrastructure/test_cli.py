"""End-to-end tests for the click CLI."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from eventquote.infrastructure.cli.main import cli

SAMPLE_ORDER = Path(__file__).resolve().parents[2] / "data" / "sample_order.json"


@pytest.fixture
def runner():
    return CliRunner()


class TestQuoteCommand:

    def test_sample_order(self, runner):
        result = runner.invoke(cli, ["quote", str(SAMPLE_ORDER)])
        assert result.exit_code == 0, result.output
        assert "Taqueria Catering" in result.output
        assert "Delivery (5-25 miles): $10.00" in result.output
        assert "$2,265.71" in result.output

    def test_explicit_tax_rate(self, runner, tmp_path):
        order = tmp_path / "order.json"
        order.write_text(
            json.dumps(
                {
                    "services": [
                        {"id": "hall", "name": "Hall", "serviceType": "venue", "price": "100"}
                    ],
                    "isServiceFeeWaived": True,
                }
            ),
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["quote", str(order), "--tax-rate", "0.1"])
        assert result.exit_code == 0, result.output
        assert "$110.00" in result.output

    def test_invalid_json(self, runner, tmp_path):
        order = tmp_path / "order.json"
        order.write_text("{not json", encoding="utf-8")
        result = runner.invoke(cli, ["quote", str(order)])
        assert result.exit_code != 0
        assert "not valid JSON" in result.output

    def test_domain_error_reported(self, runner, tmp_path):
        order = tmp_path / "order.json"
        order.write_text(json.dumps({"services": [{"id": "x", "serviceType": "zoo"}]}), encoding="utf-8")
        result = runner.invoke(cli, ["quote", str(order)])
        assert result.exit_code != 0
        assert "unknown type 'zoo'" in result.output

    def test_huge_price_reported_without_traceback(self, runner, tmp_path):
        order = tmp_path / "order.json"
        order.write_text(
            json.dumps({"services": [{"id": "hall", "serviceType": "venue", "price": "9" * 30}]}),
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["quote", str(order), "--tax-rate", "0"])
        assert result.exit_code == 1
        assert "too large" in result.output
        assert not isinstance(result.exception, ArithmeticError)

    def test_bad_tax_rate(self, runner):
        result = runner.invoke(cli, ["quote", str(SAMPLE_ORDER), "--tax-rate", "lots"])
        assert result.exit_code != 0
        assert "Invalid tax rate" in result.output

    def test_service_fee_from_environment(self, runner, tmp_path):
        order = tmp_path / "order.json"
        order.write_text(
            json.dumps(
                {"services": [{"id": "hall", "name": "Hall", "serviceType": "venue", "price": "100"}]}
            ),
            encoding="utf-8",
        )
        result = runner.invoke(
            cli,
            ["quote", str(order), "--tax-rate", "0"],
            env={"EVENTQUOTE_SERVICE_FEE_TYPE": "fixed", "EVENTQUOTE_SERVICE_FEE_FIXED": "4.25"},
        )
        assert result.exit_code == 0, result.output
        assert "$104.25" in result.output


class TestDeliveryCommand:

    def test_eligible(self, runner):
        result = runner.invoke(cli, ["delivery", "--distance", "12", "--ranges", "5:0,25:10,50:20"])
        assert result.exit_code == 0, result.output
        assert "Eligible: up to 25 miles, fee $10.00" in result.output

    def test_below_minimum(self, runner):
        result = runner.invoke(
            cli,
            [
                "delivery",
                "--distance", "3",
                "--ranges", "5:0,25:10",
                "--subtotal", "100",
                "--minimum", "150",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Not eligible: BELOW_MINIMUM (minimum $150.00; within range: yes)" in result.output

    def test_out_of_area(self, runner):
        result = runner.invoke(cli, ["delivery", "--distance", "80", "--ranges", "5:0,25:10"])
        assert "Not eligible: OUT_OF_SERVICE_AREA" in result.output

    def test_malformed_ranges(self, runner):
        result = runner.invoke(cli, ["delivery", "--distance", "3", "--ranges", "5-0"])
        assert result.exit_code != 0
        assert "Expected 'MaxMiles:Fee'" in result.output

    def test_negative_distance(self, runner):
        result = runner.invoke(cli, ["delivery", "--distance=-1", "--ranges", "5:0"])
        assert result.exit_code != 0
        assert "cannot be negative" in result.output
