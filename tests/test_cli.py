"""
Tests for the sampolio command-line interface.
"""

import json

import pytest
import yaml
from sampolio.cli import EXAMPLE_PLAN, build_parser, main


@pytest.fixture
def plan_file(tmp_path):
    path = tmp_path / "household.yaml"
    path.write_text(yaml.safe_dump(EXAMPLE_PLAN, sort_keys=False), encoding="utf-8")
    return path


class TestExample:
    def test_prints_loadable_yaml(self, capsys):
        assert main(["example"]) == 0
        data = yaml.safe_load(capsys.readouterr().out)
        assert data["plan"]["id"] == "household"
        assert data["accounts"][0]["id"] == "main"

    def test_json(self, capsys):
        assert main(["example", "--json"]) == 0
        assert json.loads(capsys.readouterr().out) == EXAMPLE_PLAN


class TestValidate:
    def test_example_plan_is_valid(self, plan_file, capsys):
        assert main(["validate", str(plan_file), "--current-month", "2026-01"]) == 0
        assert "Validation passed" in capsys.readouterr().out

    def test_json_report_with_errors(self, tmp_path, capsys):
        broken = dict(EXAMPLE_PLAN)
        broken["recurring"] = [
            {"id": "rent", "name": "Rent", "type": "expense", "amount": -1.0}
        ]
        path = tmp_path / "broken.json"
        path.write_text(json.dumps(broken), encoding="utf-8")
        code = main(["validate", str(path), "--current-month", "2026-01", "--format", "json"])
        assert code == 1
        report = json.loads(capsys.readouterr().out)
        assert report["has_errors"]
        assert report["errors"][0]["id"] == "rent"

    def test_unparseable_file(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("accounts: [", encoding="utf-8")
        assert main(["validate", str(path)]) == 1
        assert "Validation failed" in capsys.readouterr().out


class TestProject:
    def test_monthly_json(self, plan_file, capsys):
        assert main(["project", str(plan_file), "--account", "main", "--json"]) == 0
        months = json.loads(capsys.readouterr().out)
        assert len(months) == 24
        assert months[0]["year_month"] == "2026-01"
        assert months[0]["starting_balance"] == 1000.0
        assert months[1]["starting_balance"] == pytest.approx(months[0]["ending_balance"])

    def test_yearly_table(self, plan_file, capsys):
        assert main(["project", str(plan_file), "--account", "main", "--yearly"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert [line.split()[0] for line in lines] == ["2026", "2027"]

    def test_window_and_type_filters(self, plan_file, capsys):
        argv = [
            "project",
            str(plan_file),
            "--account",
            "main",
            "--start",
            "2026-03",
            "--end",
            "2026-03",
            "--type",
            "expense",
            "--json",
        ]
        assert main(argv) == 0
        (march,) = json.loads(capsys.readouterr().out)
        assert march["total_income"] == 0.0
        assert {li["item_id"] for li in march["expense_breakdown"]} == {"rent", "food", "laptop"}

    def test_unknown_account(self, plan_file, capsys):
        assert main(["project", str(plan_file), "--account", "nope"]) == 1
        assert "Unknown account id" in capsys.readouterr().err


class TestWealth:
    def test_yearly_json(self, plan_file, capsys):
        argv = ["wealth", str(plan_file), "--current-month", "2026-01", "--yearly", "--json"]
        assert main(argv) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["plan"] == "household"
        assert payload["currencies"] == ["EUR"]
        assert payload["display_currency"] == "EUR"
        periods = [row["period"] for row in payload["totals"]]
        assert periods[0] == "2026"
        assert periods == sorted(periods)

    def test_table_with_workers(self, plan_file, capsys):
        argv = ["wealth", str(plan_file), "--current-month", "2026-01", "--horizon", "12", "--workers", "2"]
        assert main(argv) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0].split()[0] == "period"
        assert out[1].startswith("2026-01")
        assert "€" in out[1]

    def test_base_currency_sets_display_symbol(self, plan_file, capsys):
        argv = ["wealth", str(plan_file), "--current-month", "2026-01", "--horizon", "12", "--base-currency", "usd"]
        assert main(argv) == 0
        out = capsys.readouterr().out.splitlines()
        assert "$" in out[1]
        assert "€" not in out[1]

    def test_invalid_plan_is_rejected(self, tmp_path, capsys):
        broken = dict(EXAMPLE_PLAN)
        broken["debts"] = [{"id": "car", "principal": 1000.0, "start_date": "2026-01"}]
        path = tmp_path / "broken.yaml"
        path.write_text(yaml.safe_dump(broken), encoding="utf-8")
        assert main(["wealth", str(path), "--current-month", "2026-01"]) == 1
        assert "validation error" in capsys.readouterr().err


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
