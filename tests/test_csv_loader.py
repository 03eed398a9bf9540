from decimal import Decimal

import pytest

from ib_verify.loaders import CsvDataLoader
from ib_verify.models import ExchangeDirection, TransactionDirection
from ib_verify.reconciliation import BalanceReconciler
from ib_verify.utils.exceptions import DataFileError


class TestLoad:
    """Reading CSV test data"""

    def test_semicolon_file_with_bom(self, balance_checks_file):
        records = CsvDataLoader().load(balance_checks_file)
        assert len(records) == 3
        assert list(records[0])[0] == "Name"
        assert records[0]["Before"] == "MUR 10,000.00"
        assert records[0]["Tolerance"] == ""
        assert records[2]["Exchange_Rate_Type"] == "Sell"

    def test_comma_file_is_trimmed(self, tmp_path):
        path = tmp_path / "accounts.csv"
        path.write_text(" Name , Account \n Savings , 0001234567 \n", encoding="utf-8")
        assert CsvDataLoader().load(path) == [{"Name": "Savings", "Account": "0001234567"}]

    def test_resolves_against_data_dir(self, data_config, balance_checks_file):
        records = CsvDataLoader(data_config).load("balance_checks.csv")
        assert len(records) == 3

    def test_missing_file(self, data_config):
        with pytest.raises(DataFileError):
            CsvDataLoader(data_config).load("nope.csv")


class TestUpdateCell:
    def test_update_keeps_delimiter(self, balance_checks_file):
        loader = CsvDataLoader()
        loader.update_cell(balance_checks_file, 1, "Amount", "2,600.00")

        assert ";" in balance_checks_file.read_text(encoding="utf-8").splitlines()[0]
        records = loader.load(balance_checks_file)
        assert records[1]["Amount"] == "2,600.00"
        assert records[0]["Amount"] == "500.00"

    def test_update_keeps_bom(self, balance_checks_file):
        CsvDataLoader().update_cell(balance_checks_file, 0, "Amount", "600.00")
        assert balance_checks_file.read_bytes().startswith(b"\xef\xbb\xbf")

    def test_update_does_not_add_bom(self, failing_checks_file):
        CsvDataLoader().update_cell(failing_checks_file, 0, "amount", "101.50")
        assert failing_checks_file.read_bytes().startswith(b"name,")

    def test_unknown_column(self, balance_checks_file):
        with pytest.raises(DataFileError):
            CsvDataLoader().update_cell(balance_checks_file, 0, "Missing", "x")

    def test_row_out_of_range(self, balance_checks_file):
        with pytest.raises(DataFileError):
            CsvDataLoader().update_cell(balance_checks_file, 10, "Amount", "1.00")


class TestLoadBalanceChecks:
    def test_cases_are_built(self, balance_checks_file):
        cases = CsvDataLoader().load_balance_checks(balance_checks_file)

        assert [c.name for c in cases] == ["bill payment", "salary", "card payment"]
        assert cases[0].before == Decimal("10000.00")
        assert cases[0].direction is TransactionDirection.DEBIT
        assert cases[0].currency_code == "MUR"
        assert cases[1].direction is TransactionDirection.CREDIT
        assert cases[1].amount == Decimal("2500.00")
        assert not cases[1].is_cross_currency
        assert cases[2].exchange_rate == Decimal("45.678")
        assert cases[2].exchange_direction is ExchangeDirection.SELL

    def test_cases_reconcile(self, balance_checks_file):
        cases = CsvDataLoader().load_balance_checks(balance_checks_file)
        results = BalanceReconciler().run_cases(cases)
        assert all(result.passed for _, result in results)

    def test_row_tolerance_and_default_names(self, failing_checks_file):
        cases = CsvDataLoader().load_balance_checks(failing_checks_file)
        assert cases[0].tolerance == Decimal("1.00")
        assert cases[1].tolerance is None

        results = BalanceReconciler().run_cases(cases)
        assert [result.passed for _, result in results] == [False, False]

    def test_unnamed_rows_get_generated_names(self, tmp_path):
        path = tmp_path / "checks.csv"
        path.write_text("before,after,amount\n100,90,10\n", encoding="utf-8")
        cases = CsvDataLoader().load_balance_checks(path)
        assert cases[0].name == "case-001"
        assert cases[0].currency_code is None

    def test_missing_required_column(self, tmp_path):
        path = tmp_path / "checks.csv"
        path.write_text("before,amount\n100,10\n", encoding="utf-8")
        with pytest.raises(DataFileError, match="after"):
            CsvDataLoader().load_balance_checks(path)

    def test_invalid_rate_type(self, tmp_path):
        path = tmp_path / "checks.csv"
        path.write_text(
            "before,after,amount,exchange_rate,exchange_rate_type\n100,90,10,1.5,swap\n",
            encoding="utf-8",
        )
        with pytest.raises(DataFileError, match="swap"):
            CsvDataLoader().load_balance_checks(path)

    def test_invalid_rate_type_without_rate(self, tmp_path):
        path = tmp_path / "checks.csv"
        path.write_text(
            "before,after,amount,exchange_rate_type\n1000,900,100,hold\n", encoding="utf-8"
        )
        with pytest.raises(DataFileError, match="hold"):
            CsvDataLoader().load_balance_checks(path)

    def test_rate_type_without_rate(self, tmp_path):
        path = tmp_path / "checks.csv"
        path.write_text(
            "before,after,amount,exchange_rate,exchange_rate_type\n1000,900,100,,sell\n",
            encoding="utf-8",
        )
        with pytest.raises(DataFileError, match="together"):
            CsvDataLoader().load_balance_checks(path)

    def test_rate_without_rate_type(self, tmp_path):
        path = tmp_path / "checks.csv"
        path.write_text(
            "before,after,amount,exchange_rate\n10000,5432.20,100,45.678\n", encoding="utf-8"
        )
        with pytest.raises(DataFileError, match="together"):
            CsvDataLoader().load_balance_checks(path)

    def test_unparsable_amount(self, tmp_path):
        path = tmp_path / "checks.csv"
        path.write_text("before,after,amount\nMUR,90,10\n", encoding="utf-8")
        with pytest.raises(DataFileError):
            CsvDataLoader().load_balance_checks(path)
