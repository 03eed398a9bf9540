import logging

import pytest

from ib_verify.config import DataFilesConfig, VerificationConfig

# Semicolon-delimited with a BOM, as exported by spreadsheet tools
BALANCE_CHECKS_CSV = (
    "\ufeffName;Before;After;Amount;Direction;Exchange_Rate;Exchange_Rate_Type;Tolerance\n"
    "bill payment;MUR 10,000.00;MUR 9,500.00;500.00;debit;;;\n"
    "salary;MUR 9,500.00;MUR 12,000.00;2,500.00;Credit;;;\n"
    "card payment;MUR 12,000.00;MUR 7,432.20;100.00;debit;45.678; Sell ;\n"
    ";;;;;;;\n"
    "\n"
)

FAILING_CHECKS_CSV = (
    "name,before,after,amount,tolerance\n"
    "fee charged,1000.00,898.50,100.00,1.00\n"
    "short debit,1000.00,900.00,90.00,\n"
)


@pytest.fixture
def balance_checks_file(tmp_path):
    path = tmp_path / "balance_checks.csv"
    path.write_text(BALANCE_CHECKS_CSV, encoding="utf-8")
    return path


@pytest.fixture
def failing_checks_file(tmp_path):
    path = tmp_path / "failing_checks.csv"
    path.write_text(FAILING_CHECKS_CSV, encoding="utf-8")
    return path


@pytest.fixture
def data_config(tmp_path):
    return VerificationConfig(data=DataFilesConfig(data_dir=str(tmp_path)))


@pytest.fixture(autouse=True)
def reset_package_logger():
    """CLI runs attach handlers bound to captured streams; drop them after each test."""
    yield
    logging.getLogger("ib_verify").handlers = []
