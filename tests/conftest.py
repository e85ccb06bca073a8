import sys
from concurrent.futures import Future
from pathlib import Path
from unittest.mock import Mock

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from recordgrid.domain.models import Column, ColumnType, MutationResult, RecordSet  # noqa: E402


ACCOUNT_COLUMNS = (
    Column("Id", "Record Id"),
    Column("Name", "Account Name", editable=True),
    Column("Industry", "Industry", editable=True),
    Column("Phone", "Phone", type=ColumnType.PHONE),
)


def make_accounts(count: int) -> RecordSet:
    records = [
        {
            "Id": f"001{i:03d}",
            "Name": f"Account {i:02d}",
            "Industry": "Energy" if i % 2 else "Retail",
            "Phone": f"555-01{i:02d}",
        }
        for i in range(count)
    ]
    return RecordSet(records=tuple(records), columns=ACCOUNT_COLUMNS)


@pytest.fixture
def accounts() -> RecordSet:
    return RecordSet(
        records=(
            {"Id": "a1", "Name": "Acme Corp", "Industry": "Manufacturing", "Phone": "555-0100"},
            {"Id": "a2", "Name": "Globex", "Industry": "Energy", "Phone": "555-0101"},
            {"Id": "a3", "Name": "Initech", "Industry": "Technology", "Phone": None},
            {"Id": "a4", "Name": "Umbrella", "Industry": "Pharma", "Phone": "555-0103"},
        ),
        columns=ACCOUNT_COLUMNS,
    )


@pytest.fixture
def gateway():
    """A persistence gateway whose futures the test resolves by hand."""
    gw = Mock()
    gw.pending = []

    def _submit(payload):
        future = Future()
        gw.pending.append((payload, future))
        return future

    gw.submit = Mock(side_effect=_submit)
    gw.fetch = Mock(return_value=RecordSet(columns=ACCOUNT_COLUMNS))
    return gw


@pytest.fixture
def instant_gateway(accounts):
    """A gateway that acknowledges every payload immediately."""
    gw = Mock()

    def _submit(payload):
        future = Future()
        future.set_result(MutationResult.success())
        return future

    gw.submit = Mock(side_effect=_submit)
    gw.fetch = Mock(return_value=accounts)
    return gw


@pytest.fixture
def account_factory():
    return make_accounts
