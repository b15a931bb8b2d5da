"""
TransactionRecorder: insert-then-post, and edits that never re-post.
"""

import datetime as dt
from decimal import Decimal

import pytest

from balance_kernel.domain.dtos import NewTransaction
from balance_kernel.exceptions import (
    ImmutableFieldError,
    TransactionError,
    TransactionNotFoundError,
)
from balance_kernel.selectors.transaction_selector import TransactionSelector
from balance_kernel.services.transaction_recorder import TransactionRecorder


@pytest.fixture
def recorder(session, rule_config) -> TransactionRecorder:
    return TransactionRecorder(session, rule_config)


def grocery(amount="90.00", **overrides) -> NewTransaction:
    fields = dict(
        description="Grocery",
        type_id=5,
        amount=Decimal(amount),
        date=dt.date(2025, 9, 5),
        account_id=None,
    )
    fields.update(overrides)
    return NewTransaction(**fields)


class TestRecord:
    def test_record_inserts_and_posts(self, reference_accounts, recorder, session, balances):
        transaction = recorder.record(grocery())

        assert transaction.id is not None
        assert TransactionSelector(session).get(transaction.id).description == "Grocery"
        assert balances()[15] == Decimal("1090.00")

    def test_amount_is_rounded_to_cents(self, reference_accounts, recorder, balances):
        transaction = recorder.record(grocery(amount="10.005"))

        assert transaction.amount == Decimal("10.01")
        assert balances()[15] == Decimal("1010.01")

    def test_float_amount_converted_through_its_text(self, reference_accounts, recorder, balances):
        transaction = recorder.record(
            NewTransaction(
                description="Refund",
                type_id=5,
                amount=0.1,
                date=dt.date(2025, 9, 5),
            )
        )

        assert transaction.amount == Decimal("0.10")
        assert balances()[15] == Decimal("1000.10")

    def test_invalid_amount_is_rejected_before_insert(self, reference_accounts, recorder, session):
        with pytest.raises(ValueError):
            recorder.record(grocery(amount="NaN"))

        assert TransactionSelector(session).count() == 0

    def test_recorded_event_logged_in_transaction_context(
        self, reference_accounts, recorder, captured_logs
    ):
        transaction = recorder.record(grocery())

        recorded = [r for r in captured_logs() if r["message"] == "transaction_recorded"]
        assert len(recorded) == 1
        assert recorded[0]["transaction_id"] == str(transaction.id)
        assert recorded[0]["amount"] == "90.00"


class TestAmend:
    def test_amending_amount_does_not_repost(self, reference_accounts, recorder, session, balances):
        transaction = recorder.record(grocery())

        amended = recorder.amend(transaction.id, amount=Decimal("500.00"))

        assert amended.amount == Decimal("500.00")
        assert TransactionSelector(session).get(transaction.id).amount == Decimal("500.00")
        assert balances()[15] == Decimal("1090.00")

    def test_amending_type_and_account_does_not_repost(
        self, reference_accounts, recorder, balances
    ):
        transaction = recorder.record(grocery())
        before = balances()

        recorder.amend(transaction.id, type_id=8, account_id=20, description="Visa")

        assert balances() == before

    def test_amend_logs_fields_and_no_repost(self, reference_accounts, recorder, captured_logs):
        transaction = recorder.record(grocery())

        recorder.amend(transaction.id, description="Groceries", date=dt.date(2025, 9, 6))

        amended = [r for r in captured_logs() if r["message"] == "transaction_amended"]
        assert amended[0]["fields"] == ["date", "description"]
        assert amended[0]["reposted"] is False

    def test_unknown_transaction(self, recorder):
        with pytest.raises(TransactionNotFoundError) as exc_info:
            recorder.amend(404, description="x")

        assert exc_info.value.transaction_id == 404
        assert exc_info.value.code == "TRANSACTION_NOT_FOUND"

    @pytest.mark.parametrize("field_name", ["id", "created_at", "balance"])
    def test_non_amendable_field(self, reference_accounts, recorder, field_name):
        transaction = recorder.record(grocery())

        with pytest.raises(ImmutableFieldError) as exc_info:
            recorder.amend(transaction.id, **{field_name: 1})

        assert isinstance(exc_info.value, TransactionError)
        assert exc_info.value.field_name == field_name

    def test_rejected_amend_changes_nothing(self, reference_accounts, recorder, session):
        transaction = recorder.record(grocery())

        with pytest.raises(ImmutableFieldError):
            recorder.amend(transaction.id, description="changed", id=99)

        assert TransactionSelector(session).get(transaction.id).description == "Grocery"


class TestTransactionSelector:
    def test_for_account_newest_first(self, reference_accounts, recorder, session):
        older = recorder.record(grocery(account_id=20, type_id=8, date=dt.date(2025, 9, 1)))
        newer = recorder.record(grocery(account_id=20, type_id=8, date=dt.date(2025, 9, 3)))
        recorder.record(grocery())

        rows = TransactionSelector(session).for_account(20)

        assert [t.id for t in rows] == [newer.id, older.id]

    def test_for_account_none_lists_everything(self, reference_accounts, recorder, session):
        recorder.record(grocery(account_id=20, type_id=8))
        recorder.record(grocery())

        assert len(TransactionSelector(session).for_account(None)) == 2

    def test_same_day_ordered_by_id(self, reference_accounts, recorder, session):
        first = recorder.record(grocery())
        second = recorder.record(grocery())

        rows = TransactionSelector(session).for_account(None)

        assert [t.id for t in rows] == [second.id, first.id]

    def test_get_unknown(self, session):
        assert TransactionSelector(session).get(1) is None
