"""AccountStore: the atomic adjust primitive and account lookups."""

from decimal import Decimal

from balance_kernel.selectors.account_selector import AccountSelector
from balance_kernel.services.account_store import AccountStore


class TestAdjust:
    def test_adds_signed_delta(self, session, make_account):
        account = make_account("Checking", 3, Decimal("100.00"))
        store = AccountStore(session)

        assert store.adjust(account.id, Decimal("-30.25")) == 1
        assert store.adjust(account.id, Decimal("5.00")) == 1

        assert AccountSelector(session).balance_of(account.id) == Decimal("74.75")

    def test_null_balance_counts_as_zero(self, session, make_account):
        account = make_account("Checking", 3, balance=None)

        AccountStore(session).adjust(account.id, Decimal("-12.00"))

        assert AccountSelector(session).balance_of(account.id) == Decimal("-12.00")

    def test_unknown_account_affects_no_rows(self, session, make_account):
        account = make_account("Checking", 3, Decimal("100.00"))

        assert AccountStore(session).adjust(account.id + 1000, Decimal("1.00")) == 0
        assert AccountSelector(session).balance_of(account.id) == Decimal("100.00")

    def test_none_account_is_a_no_op(self, session):
        assert AccountStore(session).adjust(None, Decimal("1.00")) == 0

    def test_only_target_row_changes(self, session, make_account):
        target = make_account("Checking", 3, Decimal("100.00"))
        other = make_account("Other", 3, Decimal("50.00"))

        AccountStore(session).adjust(target.id, Decimal("1.00"))

        assert AccountSelector(session).balance_of(other.id) == Decimal("50.00")

    def test_adjust_is_not_committed(self, session, make_account):
        account = make_account("Checking", 3, Decimal("100.00"))
        session.commit()

        AccountStore(session).adjust(account.id, Decimal("1.00"))
        session.rollback()

        assert AccountSelector(session).balance_of(account.id) == Decimal("100.00")

    def test_adjust_is_logged(self, session, make_account, captured_logs):
        account = make_account("Checking", 3, Decimal("100.00"))

        AccountStore(session).adjust(account.id, Decimal("2.50"))

        executed = [r for r in captured_logs() if r["message"] == "balance_adjust_executed"]
        assert len(executed) == 1
        assert executed[0]["account_id"] == account.id
        assert executed[0]["delta"] == "2.50"
        assert executed[0]["rows"] == 1


class TestLookups:
    def test_get_returns_snapshot(self, session, make_account):
        account = make_account("Visa", 8, Decimal("-10.00"), monthly_due_date_day=12)

        snapshot = AccountStore(session).get(account.id)

        assert snapshot.name == "Visa"
        assert snapshot.balance == Decimal("-10.00")
        assert snapshot.account_type_id == 8
        assert snapshot.monthly_due_date_day == 12

    def test_get_unknown_or_none(self, session):
        store = AccountStore(session)

        assert store.get(12345) is None
        assert store.get(None) is None

    def test_first_account_of_type_is_lowest_id(self, session, make_account):
        make_account("Savings", 13)
        first = make_account("Checking A", 3)
        make_account("Checking B", 3)

        assert AccountStore(session).first_account_of_type(3).id == first.id

    def test_first_account_of_type_missing(self, session, make_account):
        make_account("Savings", 13)
        store = AccountStore(session)

        assert store.first_account_of_type(3) is None
        assert store.first_account_of_type(None) is None

    def test_snapshot_reflects_adjustment(self, session, make_account):
        account = make_account("Checking", 3, Decimal("10.00"))
        store = AccountStore(session)
        store.get(account.id)

        store.adjust(account.id, Decimal("5.00"))

        assert store.get(account.id).balance == Decimal("15.00")
