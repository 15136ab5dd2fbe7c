"""Unit tests for account edit transitions"""

import pytest
from datetime import date
from decimal import Decimal
from allowance_ledger.domain.account import (
    add_manual_transaction,
    delete_manual_transaction,
    update_current_settings,
    update_initial_settings,
)
from allowance_ledger.domain.exceptions import InvalidInputError, TransactionIndexError
from allowance_ledger.domain.ledger import build_ledger, extend_schedule
from allowance_ledger.domain.models import AccountState, TransactionKind

TODAY = date(2024, 1, 15)


class TestInitialSettings:
    """Tests for starting-parameter edits"""

    def test_rebuilds_deposits_and_syncs_current_rates(self, base_state: AccountState):
        """Test new initial rates apply everywhere while current rates are untouched"""
        extended, _ = extend_schedule(base_state, TODAY)

        updated = update_initial_settings(
            extended,
            TODAY,
            account_holder="  Sam ",
            initial_allowance=Decimal("10"),
            initial_interest_rate=Decimal("2"),
        )

        assert updated.account_holder == "Sam"
        assert updated.current_allowance == Decimal("10")
        assert updated.current_interest_rate == Decimal("2")
        allowances = [t.amount for t in updated.auto_deposits if t.kind is TransactionKind.ALLOWANCE]
        assert allowances == [Decimal("10"), Decimal("10")]
        assert build_ledger(updated).rows[1].amount == Decimal("0.2")

    def test_keeps_current_rates_after_they_were_changed(self, base_state: AccountState):
        """Test a recorded settings change date protects the current rates"""
        state = update_current_settings(base_state, date(2024, 1, 10), current_allowance=Decimal("7"))

        updated = update_initial_settings(state, TODAY, initial_allowance=Decimal("3"))

        assert updated.initial_allowance == Decimal("3")
        assert updated.current_allowance == Decimal("7")
        allowances = [t.amount for t in updated.auto_deposits if t.kind is TransactionKind.ALLOWANCE]
        assert allowances == [Decimal("3"), Decimal("7")]

    def test_blank_holder_is_ignored(self, base_state: AccountState):
        """Test an empty holder name leaves the old one in place"""
        updated = update_initial_settings(base_state, TODAY, account_holder="   ")

        assert updated.account_holder == "My"

    def test_moving_start_date_drops_earlier_deposits(self, base_state: AccountState):
        """Test a later start date removes deposits before it"""
        extended, _ = extend_schedule(base_state, TODAY)

        updated = update_initial_settings(extended, TODAY, start_date=date(2024, 1, 8))

        assert [t.date for t in updated.auto_deposits] == [date(2024, 1, 13), date(2024, 1, 14)]

    @pytest.mark.parametrize(
        "field",
        ["initial_balance", "initial_allowance", "initial_interest_rate"],
    )
    def test_rejects_negative_values(self, base_state: AccountState, field: str):
        """Test negative amounts and rates are refused"""
        with pytest.raises(InvalidInputError):
            update_initial_settings(base_state, TODAY, **{field: Decimal("-1")})


class TestCurrentSettings:
    """Tests for rate changes going forward"""

    def test_stamps_change_date_once(self, base_state: AccountState):
        """Test the first edit stamps today and later edits keep it"""
        first = update_current_settings(base_state, date(2024, 1, 10), current_allowance=Decimal("8"))
        second = update_current_settings(first, TODAY, current_interest_rate=Decimal("3"))

        assert first.settings_change_date == date(2024, 1, 10)
        assert second.settings_change_date == date(2024, 1, 10)
        assert second.current_allowance == Decimal("8")
        assert second.current_interest_rate == Decimal("3")

    def test_leaves_past_deposits_alone(self, base_state: AccountState):
        """Test existing auto deposits survive a rate change"""
        extended, _ = extend_schedule(base_state, TODAY)

        updated = update_current_settings(extended, TODAY, current_allowance=Decimal("20"))

        assert updated.auto_deposits == extended.auto_deposits

    def test_rejects_negative_rate(self, base_state: AccountState):
        """Test a negative interest rate is refused"""
        with pytest.raises(InvalidInputError):
            update_current_settings(base_state, TODAY, current_interest_rate=Decimal("-0.5"))


class TestManualTransactions:
    """Tests for adding and deleting manual entries"""

    def test_add_defaults_to_today(self, base_state: AccountState):
        """Test a transaction without a date lands on today"""
        updated = add_manual_transaction(base_state, TODAY, "Chores", Decimal("2.5"))

        assert len(updated.manual_transactions) == 1
        assert updated.manual_transactions[0].date == TODAY
        assert updated.manual_transactions[0].kind is TransactionKind.MANUAL_DEPOSIT

    def test_add_withdrawal(self, base_state: AccountState):
        """Test a negative amount is recorded as a withdrawal"""
        updated = add_manual_transaction(base_state, TODAY, "Toy", Decimal("-4"), on=date(2024, 1, 9))

        assert updated.manual_transactions[0].kind is TransactionKind.MANUAL_WITHDRAWAL
        # 0.05 on Jan 7, then 1% of 6.05 on Jan 14
        assert build_ledger(updated).current_balance == Decimal("6.1105")

    @pytest.mark.parametrize(
        "label,amount",
        [("", Decimal("5")), ("   ", Decimal("5")), ("Gift", Decimal("0")), ("Gift", Decimal("NaN"))],
    )
    def test_add_rejects_invalid_input(self, base_state: AccountState, label: str, amount: Decimal):
        """Test blank labels and zero or non-finite amounts are refused"""
        with pytest.raises(InvalidInputError):
            add_manual_transaction(base_state, TODAY, label, amount)

    def test_manual_index_is_insertion_order(self, base_state: AccountState):
        """Test indexes follow the order transactions were entered"""
        state = add_manual_transaction(base_state, TODAY, "Late", Decimal("1"), on=date(2024, 1, 12))
        state = add_manual_transaction(state, TODAY, "Early", Decimal("1"), on=date(2024, 1, 2))

        assert [t.label for t in state.manual_transactions] == ["Late", "Early"]
        rows = [row for row in build_ledger(state).rows if row.is_manual]
        assert [(row.description, row.manual_index) for row in rows] == [("Early", 1), ("Late", 0)]

    def test_delete_restores_interest(self, base_state: AccountState):
        """Test add then delete leaves the auto deposits as they were"""
        extended, _ = extend_schedule(base_state, TODAY)
        added = add_manual_transaction(extended, TODAY, "Birthday", Decimal("100"), on=date(2024, 1, 3))

        removed = delete_manual_transaction(added, TODAY, 0)

        assert removed.manual_transactions == ()
        assert sorted(removed.auto_deposits, key=lambda t: t.date) == list(extended.auto_deposits)
        assert build_ledger(removed).current_balance == Decimal("10.1505")

    def test_delete_keeps_other_transactions(self, base_state: AccountState):
        """Test deleting one entry shifts later indexes down"""
        state = add_manual_transaction(base_state, TODAY, "A", Decimal("1"))
        state = add_manual_transaction(state, TODAY, "B", Decimal("2"))
        state = add_manual_transaction(state, TODAY, "C", Decimal("3"))

        updated = delete_manual_transaction(state, TODAY, 1)

        assert [t.label for t in updated.manual_transactions] == ["A", "C"]

    @pytest.mark.parametrize("index", [-1, 1, 5])
    def test_delete_out_of_range(self, base_state: AccountState, index: int):
        """Test invalid indexes raise and name the bounds"""
        state = add_manual_transaction(base_state, TODAY, "Only", Decimal("1"))

        with pytest.raises(TransactionIndexError) as exc_info:
            delete_manual_transaction(state, TODAY, index)

        assert exc_info.value.index == index
        assert exc_info.value.count == 1
