"""Tests for ledger mutations and balance queries."""

from datetime import date

import pytest

from ledgerbook.doubleentry.account import find_account_by_id, find_account_by_path
from ledgerbook.doubleentry.entry import (
    add_credit_line,
    add_debit_line,
    create_entry,
    create_opening_balance_entry,
    create_simple_entry,
    update_entry_fields,
)
from ledgerbook.doubleentry.ledger import (
    add_account,
    add_entry,
    archive_account,
    create_ledger,
    delete_account,
    get_account_balance,
    get_account_total_balance,
    get_all_tags,
    get_net_worth,
    get_profit,
    get_root_account,
    get_type_balance,
    move_account,
    remove_entry,
    update_account,
    update_entry,
    update_ledger,
    verify_accounting_equation,
)
from ledgerbook.exceptions import (
    AccountNotFoundError,
    BalanceError,
    EntryNotFoundError,
    InvariantError,
    StructuralError,
)
from ledgerbook.models.accounts import AccountType
from ledgerbook.models.currency import CurrencyCode

DAY = date(2024, 3, 10)


def _simple(ledger, ids, debit: str, credit: str, amount: int, **kwargs):
    return create_simple_entry(
        date=kwargs.pop("date", DAY),
        description=kwargs.pop("description", "Entry"),
        debit_account_id=ids[debit],
        credit_account_id=ids[credit],
        amount=amount,
        accounts=ledger.accounts,
        **kwargs,
    )


class TestCreateLedger:
    """Tests for ledger creation."""

    def test_has_five_roots_and_no_entries(self) -> None:
        """A new ledger should carry one root per account type."""
        ledger = create_ledger("Travel", default_currency=CurrencyCode.JPY)

        assert [a.path for a in ledger.accounts] == [
            "assets",
            "liabilities",
            "equity",
            "income",
            "expenses",
        ]
        assert all(a.is_root and a.balance == 0 for a in ledger.accounts)
        assert all(a.currency == CurrencyCode.JPY for a in ledger.accounts)
        assert ledger.entries == ()

    def test_update_ledger_rejects_unknown_fields(self) -> None:
        """Only name, description, icon and archived are editable."""
        ledger = create_ledger("Main")

        assert update_ledger(ledger, name="Home").name == "Home"
        with pytest.raises(StructuralError, match="default_currency"):
            update_ledger(ledger, default_currency=CurrencyCode.USD)


class TestAccounts:
    """Tests for account mutations."""

    def test_child_inherits_type_and_currency(self, ledger, ids) -> None:
        """Should derive the path from the parent and slug the name."""
        card = find_account_by_id(ledger.accounts, ids["liabilities:credit-card"])

        assert card.type == AccountType.LIABILITIES
        assert card.currency == CurrencyCode.CNY
        assert card.parent_id == ids["liabilities"]
        assert card.depth == 1

    def test_nested_account_path(self, ledger, ids) -> None:
        """Grandchildren should extend the parent's path."""
        ledger = add_account(ledger, name="China Merchants", parent_id=ids["assets:bank"])

        assert find_account_by_path(ledger.accounts, "assets:bank:china-merchants") is not None

    def test_duplicate_path_is_rejected(self, ledger, ids) -> None:
        """Two siblings cannot share a slug."""
        with pytest.raises(InvariantError, match="assets:cash already exists"):
            add_account(ledger, name="CASH", parent_id=ids["assets"])

    def test_unknown_parent_is_rejected(self, ledger) -> None:
        """Should raise AccountNotFoundError for a missing parent."""
        with pytest.raises(AccountNotFoundError, match="Parent account nope not found"):
            add_account(ledger, name="Orphan", parent_id="nope")

    def test_blank_name_is_rejected(self, ledger, ids) -> None:
        """Should refuse an empty account name."""
        with pytest.raises(StructuralError, match="must not be empty"):
            add_account(ledger, name="   ", parent_id=ids["assets"])

    def test_rename_keeps_path(self, ledger, ids) -> None:
        """Renaming changes the display name only."""
        ledger = update_account(ledger, ids["assets:cash"], name="Wallet")
        account = find_account_by_id(ledger.accounts, ids["assets:cash"])

        assert account.name == "Wallet"
        assert account.path == "assets:cash"

    def test_update_account_rejects_balance(self, ledger, ids) -> None:
        """Balances only change through posting."""
        with pytest.raises(StructuralError, match="balance"):
            update_account(ledger, ids["assets:cash"], balance=100)

    def test_archive_account(self, ledger, ids) -> None:
        """Should archive a leaf and refuse to archive it twice or archive a root."""
        ledger = archive_account(ledger, ids["assets:cash"])

        assert find_account_by_id(ledger.accounts, ids["assets:cash"]).archived
        with pytest.raises(StructuralError, match="already archived"):
            archive_account(ledger, ids["assets:cash"])
        with pytest.raises(StructuralError, match="Root accounts"):
            archive_account(ledger, ids["assets"])

    def test_delete_unused_leaf(self, ledger, ids) -> None:
        """An unused leaf account can be hard-deleted."""
        ledger = delete_account(ledger, ids["expenses:rent"])

        assert find_account_by_id(ledger.accounts, ids["expenses:rent"]) is None

    def test_delete_used_account_is_rejected(self, ledger, ids) -> None:
        """Accounts referenced by entries must be archived instead."""
        ledger = add_entry(ledger, _simple(ledger, ids, "expenses:food", "assets:cash", 100))

        with pytest.raises(StructuralError, match="used by entries"):
            delete_account(ledger, ids["expenses:food"])

    def test_delete_parent_is_rejected(self, ledger, ids) -> None:
        """Accounts with children cannot be deleted."""
        with pytest.raises(StructuralError, match="sub-accounts"):
            delete_account(ledger, ids["assets"])

    def test_move_rewrites_descendant_paths(self, ledger, ids) -> None:
        """Moving an account should carry its subtree along."""
        ledger = add_account(ledger, name="Savings", parent_id=ids["assets:bank"])
        savings = find_account_by_path(ledger.accounts, "assets:bank:savings")

        ledger = move_account(ledger, ids["assets:bank"], ids["assets:cash"])

        bank = find_account_by_id(ledger.accounts, ids["assets:bank"])
        assert bank.parent_id == ids["assets:cash"]
        assert bank.path == "assets:cash:bank"
        assert find_account_by_id(ledger.accounts, savings.id).path == "assets:cash:bank:savings"

    def test_move_under_descendant_is_rejected(self, ledger, ids) -> None:
        """A move must not create a cycle."""
        ledger = add_account(ledger, name="Savings", parent_id=ids["assets:bank"])
        savings = find_account_by_path(ledger.accounts, "assets:bank:savings")

        with pytest.raises(StructuralError, match="sub-accounts"):
            move_account(ledger, ids["assets:bank"], savings.id)

    def test_move_across_types_is_rejected(self, ledger, ids) -> None:
        """A move must stay within one account type."""
        with pytest.raises(StructuralError, match="type mismatch"):
            move_account(ledger, ids["assets:cash"], ids["expenses"])

    def test_move_with_unknown_accounts(self, ledger, ids) -> None:
        """Unknown ids surface as AccountNotFoundError, not a failed move."""
        with pytest.raises(AccountNotFoundError, match="Account ghost not found"):
            move_account(ledger, "ghost", ids["assets"])
        with pytest.raises(AccountNotFoundError, match="Parent account ghost not found") as exc_info:
            move_account(ledger, ids["assets:cash"], "ghost")

        assert exc_info.value.identifier == "ghost"


class TestEntries:
    """Tests for adding, removing and updating entries."""

    def test_add_entry_posts_balances(self, ledger, ids) -> None:
        """Recording an entry should update both accounts."""
        ledger = add_entry(ledger, _simple(ledger, ids, "assets:bank", "income:salary", 1_000_000))

        assert get_account_balance(ledger, ids["assets:bank"]) == 1_000_000
        assert get_account_balance(ledger, ids["income:salary"]) == 1_000_000
        assert len(ledger.entries) == 1
        assert verify_accounting_equation(ledger)

    def test_rejected_entry_leaves_ledger_unchanged(self, ledger, ids) -> None:
        """A failed add should not touch the input snapshot."""
        entry = create_entry(date=DAY, description="Typo")
        entry = add_debit_line(entry, ids["expenses:food"], 1000)
        entry = add_credit_line(entry, ids["assets:cash"], 999)
        with pytest.raises(BalanceError):
            add_entry(ledger, entry)

        assert ledger.entries == ()
        assert all(a.balance == 0 for a in ledger.accounts)

    def test_single_line_entry_is_rejected(self, ledger, ids) -> None:
        """An entry needs at least a debit and a credit."""
        entry = add_debit_line(create_entry(date=DAY, description="Half"), ids["assets:cash"], 100)

        with pytest.raises(StructuralError, match="at least two lines"):
            add_entry(ledger, entry)

    def test_duplicate_entry_id_is_rejected(self, ledger, ids) -> None:
        """Entry ids are unique within a ledger."""
        entry = _simple(ledger, ids, "expenses:food", "assets:cash", 100)
        ledger = add_entry(ledger, entry)

        with pytest.raises(StructuralError, match="already exists"):
            add_entry(ledger, entry)

    def test_blank_description_is_rejected(self, ledger, ids) -> None:
        """Entries need a description."""
        entry = _simple(ledger, ids, "expenses:food", "assets:cash", 100, description=" ")

        with pytest.raises(StructuralError, match="description"):
            add_entry(ledger, entry)

    def test_remove_entry_restores_balances(self, ledger, ids) -> None:
        """Removing an entry should reverse exactly what adding did."""
        entry = _simple(ledger, ids, "expenses:food", "liabilities:credit-card", 4200)

        after = remove_entry(add_entry(ledger, entry), entry.id)

        assert after.accounts == ledger.accounts
        assert after.entries == ()

    def test_remove_missing_entry(self, ledger) -> None:
        """Should raise EntryNotFoundError."""
        with pytest.raises(EntryNotFoundError, match="Entry nope not found"):
            remove_entry(ledger, "nope")

    def test_opening_balance_entry_cannot_be_removed(self, ledger, ids) -> None:
        """Opening balances are adjusted, never deleted."""
        entry = create_opening_balance_entry(
            date=DAY,
            account=find_account_by_id(ledger.accounts, ids["assets:cash"]),
            equity_account=find_account_by_id(ledger.accounts, ids["equity"]),
            amount=1000,
        )
        ledger = add_entry(ledger, entry)

        with pytest.raises(StructuralError, match="Opening balance entries cannot be deleted") as exc_info:
            remove_entry(ledger, entry.id)

        assert exc_info.value.field == "kind"
        assert get_account_balance(ledger, ids["assets:cash"]) == 1000
        assert ledger.entries == (entry,)

    def test_update_entry_reposts(self, ledger, ids) -> None:
        """Updating should unpost the old lines and post the new ones."""
        entry = _simple(ledger, ids, "expenses:food", "assets:cash", 1000)
        ledger = add_entry(ledger, entry)

        changed = create_simple_entry(
            date=DAY,
            description="Lunch (card)",
            debit_account_id=ids["expenses:food"],
            credit_account_id=ids["liabilities:credit-card"],
            amount=1500,
            accounts=ledger.accounts,
        )
        updated = update_entry_fields(entry, description="Lunch (card)", lines=changed.lines)
        ledger = update_entry(ledger, updated)

        assert get_account_balance(ledger, ids["assets:cash"]) == 0
        assert get_account_balance(ledger, ids["expenses:food"]) == 1500
        assert get_account_balance(ledger, ids["liabilities:credit-card"]) == 1500
        assert ledger.entries[0].description == "Lunch (card)"

    def test_failed_update_leaves_ledger_unchanged(self, ledger, ids) -> None:
        """An unbalanced replacement should raise and change nothing."""
        entry = _simple(ledger, ids, "expenses:food", "assets:cash", 1000)
        ledger = add_entry(ledger, entry)
        broken = add_debit_line(entry, ids["assets:bank"], 1)

        with pytest.raises(BalanceError):
            update_entry(ledger, broken)

        assert get_account_balance(ledger, ids["expenses:food"]) == 1000


class TestBalances:
    """Tests for balance roll-ups and derived figures."""

    @pytest.fixture
    def month(self, ledger, ids):
        """A month of salary, rent, food on card and a transfer."""
        entries = [
            _simple(ledger, ids, "assets:bank", "income:salary", 1_000_000, tags=["work"]),
            _simple(ledger, ids, "expenses:rent", "assets:bank", 300_000, tags=["home"]),
            _simple(ledger, ids, "expenses:food", "liabilities:credit-card", 50_000, tags=["food", "home"]),
            _simple(ledger, ids, "assets:cash", "assets:bank", 20_000),
        ]
        for entry in entries:
            ledger = add_entry(ledger, entry)
        return ledger

    def test_type_balances(self, month) -> None:
        """Should total each account type."""
        assert get_type_balance(month, AccountType.ASSETS) == 700_000
        assert get_type_balance(month, AccountType.LIABILITIES) == 50_000
        assert get_type_balance(month, AccountType.INCOME) == 1_000_000
        assert get_type_balance(month, AccountType.EXPENSES) == 350_000

    def test_net_worth_and_profit(self, month) -> None:
        """Net worth is assets minus liabilities; profit is income minus expenses."""
        assert get_net_worth(month) == 650_000
        assert get_profit(month) == 650_000
        assert verify_accounting_equation(month)

    def test_total_balance_includes_descendants(self, month, ids) -> None:
        """A parent's total should roll up every account below it."""
        assert get_account_balance(month, ids["assets"]) == 0
        assert get_account_total_balance(month, ids["assets"]) == 700_000
        assert get_account_total_balance(month, ids["assets:bank"]) == 680_000
        assert get_account_total_balance(month, "missing") == 0

    def test_root_lookup_and_tags(self, month, ids) -> None:
        """Should find roots by type and collect tags sorted."""
        assert get_root_account(month, AccountType.EQUITY).id == ids["equity"]
        assert get_all_tags(month) == ["food", "home", "work"]
