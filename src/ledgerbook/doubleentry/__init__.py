"""Double-entry bookkeeping engine: posting, ledgers, books, queries and reports."""

from ledgerbook.doubleentry.account import (
    AccountIndex,
    create_account,
    create_root_accounts,
    find_account_by_id,
    find_account_by_path,
    is_debit_increase_account,
)
from ledgerbook.doubleentry.book import (
    add_ledger,
    create_book,
    get_ledger,
    get_main_ledger,
    remove_ledger,
    set_exchange_rate,
    update_ledger_in_book,
)
from ledgerbook.doubleentry.currency import convert_currency, get_currency, get_exchange_rate
from ledgerbook.doubleentry.entry import (
    create_entry,
    create_opening_balance_entry,
    create_simple_entry,
    is_balanced,
    post_entry,
    unpost_entry,
)
from ledgerbook.doubleentry.ledger import (
    add_account,
    add_entry,
    create_ledger,
    get_account_balance,
    get_account_total_balance,
    get_net_worth,
    remove_entry,
    update_entry,
    verify_accounting_equation,
)
from ledgerbook.doubleentry.money import format_money, from_main_unit, to_main_unit
from ledgerbook.doubleentry.query import query_entries
from ledgerbook.doubleentry.report import (
    generate_balance_snapshot,
    generate_balance_snapshot_in_currency,
    generate_time_series,
)
from ledgerbook.doubleentry.validation import validate_book, validate_entry, validate_ledger

__all__ = [
    # Accounts
    "AccountIndex",
    "create_account",
    "create_root_accounts",
    "find_account_by_id",
    "find_account_by_path",
    "is_debit_increase_account",
    # Books
    "add_ledger",
    "create_book",
    "get_ledger",
    "get_main_ledger",
    "remove_ledger",
    "set_exchange_rate",
    "update_ledger_in_book",
    # Currency and money
    "convert_currency",
    "format_money",
    "from_main_unit",
    "get_currency",
    "get_exchange_rate",
    "to_main_unit",
    # Entries
    "create_entry",
    "create_opening_balance_entry",
    "create_simple_entry",
    "is_balanced",
    "post_entry",
    "unpost_entry",
    # Ledgers
    "add_account",
    "add_entry",
    "create_ledger",
    "get_account_balance",
    "get_account_total_balance",
    "get_net_worth",
    "remove_entry",
    "update_entry",
    "verify_accounting_equation",
    # Queries and reports
    "generate_balance_snapshot",
    "generate_balance_snapshot_in_currency",
    "generate_time_series",
    "query_entries",
    # Validation
    "validate_book",
    "validate_entry",
    "validate_ledger",
]
