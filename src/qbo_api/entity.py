"""Entity catalog: names, singular forms and lifecycle classification.

QBO removes *transaction* entities with a hard delete and *name list* entities by
flipping `Active` to false. The client only needs three answers about an entity, so
it depends on the `EntityClassifier` protocol; `EntityCatalog` is the default table.
"""

from __future__ import annotations

import re
from typing import Iterable, Protocol

TRANSACTION_ENTITIES = (
    "Bill",
    "BillPayment",
    "CreditMemo",
    "Deposit",
    "Estimate",
    "Invoice",
    "JournalEntry",
    "Payment",
    "Purchase",
    "PurchaseOrder",
    "RefundReceipt",
    "SalesReceipt",
    "TimeActivity",
    "Transfer",
    "VendorCredit",
)

NAME_LIST_ENTITIES = (
    "Account",
    "Budget",
    "Class",
    "CompanyCurrency",
    "Customer",
    "Department",
    "Employee",
    "Item",
    "JournalCode",
    "PaymentMethod",
    "TaxAgency",
    "TaxCode",
    "TaxRate",
    "TaxService",
    "Term",
    "Vendor",
)

OTHER_ENTITIES = (
    "Attachable",
    "CompanyInfo",
    "Entitlements",
    "ExchangeRate",
    "Preferences",
)


class EntityClassifier(Protocol):
    def is_transaction(self, name: str) -> bool: ...

    def is_name_list(self, name: str) -> bool: ...

    def singular_of(self, name: str) -> str: ...


def _camelize(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[_\s]+", name) if part)


class EntityCatalog:
    def __init__(
        self,
        *,
        transaction: Iterable[str] = TRANSACTION_ENTITIES,
        name_list: Iterable[str] = NAME_LIST_ENTITIES,
        other: Iterable[str] = OTHER_ENTITIES,
    ) -> None:
        self._transaction = frozenset(transaction)
        self._name_list = frozenset(name_list)
        known = self._transaction | self._name_list | frozenset(other)
        self._by_key = {n.lower(): n for n in known}

    def singular_of(self, name: str) -> str:
        """Canonical singular form: `journal_entry`, `JournalEntries` -> `JournalEntry`."""

        key = name.replace("_", "").replace(" ", "").lower()
        if key in self._by_key:
            return self._by_key[key]
        # plurals: invoices, classes, journalentries
        for suffix, replacement in (("ies", "y"), ("es", ""), ("s", "")):
            if key.endswith(suffix):
                stem = key[: -len(suffix)] + replacement
                if stem in self._by_key:
                    return self._by_key[stem]
        return _camelize(name)

    def is_transaction(self, name: str) -> bool:
        return self.singular_of(name) in self._transaction

    def is_name_list(self, name: str) -> bool:
        return self.singular_of(name) in self._name_list


DEFAULT_CATALOG = EntityCatalog()
