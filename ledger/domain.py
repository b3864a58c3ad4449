from dataclasses import dataclass
from datetime import datetime
from typing import Optional

UNKNOWN_ACCOUNT = "Unknown account"


@dataclass(frozen=True)
class Account:
    id: str
    name: str                 # display name, may repeat
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Transaction:
    id: str
    title: str
    amount: int               # minor units (cents)
    transaction_date: datetime
    from_account_id: str
    to_account_id: str
    description: Optional[str] = None


@dataclass(frozen=True)
class AccountRef:
    id: str
    name: str
    resolved: bool = True


@dataclass(frozen=True)
class JoinedTransaction:
    transaction: Transaction
    from_account: AccountRef
    to_account: AccountRef

    @property
    def id(self) -> str:
        return self.transaction.id

    @property
    def title(self) -> str:
        return self.transaction.title

    @property
    def description(self) -> Optional[str]:
        return self.transaction.description

    @property
    def amount(self) -> int:
        return self.transaction.amount

    @property
    def transaction_date(self) -> datetime:
        return self.transaction.transaction_date

    @property
    def is_resolved(self) -> bool:
        return self.from_account.resolved and self.to_account.resolved
