import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from briefwriter.core.errors import InsufficientQuotaError

from .helpers import load_dataclass, save_dataclass

logger = logging.getLogger(__name__)

UNLIMITED = -1


@dataclass
class LedgerTransaction:
	user_id: str
	amount: int
	balance_after: int
	reason: str
	assignment_id: str | None = None
	created_at: str | None = None


@dataclass
class LedgerState:
	balances: dict[str, int] = field(default_factory=dict)
	transactions: list[LedgerTransaction] = field(default_factory=list)


class QuotaLedger(ABC):
	@abstractmethod
	def balance(self, user_id: str) -> int:
		raise NotImplementedError

	@abstractmethod
	def debit(self, user_id: str, amount: int, reason: str, assignment_id: str | None = None) -> int:
		"""Return the new balance or raise InsufficientQuotaError."""
		raise NotImplementedError


class FileQuotaLedger(QuotaLedger):
	def __init__(self, ledger_file: Path, default_balance: int = 5000):
		self.ledger_file = Path(ledger_file)
		self.default_balance = default_balance
		self._lock = threading.Lock()

	def balance(self, user_id: str) -> int:
		with self._lock:
			return self._load().balances.get(user_id, self.default_balance)

	def set_balance(self, user_id: str, balance: int) -> None:
		with self._lock:
			state = self._load()
			state.balances[user_id] = balance
			save_dataclass(self.ledger_file, state)

	def debit(self, user_id: str, amount: int, reason: str, assignment_id: str | None = None) -> int:
		if amount < 0:
			raise ValueError(f'Debit amount must be non-negative, got {amount}')

		with self._lock:
			state = self._load()
			current = state.balances.get(user_id, self.default_balance)

			if current == UNLIMITED:
				new_balance = UNLIMITED
			elif current < amount:
				raise InsufficientQuotaError(user_id, current, amount)
			else:
				new_balance = current - amount

			state.balances[user_id] = new_balance
			state.transactions.append(
				LedgerTransaction(
					user_id=user_id,
					amount=amount,
					balance_after=new_balance,
					reason=reason,
					assignment_id=assignment_id,
					created_at=datetime.now(UTC).isoformat(),
				)
			)
			save_dataclass(self.ledger_file, state)

		logger.info(f'Debited {amount} tokens from {user_id} ({reason}), balance {new_balance}')
		return new_balance

	def transactions(self, user_id: str | None = None) -> list[LedgerTransaction]:
		with self._lock:
			state = self._load()
		return [t for t in state.transactions if user_id is None or t.user_id == user_id]

	def _load(self) -> LedgerState:
		if not self.ledger_file.exists():
			return LedgerState()
		return load_dataclass(self.ledger_file, LedgerState)
