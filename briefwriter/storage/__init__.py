from .assignments import AssignmentStore
from .blocks import BlockStore
from .helpers import EnumEncoder
from .ledger import UNLIMITED, FileQuotaLedger, LedgerTransaction, QuotaLedger
from .plans import PlanStore
from .snapshot import FileSnapshotProvider, SnapshotProvider

__all__ = [
	'UNLIMITED',
	'AssignmentStore',
	'BlockStore',
	'EnumEncoder',
	'FileQuotaLedger',
	'FileSnapshotProvider',
	'LedgerTransaction',
	'PlanStore',
	'QuotaLedger',
	'SnapshotProvider',
]
