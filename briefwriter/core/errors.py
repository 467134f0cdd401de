class BriefWriterError(Exception):
	pass


class PlanningError(BriefWriterError):
	pass


class ProviderError(BriefWriterError):
	def __init__(self, message: str, kind: str | None = None, item_id: str | None = None):
		super().__init__(message)
		self.kind = kind
		self.item_id = item_id


class AugmentationError(BriefWriterError):
	pass


class PersistenceError(BriefWriterError):
	pass


class InsufficientQuotaError(BriefWriterError):
	def __init__(self, user_id: str, balance: int, required: int):
		super().__init__(
			f'Insufficient tokens. User {user_id} has {balance} tokens remaining, but needs {required}'
		)
		self.user_id = user_id
		self.balance = balance
		self.required = required


class ConflictError(BriefWriterError):
	pass


class NotFoundError(BriefWriterError):
	pass


class AccessDeniedError(BriefWriterError):
	pass
