from dataclasses import dataclass
from enum import Enum

ERROR_SENTINEL = 'ERROR:'


class ErrorKind(Enum):
	TRANSPORT = 'transport'
	EMPTY = 'empty'
	SENTINEL = 'sentinel'


@dataclass(frozen=True)
class CompletionOptions:
	system_prompt: str | None = None
	temperature: float | None = None
	max_tokens: int | None = None
	seed: int | None = None
	json_mode: bool = False


@dataclass(frozen=True)
class CompletionOk:
	text: str
	prompt_tokens: int = 0
	completion_tokens: int = 0

	ok = True

	@property
	def total_tokens(self) -> int:
		return self.prompt_tokens + self.completion_tokens


@dataclass(frozen=True)
class CompletionErr:
	kind: ErrorKind
	message: str
	prompt_tokens: int = 0
	completion_tokens: int = 0

	ok = False

	@property
	def total_tokens(self) -> int:
		return self.prompt_tokens + self.completion_tokens


CompletionResult = CompletionOk | CompletionErr


def decode_completion(text: str | None, prompt_tokens: int = 0, completion_tokens: int = 0) -> CompletionResult:
	"""Turn raw provider text into a result; the only place the sentinel prefix is inspected."""
	if text is None or not text.strip():
		return CompletionErr(ErrorKind.EMPTY, 'Empty response from completion service', prompt_tokens, completion_tokens)

	stripped = text.strip()
	if stripped.startswith(ERROR_SENTINEL):
		message = stripped[len(ERROR_SENTINEL) :].strip() or 'UNSPECIFIED'
		return CompletionErr(ErrorKind.SENTINEL, message, prompt_tokens, completion_tokens)

	return CompletionOk(stripped, prompt_tokens, completion_tokens)
