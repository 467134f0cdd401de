from briefwriter.llm.client import CompletionAdapter, LLMClient, LLMProvider, create_llm_client_from_config
from briefwriter.llm.results import (
	ERROR_SENTINEL,
	CompletionErr,
	CompletionOk,
	CompletionOptions,
	CompletionResult,
	ErrorKind,
	decode_completion,
)

__all__ = [
	'ERROR_SENTINEL',
	'CompletionAdapter',
	'CompletionErr',
	'CompletionOk',
	'CompletionOptions',
	'CompletionResult',
	'ErrorKind',
	'LLMClient',
	'LLMProvider',
	'create_llm_client_from_config',
	'decode_completion',
]
