import logging
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from tenacity import Retrying, stop_after_attempt, wait_exponential

from briefwriter.llm.results import (
	CompletionErr,
	CompletionOptions,
	CompletionResult,
	ErrorKind,
	decode_completion,
)

logger = logging.getLogger(__name__)


class LLMProvider(Enum):
	OPENROUTER = 'openrouter'
	ANTHROPIC = 'anthropic'


class CompletionAdapter(ABC):
	@abstractmethod
	def complete(self, prompt: str, options: CompletionOptions | None = None) -> CompletionResult:
		raise NotImplementedError


class LLMClient(CompletionAdapter):
	def __init__(
		self,
		provider: str,
		model: str,
		api_key: str,
		temperature: float = 0.7,
		max_tokens: int = 2000,
		retry_attempts: int = 1,
		client: Any = None,
	):
		self.provider = LLMProvider(provider)
		self.model = model
		self.api_key = api_key
		self.temperature = temperature
		self.max_tokens = max_tokens
		self.retry_attempts = max(1, retry_attempts)

		self.total_input_tokens = 0
		self.total_output_tokens = 0
		self._usage_lock = threading.Lock()

		self._client = client if client is not None else self._initialize_client()
		logger.info(f'LLM Client initialized: {provider}/{model}')

	def _initialize_client(self):
		if self.provider == LLMProvider.OPENROUTER:
			from openai import OpenAI

			return OpenAI(base_url='https://openrouter.ai/api/v1', api_key=self.api_key)
		elif self.provider == LLMProvider.ANTHROPIC:
			from anthropic import Anthropic

			return Anthropic(api_key=self.api_key)
		else:
			raise ValueError(f'Unsupported provider: {self.provider}')

	def complete(self, prompt: str, options: CompletionOptions | None = None) -> CompletionResult:
		options = options or CompletionOptions()
		temp = options.temperature if options.temperature is not None else self.temperature
		max_tok = options.max_tokens if options.max_tokens is not None else self.max_tokens
		logger.info(f'Generating with {self.provider.value}...')

		try:
			retrying = Retrying(
				stop=stop_after_attempt(self.retry_attempts),
				wait=wait_exponential(multiplier=2, min=2, max=10),
				reraise=True,
			)
			for attempt in retrying:
				with attempt:
					if self.provider == LLMProvider.OPENROUTER:
						text, prompt_tokens, completion_tokens = self._generate_openrouter(prompt, options, temp, max_tok)
					else:
						text, prompt_tokens, completion_tokens = self._generate_anthropic(prompt, options, temp, max_tok)
		except Exception as e:
			logger.error(f'Generation failed: {e}')
			return CompletionErr(ErrorKind.TRANSPORT, str(e) or e.__class__.__name__)

		self._track_usage(prompt_tokens, completion_tokens)
		logger.info(
			f'Generation complete. Tokens used: input={self.total_input_tokens}, output={self.total_output_tokens}'
		)

		return decode_completion(text, prompt_tokens, completion_tokens)

	def _generate_openrouter(
		self, prompt: str, options: CompletionOptions, temperature: float, max_tokens: int
	) -> tuple[str | None, int, int]:
		messages = []

		if options.system_prompt:
			messages.append({'role': 'system', 'content': options.system_prompt})

		messages.append({'role': 'user', 'content': prompt})

		kwargs: dict[str, Any] = {
			'model': self.model,
			'messages': messages,
			'temperature': temperature,
			'max_tokens': max_tokens,
		}
		if options.seed is not None:
			kwargs['seed'] = options.seed
		if options.json_mode:
			kwargs['response_format'] = {'type': 'json_object'}

		response = self._client.chat.completions.create(**kwargs)

		prompt_tokens = completion_tokens = 0
		if getattr(response, 'usage', None):
			prompt_tokens = response.usage.prompt_tokens or 0
			completion_tokens = response.usage.completion_tokens or 0

		return response.choices[0].message.content, prompt_tokens, completion_tokens

	def _generate_anthropic(
		self, prompt: str, options: CompletionOptions, temperature: float, max_tokens: int
	) -> tuple[str | None, int, int]:
		kwargs = {
			'model': self.model,
			'max_tokens': max_tokens,
			'temperature': temperature,
			'messages': [{'role': 'user', 'content': prompt}],
		}

		if options.system_prompt:
			kwargs['system'] = options.system_prompt

		response = self._client.messages.create(**kwargs)

		prompt_tokens = completion_tokens = 0
		if getattr(response, 'usage', None):
			prompt_tokens = response.usage.input_tokens or 0
			completion_tokens = response.usage.output_tokens or 0

		text = response.content[0].text if response.content else None
		return text, prompt_tokens, completion_tokens

	def _track_usage(self, prompt_tokens: int, completion_tokens: int):
		with self._usage_lock:
			self.total_input_tokens += prompt_tokens
			self.total_output_tokens += completion_tokens

	def get_usage_stats(self) -> dict[str, int]:
		"""Get token usage statistics."""
		return {
			'input_tokens': self.total_input_tokens,
			'output_tokens': self.total_output_tokens,
			'total_tokens': self.total_input_tokens + self.total_output_tokens,
		}


def create_llm_client_from_config(config: dict[str, Any]) -> LLMClient:
	return LLMClient(
		provider=config['provider'],
		model=config['model'],
		api_key=config['api_key'],
		temperature=config.get('temperature', 0.7),
		max_tokens=config.get('max_tokens', 2000),
		retry_attempts=config.get('retry_attempts', 1),
	)
