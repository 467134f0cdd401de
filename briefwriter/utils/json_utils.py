import json
from typing import Any


def clean_json(text: str) -> str:
	text = text.strip()
	if text.startswith('```json'):
		text = text[7:]
	if text.startswith('```'):
		text = text[3:]
	if text.endswith('```'):
		text = text[:-3]
	return text.strip()


def loads_lenient(text: str) -> Any:
	"""json.loads after stripping markdown fences; raises json.JSONDecodeError."""
	return json.loads(clean_json(text))
