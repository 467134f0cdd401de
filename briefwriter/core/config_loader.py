import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

SETTINGS_FILE = 'settings.yaml'
ENV_SUFFIX = '_env'
REQUIRED_SECTIONS = ('llm',)


def resolve_env_refs(node: Any, path: str = '') -> Any:
	"""Replace every `<name>_env: VAR` entry with `<name>: $VAR`, recursively.

	Raises ValueError naming the key when the variable is unset or empty.
	"""
	if isinstance(node, list):
		return [resolve_env_refs(item, f'{path}[{i}]') for i, item in enumerate(node)]
	if not isinstance(node, dict):
		return node

	resolved: dict[str, Any] = {}
	for key, value in node.items():
		key_path = f'{path}.{key}' if path else str(key)
		if isinstance(key, str) and key.endswith(ENV_SUFFIX) and isinstance(value, str):
			env_value = os.getenv(value)
			if not env_value:
				raise ValueError(f'Environment variable {value} not found (required by {key_path})')
			resolved[key.removesuffix(ENV_SUFFIX)] = env_value
		else:
			resolved[key] = resolve_env_refs(value, key_path)
	return resolved


class ConfigLoader:
	"""YAML settings from `<config_dir>/settings.yaml`, with secrets pulled from the environment."""

	def __init__(self, config_dir: str | Path = 'config'):
		load_dotenv()
		self.config_dir = Path(config_dir)
		self.settings = self._read(self.config_dir / SETTINGS_FILE)

	@staticmethod
	def _read(path: Path) -> dict[str, Any]:
		if not path.is_file():
			raise FileNotFoundError(f'Settings file not found: {path}')

		raw = yaml.safe_load(path.read_text()) or {}
		if not isinstance(raw, dict):
			raise ValueError(f'{path} must contain a mapping at the top level')

		missing = [name for name in REQUIRED_SECTIONS if name not in raw]
		if missing:
			raise ValueError(f'{path} is missing required sections: {", ".join(missing)}')

		logger.debug(f'Loaded settings sections {sorted(raw)} from {path}')
		return resolve_env_refs(raw)

	def section(self, name: str) -> dict[str, Any]:
		"""One top-level section; optional sections default to an empty mapping."""
		return self.settings.get(name) or {}

	def get_llm_config(self) -> dict[str, Any]:
		return self.section('llm')

	def get_planner_config(self) -> dict[str, Any]:
		return self.section('planner')

	def get_writer_config(self) -> dict[str, Any]:
		return self.section('writer')

	def get_augmenter_config(self) -> dict[str, Any]:
		return self.section('augmenter')

	def get_ledger_config(self) -> dict[str, Any]:
		return self.section('ledger')

	def get_runner_config(self) -> dict[str, Any]:
		return self.section('runner')

	def get_output_config(self) -> dict[str, Any]:
		return self.section('output')


_config: ConfigLoader | None = None


def get_config() -> ConfigLoader:
	"""Process-wide loader built from `CONFIG_DIR` on first use."""
	global _config
	if _config is None:
		from briefwriter.config.settings import settings

		_config = ConfigLoader(settings.CONFIG_DIR)
	return _config
