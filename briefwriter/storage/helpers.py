import json
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from dacite import Config, from_dict

from briefwriter.core.errors import PersistenceError

T = TypeVar('T')

DACITE_CONFIG = Config(cast=[Enum])


class EnumEncoder(json.JSONEncoder):
	def default(self, o):
		if isinstance(o, Enum):
			return o.value
		return super().default(o)


def write_json(path: Path, data: Any) -> None:
	try:
		path.parent.mkdir(parents=True, exist_ok=True)

		# Atomic write (write to temp, then rename)
		temp_file = path.with_suffix('.tmp')
		with open(temp_file, 'w', encoding='utf-8') as f:
			json.dump(data, f, cls=EnumEncoder, indent=2, ensure_ascii=False)
		temp_file.replace(path)
	except OSError as e:
		raise PersistenceError(f'Failed to write {path}: {e}') from e


def read_json(path: Path) -> Any:
	try:
		with open(path, encoding='utf-8') as f:
			return json.load(f)
	except (OSError, json.JSONDecodeError) as e:
		raise PersistenceError(f'Failed to read {path}: {e}') from e


def to_jsonable(data: Any) -> Any:
	return json.loads(json.dumps(data, cls=EnumEncoder))


def save_dataclass(path: Path, obj: Any) -> None:
	write_json(path, asdict(obj))


def load_dataclass(path: Path, data_class: type[T]) -> T:
	return from_dict(data_class=data_class, data=read_json(path), config=DACITE_CONFIG)
