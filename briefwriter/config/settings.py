from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	OPENROUTER_API_KEY: str | None = None
	ANTHROPIC_API_KEY: str | None = None

	# App Settings
	APP_NAME: str = 'BriefWriter'
	LOG_LEVEL: str = 'INFO'

	# Paths
	BASE_DIR: Path = Path(__file__).parent.parent.parent
	CONFIG_DIR: Path = BASE_DIR / 'config'
	DATA_DIR: Path = BASE_DIR / 'data'
	STORAGE_PATH: Path = DATA_DIR / 'storage'
	BRIEFS_DIR: Path = DATA_DIR / 'briefs'
	OUTPUT_DIR: Path = DATA_DIR / 'outputs'

	# LLM Models
	WRITING_MODEL: str = 'qwen/qwen-2.5-72b-instruct'

	model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')


settings = Settings()
