from .language import LANGUAGE_CONFIGS, get_language_config, language_instructions
from .prompt_builder import DEPTH_PROFILES, WRITER_SYSTEM_PROMPT
from .writer import DEFAULT_REFERENCES, ContentWriter, WritingJob, variation_seed

__all__ = [
    "DEFAULT_REFERENCES",
    "DEPTH_PROFILES",
    "LANGUAGE_CONFIGS",
    "WRITER_SYSTEM_PROMPT",
    "ContentWriter",
    "WritingJob",
    "get_language_config",
    "language_instructions",
    "variation_seed",
]
