"""YAML configuration for the deduplication and compilation pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

from common.llm import DEFAULT_FORMAT, DEFAULT_MODEL, DEFAULT_TIMEOUT, DEFAULT_TONE

load_dotenv()

# Config directory at the repository root
CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "configs"

GROUPING_STRATEGIES = ("llm", "embedding")


@dataclass
class DeduplicationConfig:
    """Settings for embedding-based clustering."""

    threshold: float = 0.75
    embedding_model: str = "all-MiniLM-L6-v2"

    def __post_init__(self) -> None:
        if not 0 < self.threshold <= 1:
            raise ValueError(f"Invalid threshold: {self.threshold}. Must be in (0, 1]")


@dataclass
class GenerationConfig:
    """Settings shared by every guided-generation call."""

    model: str = DEFAULT_MODEL
    timeout_seconds: float = DEFAULT_TIMEOUT
    max_retries: int = 2
    tone: str = DEFAULT_TONE
    format: str = DEFAULT_FORMAT

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError(f"Invalid timeout_seconds: {self.timeout_seconds}. Must be positive")
        if self.max_retries < 0:
            raise ValueError(f"Invalid max_retries: {self.max_retries}. Must be >= 0")


@dataclass
class CompilationConfig:
    """Settings for batch compilation."""

    grouping: str = "llm"
    max_workers: int = 1

    def __post_init__(self) -> None:
        if self.grouping not in GROUPING_STRATEGIES:
            raise ValueError(
                f"Invalid grouping: {self.grouping}. Must be one of {list(GROUPING_STRATEGIES)}"
            )
        if self.max_workers < 1:
            raise ValueError(f"Invalid max_workers: {self.max_workers}. Must be >= 1")


@dataclass
class PipelineConfig:
    deduplication: DeduplicationConfig = field(default_factory=DeduplicationConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    compilation: CompilationConfig = field(default_factory=CompilationConfig)


def find_config_path(config_name: str | None, config_dir: Path = CONFIG_DIR) -> Path:
    """Resolve a config name or path to an existing YAML file.

    Args:
        config_name: Name of config (without .yaml), a path to a YAML file,
            or None to use $PIPELINE_CONFIG (default: "default")
        config_dir: Directory containing named config files

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get("PIPELINE_CONFIG", "default")

    if "/" in config_name or config_name.endswith((".yaml", ".yml")):
        config_path = Path(config_name)
    else:
        config_path = config_dir / f"{config_name}.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_config(data: dict) -> PipelineConfig:
    """Build a PipelineConfig from parsed YAML data, applying defaults for missing keys."""
    return PipelineConfig(
        deduplication=DeduplicationConfig(**(data.get("deduplication") or {})),
        generation=GenerationConfig(**(data.get("generation") or {})),
        compilation=CompilationConfig(**(data.get("compilation") or {})),
    )


def load_config(name: str | None = None) -> PipelineConfig:
    """Load pipeline config by name (e.g., 'default' or 'test') or path."""
    return parse_config(load_yaml(find_config_path(name)))
