from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
import json

import yaml

from .errors import ValidationError


DEFAULT_TOP_K = 40


@dataclass
class LoaderConfig:
    format: str = "auto"  # "auto" | "binary" | "text"
    encoding: str = "utf-8"
    max_term_bytes: int = 500
    strict_fields: bool = False
    progress: bool = True


@dataclass
class SearchConfig:
    top_k: int = DEFAULT_TOP_K
    chunk_size: int = 8192


@dataclass
class ShellConfig:
    prompt: str = "\nEnter a word or short phrase (EXIT to break): "
    exit_word: str = "EXIT"
    output: str = "table"  # "table" | "json" | "markdown"
    show_positions: bool = True


@dataclass
class AppConfig:
    loader: LoaderConfig = field(default_factory=LoaderConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    shell: ShellConfig = field(default_factory=ShellConfig)
    log_level: str = "INFO"

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "AppConfig":
        return cls(
            loader=LoaderConfig(**data.get("loader", {})),
            search=SearchConfig(**data.get("search", {})),
            shell=ShellConfig(**data.get("shell", {})),
            log_level=data.get("log_level", "INFO"),
        )

    @classmethod
    def load(cls, path: str | Path) -> "AppConfig":
        path = Path(path)
        if path.suffix.lower() in {".yaml", ".yml"}:
            try:
                data = yaml.safe_load(path.read_text())
            except yaml.YAMLError as exc:
                raise ValidationError(f"{path}: {exc}") from exc
        else:
            data = json.loads(path.read_text())
        if data is not None and not isinstance(data, dict):
            raise ValidationError(f"{path}: top level of a config file must be a mapping")
        try:
            return cls.from_mapping(data or {})
        except TypeError as exc:
            raise ValidationError(f"{path}: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        return {
            "loader": dict(self.loader.__dict__),
            "search": dict(self.search.__dict__),
            "shell": dict(self.shell.__dict__),
            "log_level": self.log_level,
        }


__all__ = [
    "DEFAULT_TOP_K",
    "LoaderConfig",
    "SearchConfig",
    "ShellConfig",
    "AppConfig",
]
