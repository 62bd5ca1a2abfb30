# === FILE: page_relay/config.py ===
"""
Загрузка и валидация конфигурации ретранслятора PageRelay.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


class CachePolicy(BaseModel):
    """Границы времени кэширования для заголовка Cache-control (в секундах)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    default_time: int = Field(60 * 60, ge=0, description="max-age, если клиент не задал cacheMaxAge.")
    min_time: int = Field(5 * 60, ge=0, description="Нижняя граница для cacheMaxAge.")
    stale_if_error: int = Field(600, ge=0, description="Значение директивы stale-if-error.")

    @model_validator(mode="after")
    def _check_bounds(self) -> CachePolicy:
        if self.default_time < self.min_time:
            raise ValueError("default_time must not be lower than min_time")
        return self

    def max_age(self, requested: float | None, disabled: bool) -> int:
        """Итоговый max-age с учётом запроса клиента."""
        if disabled:
            return 0
        return int(max(self.min_time, requested or self.default_time))


class RelayConfig(BaseModel):
    """Конфигурация одного экземпляра ретранслятора."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = Field("0.0.0.0", min_length=1, description="Адрес для прослушивания.")
    port: int = Field(8080, ge=1, le=65535, description="Порт для прослушивания.")
    timeout: float = Field(30.0, gt=0, description="Таймаут на один запрос к upstream (секунд).")
    user_agent: str = Field("PageRelay/1.0", min_length=1, description="Заголовок User-Agent.")
    cors_allow_origin: str = Field("*", min_length=1, description="Значение Access-Control-Allow-Origin.")
    cache: CachePolicy = Field(default_factory=CachePolicy, description="Политика кэширования ответов.")

    @field_validator("host", mode="before")
    def _strip_host(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


_PARSERS = {
    ".yaml": ("YAML", yaml.safe_load, yaml.YAMLError),
    ".yml": ("YAML", yaml.safe_load, yaml.YAMLError),
    ".json": ("JSON", json.loads, json.JSONDecodeError),
}


def _read_mapping(path: Path) -> dict[str, Any]:
    """Разбирает файл по расширению; верхний уровень обязан быть mapping."""
    suffix = path.suffix.lower()
    if suffix not in _PARSERS:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")
    kind, parse, parse_error = _PARSERS[suffix]
    try:
        data = parse(path.read_text(encoding="utf-8")) or {}
    except parse_error as exc:
        raise ValueError(f"Неправильный {kind} в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень {kind} должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> RelayConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект RelayConfig.
    Без явного пути и без configs/default.yaml возвращает значения по умолчанию.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return RelayConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    return RelayConfig(**_read_mapping(path_obj))
