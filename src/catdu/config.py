from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn, TypedDict, cast

import yaml

from .selection import DEFAULT_THRESHOLD
from .units import DEFAULT_BLOCK_SIZE


class RawAppConfig(TypedDict):
    catalog_path: str
    block_size: int
    threshold: int


class RawConfigFile(TypedDict):
    config: RawAppConfig


CONFIG_FILENAME: Path = Path("config.yaml")


def type_error(value: object) -> NoReturn:
    raise TypeError(f"Unexpected value of wrong type: {value!r}")


@dataclass(slots=True)
class AppConfig:
    catalog_path: Path
    block_size: int = DEFAULT_BLOCK_SIZE
    threshold: int = DEFAULT_THRESHOLD

    @staticmethod
    def load(path: Path = CONFIG_FILENAME) -> "AppConfig":
        if not path.exists():
            raise FileNotFoundError("Missing config file. Run catdu init first or pass --catalog.")

        with path.open("r", encoding="UTF-8") as f:
            raw_loaded_obj: object | None = cast(object, yaml.safe_load(f))

        if not raw_loaded_obj:
            raise ValueError("Config file is empty or invalid YAML.")

        if not isinstance(raw_loaded_obj, dict):
            type_error(raw_loaded_obj)

        raw_dict: dict[str, object] = cast(dict[str, object], raw_loaded_obj)

        cfg_raw: object | None = raw_dict.get("config")
        if not isinstance(cfg_raw, dict):
            type_error(cfg_raw)

        cfg: RawAppConfig = cast(RawAppConfig, cast(object, cfg_raw))

        block_size: object = cfg.get("block_size", DEFAULT_BLOCK_SIZE)
        threshold: object = cfg.get("threshold", DEFAULT_THRESHOLD)
        if not isinstance(block_size, int) or block_size <= 0:
            type_error(block_size)
        if not isinstance(threshold, int) or threshold < 0:
            type_error(threshold)

        return AppConfig(
            catalog_path=Path(cfg["catalog_path"]),
            block_size=block_size,
            threshold=threshold,
        )

    def save(self, path: Path = CONFIG_FILENAME) -> None:
        raw: RawConfigFile = {"config": self.to_raw()}
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(raw, f, sort_keys=False)

    def to_raw(self) -> RawAppConfig:
        return {
            "catalog_path": str(self.catalog_path),
            "block_size": self.block_size,
            "threshold": self.threshold,
        }
