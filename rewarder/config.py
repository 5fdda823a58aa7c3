import json
from pathlib import Path

from pydantic import TypeAdapter

from rewarder.models import Distribution, RewarderConfig

CONFIG_FILE = "rewarder-conf.json"


def load_conf(config_path: str) -> RewarderConfig:
    """Loads an existing config from file"""
    return RewarderConfig.model_validate_json(
        Path(f"{config_path}/{CONFIG_FILE}").read_text()
    )


def write_conf(conf: RewarderConfig, config_path: str) -> str:
    Path(config_path).mkdir(parents=True, exist_ok=True)
    path = f"{config_path}/{CONFIG_FILE}"
    with open(path, "w+") as j:
        j.write(json.dumps(conf.model_dump(), indent=4))
    return path


def load_distributions(path: str) -> list[Distribution]:
    """Reads distributions exported from the ledger, eg: a JSON list of `Distribution` records"""
    return TypeAdapter(list[Distribution]).validate_json(Path(path).read_text())
