"""Configuration utilities for issue-tracker."""

import pathlib
import sys

import yaml
from rich.prompt import Prompt

from issuetracker import utils

from ..exceptions import ConfigError
from . import defaults

GENERAL_KEYS = [
    "github_access_token",
    "user_name",
    "api_url",
    "insecure",
]


def make_config(config: dict, config_file: pathlib.Path) -> dict:
    """Merge command line flags with the config file, prompting for what is missing.

    Credentials given on the command line are stored back in the config
    file so that the next run does not need them; the insecure flag is not.
    """
    config_path = pathlib.Path(config_file)
    flags = {key: value for key, value in config.items() if value}
    config = read_config(dict(config), config_path)
    stored = read_config({}, config_path)
    config_modified = any(
        flags.get(key) and flags[key] != stored.get(key)
        for key in ("github_access_token", "user_name")
    )

    if not config["github_access_token"]:
        config["github_access_token"] = Prompt.ask(
            "Enter your GitHub access token", password=True
        )
        config_modified = True

    if not config["user_name"]:
        config["user_name"] = Prompt.ask("Enter your GitHub user name")
        config_modified = True

    if config_modified:
        # --insecure is for this run only, keep whatever the file said
        write_config(dict(config, insecure=stored["insecure"]), config_path)
        utils.log(
            f"Configuration saved to {config_file}",
            verbose_only=True,
            verbose=config.get("verbose", False),
            file=sys.stderr,
        )

    return config


def read_config(ret: dict, config_file: pathlib.Path) -> dict:
    """Read configuration from yaml file, values already in ``ret`` win"""

    def checks():
        for key in ("github_access_token", "user_name"):
            if not ret.get(key):
                ret[key] = ""

        if not ret.get("api_url"):
            ret["api_url"] = defaults.API_URL

        if "insecure" not in ret or ret["insecure"] is None:
            ret["insecure"] = False

        if "keys" not in ret or ret["keys"] is None:
            ret["keys"] = {}

    if not config_file.exists():
        checks()
        return ret

    with config_file.open() as file:
        try:
            config = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {config_file}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"{config_file} must contain a mapping")

    if config.get("general"):
        general = config["general"]
        for x in GENERAL_KEYS:
            if not ret.get(x) and general.get(x) is not None:
                ret[x] = general[x]

    if config.get("keys"):
        if not isinstance(config["keys"], dict):
            raise ConfigError(f"'keys' in {config_file} must be a mapping")
        ret["keys"] = config["keys"]

    checks()
    return ret


def write_config(config, config_file: pathlib.Path):
    """Write configuration to yaml file"""
    # Create config directory if it doesn't exist
    config_file.parent.mkdir(parents=True, exist_ok=True)

    yaml_config: dict[str, dict] = {"general": {}}
    for key in GENERAL_KEYS:
        if config.get(key) and not (key == "api_url" and config[key] == defaults.API_URL):
            yaml_config["general"][key] = config[key]

    if config.get("keys"):
        yaml_config["keys"] = config["keys"]

    with config_file.open("w") as file:
        yaml.safe_dump(yaml_config, file)
    config_file.chmod(0o600)
