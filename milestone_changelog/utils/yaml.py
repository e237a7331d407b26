"""Contains utility functions for working with YAML files."""

from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

yaml = YAML(typ="safe")


def load_yaml_file(path: Path) -> Any:
    """Loads a YAML file and returns its parsed content."""
    with open(path, encoding="utf-8") as f:
        return yaml.load(f)


def create_yaml_dumper() -> YAML:
    """Creates a YAML object for dumping human-edited configuration files."""
    yaml_dumper = YAML()
    yaml_dumper.default_flow_style = False
    yaml_dumper.explicit_start = True
    yaml_dumper.indent(mapping=2, sequence=4, offset=2)  # type: ignore[attr-defined]
    return yaml_dumper


def dump_yaml_to_file(data: dict[str, Any], path: Path) -> None:
    """Dumps a dictionary to a YAML file, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        create_yaml_dumper().dump(data, f)
