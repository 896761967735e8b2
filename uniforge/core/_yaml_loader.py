import yaml

from .exceptions import ConfigurationError


class YamlLoader:
    """Load YAML (and therefore JSON) documents into dictionaries."""

    @staticmethod
    def load(path: str) -> dict:
        try:
            with open(path, "r") as file:
                obj = yaml.safe_load(file)
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse {path}: {e}") from e
        if obj is None:
            return dict()
        if not isinstance(obj, dict):
            raise ConfigurationError(f"{path} does not hold a mapping")
        return obj
