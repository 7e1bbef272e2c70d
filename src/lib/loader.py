"""
Loading the user configuration module

A configuration is an ordinary Python file exposing a ``config`` attribute:

    # content-factory.config.py
    from content_factory import FactoryConfig, ToolConfig, Strategy

    config = FactoryConfig(tools={"claude": ToolConfig(strategies=[...])})
"""

import importlib.util
import sys
from pathlib import Path

from ..models.config import FactoryConfig
from .errors import ConfigLoadError
from .paths import PathLike, path_normalize


def config_load(config_path: PathLike) -> FactoryConfig:
    """
    Import a configuration module and return its ``config`` object.

    Raises:
        ConfigLoadError: If the file is missing, fails to import, or has no
            FactoryConfig named ``config``
    """
    path = path_normalize(config_path)
    if not path.is_file():
        raise ConfigLoadError(f"Config file not found at: {path}")

    module_name = f"content_factory_user_config_{abs(hash(str(path)))}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ConfigLoadError(f"Failed to load config: {path} is not a Python module")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise ConfigLoadError(f"Failed to load config: {e}") from e

    config = getattr(module, "config", None)
    if not isinstance(config, FactoryConfig):
        raise ConfigLoadError(
            f"Failed to load config: {Path(path).name} must define 'config' as a FactoryConfig"
        )
    return config
