"""CLI utilities."""

import importlib
from typing import Any

import click


def import_object(spec: str) -> Any:
    """Import ``module:attribute`` (attribute may be dotted).

    Raises:
        click.ClickException: If the module or attribute can't be found.
    """
    module_name, sep, attr_path = spec.partition(":")
    if not sep or not module_name or not attr_path:
        raise click.ClickException(f"Expected 'module:attribute', got: {spec}")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise click.ClickException(f"Cannot import module '{module_name}': {e}") from e

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise click.ClickException(f"'{module_name}' has no attribute '{attr_path}'") from e
    return obj
