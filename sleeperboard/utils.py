"""Utility functions for file I/O and shared one-shot loads."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Generic, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
R = TypeVar('R')
logger = logging.getLogger('sleeperboard.utils')


def load_json(
    path: Path | str,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Load JSON file with optional schema validation.

    Args:
        path: Path to JSON file (str or Path object)
        schema: Optional Pydantic model to validate against

    Returns:
        Parsed JSON (validated if schema provided)

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        ValueError: If schema validation fails

    Example:
        from sleeperboard.schemas import DashboardConfig
        config = load_json('data/league_config.json', schema=DashboardConfig)
    """
    path = Path(path)

    logger.debug(f'Loading JSON from: {path}')

    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
        logger.debug(f'Successfully loaded JSON from: {path}')
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
        raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    if schema:
        try:
            validated = schema(**data) if isinstance(data, dict) else schema(data)  # type: ignore[call-arg]
            logger.debug(f'Schema validation passed for: {path}')
            return validated
        except ValidationError as e:
            logger.error(f'Schema validation failed for {path}: {e}')
            raise ValueError(f'Schema validation failed for {path}:\n{e}') from e

    return data


def load_json_safe(
    path: Path | str,
    default: Any = None,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Load JSON file with safe fallback to default value.

    Like load_json, but returns default value instead of raising
    for missing or invalid files.

    Example:
        # Returns None if the stats file hasn't been generated yet
        payload = load_json_safe('data/stats.json')
    """
    try:
        return load_json(path, schema=schema)
    except (FileNotFoundError, json.JSONDecodeError, ValueError) as e:
        logger.warning(f'Falling back to default for {path}: {e}')
        return default


class LoadOnce(Generic[R]):
    """
    Memoized async factory.

    The first call to get() starts the load; concurrent callers await the
    same in-flight task instead of starting their own. A load that raises
    is not remembered, so the next get() tries again.
    """

    def __init__(self, factory: Callable[[], Awaitable[R]], name: str = 'resource'):
        self._factory = factory
        self._task: asyncio.Future | None = None
        self.name = name
        self.load_count = 0

    @property
    def loaded(self) -> bool:
        task = self._task
        return (
            task is not None
            and task.done()
            and not task.cancelled()
            and task.exception() is None
        )

    async def get(self) -> R:
        if self._task is None:
            self.load_count += 1
            logger.debug(f'Starting load of {self.name}')
            self._task = asyncio.ensure_future(self._factory())
        else:
            logger.debug(f'Reusing load of {self.name}')

        task = self._task
        try:
            return await asyncio.shield(task)
        except Exception:
            if self._task is task:
                self._task = None
            raise

    def reset(self) -> None:
        """Forget the cached result; the next get() reloads."""
        self._task = None
