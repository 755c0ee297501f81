"""JSON persistence for engine configuration and season snapshots."""

import dataclasses
import json
import logging
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('lockin.utils')


def load_json(path: Path | str, schema: type[T] | None = None) -> Any | T:
    """
    Read a JSON file, optionally validating it against a Pydantic model.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file is not valid JSON
        ValueError: If schema validation fails
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f'File not found: {path}')

    data = json.loads(path.read_text(encoding='utf-8'))
    if schema is None:
        return data

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.error(f'{path} does not match {schema.__name__}: {e.error_count()} errors')
        raise ValueError(f'Schema validation failed for {path}:\n{e}') from e


def to_jsonable(data: Any) -> Any:
    """
    Convert engine records into JSON-serializable structures.

    Handles Pydantic models, dataclasses, enums and dates, recursing
    through lists, tuples and dicts.
    """
    if isinstance(data, BaseModel):
        return data.model_dump()
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return {f.name: to_jsonable(getattr(data, f.name)) for f in dataclasses.fields(data)}
    if isinstance(data, Enum):
        return data.value
    if isinstance(data, date):
        return data.isoformat()
    if isinstance(data, dict):
        return {str(k): to_jsonable(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [to_jsonable(v) for v in data]
    return data


def save_json(path: Path | str, data: Any, indent: int = 2) -> Path:
    """
    Write engine records (dataclasses, models, plain data) to a JSON file.

    Parent directories are created as needed.

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(to_jsonable(data), indent=indent, ensure_ascii=False) + '\n',
        encoding='utf-8',
    )
    logger.debug(f'Saved {path}')
    return path
