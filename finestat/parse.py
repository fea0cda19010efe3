"""JSON decoding and schema validation for violation files.

Provides the single entrypoint ``parse_records`` that turns one file's bytes
into ``Violation`` objects. Shape is enforced by the packaged JSON schema
``finestat/schemas/violations.json`` before records are constructed.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import List

import jsonschema

from finestat.errors import ParseError
from finestat.model import Violation
from finestat.schemas import load_schema


@lru_cache(maxsize=None)
def _validator(name: str) -> jsonschema.protocols.Validator:
    schema = load_schema(name)
    cls = jsonschema.validators.validator_for(schema)
    return cls(schema)


def parse_records(data: bytes) -> List[Violation]:
    """Parse a JSON array of violation objects.

    Args:
        data: Raw file content, UTF-8 encoded (a leading BOM is tolerated).

    Returns:
        Violations in the order they appear in the array.

    Raises:
        ParseError: If the bytes are not valid UTF-8 JSON, or the document does
            not match the violations schema.
    """
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError(f"content is not valid UTF-8: {exc}") from exc

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(
            f"invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}"
        ) from exc

    error = jsonschema.exceptions.best_match(
        _validator("violations.json").iter_errors(payload)
    )
    if error is not None:
        index = None
        if error.absolute_path and isinstance(error.absolute_path[0], int):
            index = error.absolute_path[0]
        raise ParseError(error.message, index=index) from error

    records: List[Violation] = []
    for i, item in enumerate(payload):
        try:
            records.append(Violation.from_dict(item))
        except (TypeError, ValueError) as exc:
            raise ParseError(str(exc), index=i) from exc
    return records
