"""
Parsing of the tRPC HTTP request format.

``/trpc/a,b?batch=1`` addresses several procedures at once; their inputs are
sent as a JSON object keyed by call index, either in the ``input`` query
parameter (queries) or in the request body (mutations).
"""
import json
from typing import Any, List, Optional, Tuple, Union

from catalog.errors import ErrorCode
from catalog.rpc.base import RpcError

Call = Tuple[str, Any]


def is_batch(query_params) -> bool:
    return query_params.get("batch") in ("1", "true")


def split_paths(path: str, batch: bool) -> List[str]:
    path = path.strip("/")
    return path.split(",") if batch else [path]


def _decode(raw: Optional[Union[str, bytes]]) -> Any:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise RpcError("PARSE_ERROR", "Input is not valid UTF-8", error_code=ErrorCode.GENERAL_ERROR) from exc
    if raw is None or raw == "":
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise RpcError("PARSE_ERROR", f"Unable to parse input: {exc}", error_code=ErrorCode.GENERAL_ERROR) from exc


def parse_calls(path: str, raw_input: Optional[Union[str, bytes]], batch: bool) -> List[Call]:
    """Pair each addressed procedure path with its decoded input.

    Raises ``RpcError("PARSE_ERROR")`` when the input is not UTF-8 encoded JSON or a
    batch input is not an object keyed by index.
    """
    paths = split_paths(path, batch)
    value = _decode(raw_input)
    if not batch:
        return [(paths[0], value)]
    if value is None:
        value = {}
    if not isinstance(value, dict):
        raise RpcError("PARSE_ERROR", "Batch input must be an object keyed by call index", error_code=ErrorCode.GENERAL_ERROR)
    return [(p, value.get(str(index))) for index, p in enumerate(paths)]


def batch_status(statuses: List[int]) -> int:
    distinct = set(statuses)
    if len(distinct) == 1:
        return distinct.pop()
    return 207
