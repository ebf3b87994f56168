from typing import Any, Mapping
from urllib.parse import parse_qsl
from werkzeug.datastructures import MultiDict

def parse(rsp: Mapping[str, Any]) -> MultiDict:
    """
    Decode the request's `query` field into a flat multi-valued mapping.
    Accepts a raw query string, a MultiDict, or a plain mapping whose
    values may be lists for repeated names.
    """
    q = rsp.get("query")
    if q is None:
        return MultiDict()
    if isinstance(q, MultiDict):
        return q
    if isinstance(q, bytes):
        q = q.decode("utf-8")
    if isinstance(q, str):
        return MultiDict(parse_qsl(q.lstrip("?"), keep_blank_values=True))

    pairs = []
    for name, value in q.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((name, v) for v in value)
        else:
            pairs.append((name, value))
    return MultiDict(pairs)

def value(qd: MultiDict, name: str):
    """Single value, or the list of values when the name was repeated."""
    values = qd.getlist(name)
    if len(values) > 1:
        return values
    return values[0]
