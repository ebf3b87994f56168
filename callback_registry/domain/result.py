import traceback
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence, Union

@dataclass(frozen=True)
class Ok:
    value: Mapping[str, Any]

@dataclass(frozen=True)
class Failure:
    message: str
    context: str = ""

Result = Union[Ok, Failure]

def invoke(callback: Callable, request: Mapping[str, Any], args: Sequence[Any]) -> Result:
    """
    Apply the callback and fold any exception it raises into a Failure
    carrying the message and formatted traceback.
    """
    try:
        value = callback(request, *args)
    except Exception as e:
        return Failure(str(e) or type(e).__name__, traceback.format_exc())
    if not isinstance(value, Mapping):
        return Failure(f"callback returned {type(value).__name__}, expected a mapping")
    return Ok(value)
