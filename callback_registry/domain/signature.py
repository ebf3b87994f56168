# callback_registry/domain/signature.py

import inspect
from dataclasses import dataclass
from typing import Any, Callable, List, Set, Tuple
from werkzeug.datastructures import MultiDict

from ..utils import query

MISSING = object()


@dataclass(frozen=True)
class Param:
    name: str
    default: Any = MISSING

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


@dataclass(frozen=True)
class Signature:
    """
    Which query arguments a callback takes, in call order, after the
    leading request argument. `variadic` collects every unused query
    argument as trailing name/value pairs.
    """
    params: Tuple[Param, ...] = ()
    variadic: bool = False

    @classmethod
    def of(cls, fn: Callable) -> "Signature":
        """
        Describe a plain Python callable. Done once, at registration.
        """
        params: List[Param] = []
        variadic = False
        parameters = list(inspect.signature(fn).parameters.values())
        for p in parameters[1:]:
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
                params.append(Param(p.name, MISSING if p.default is p.empty else p.default))
            elif p.kind == p.VAR_POSITIONAL:
                variadic = True
            elif p.kind == p.KEYWORD_ONLY and p.default is p.empty:
                raise ValueError(f"keyword-only parameter '{p.name}' needs a default")
        return cls(tuple(params), variadic)

    def bind(self, qd: MultiDict) -> Tuple[List[Any], Set[str]]:
        """
        Positional arguments for a call, and the query names they used.
        Missing arguments take their default, or "" when there is none.
        """
        args: List[Any] = []
        used: Set[str] = set()
        for p in self.params:
            if p.name in qd:
                used.add(p.name)
                args.append(query.value(qd, p.name))
            elif p.has_default:
                args.append(p.default)
            else:
                args.append("")

        if self.variadic:
            for name, value in qd.items(multi=True):
                if name not in used:
                    args.extend((name, value))
        return args, used
