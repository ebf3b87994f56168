# callback_registry/services/registry.py
#
# Stores callables under random temporary urls. A handler emits a callback
# (plus an environment dict) and gets back an address under the mount
# prefix; requests to that address are dispatched to the callback with the
# request and any matching query args, and its returned dict is merged into
# the response. By default a callback is good for one call; `again` keeps
# it around for another, and idle callbacks are swept by `gc`.

import random
import threading
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional

from ..domain.errors import NotFound
from ..domain.result import Failure, invoke
from ..domain.signature import Signature
from ..store.ram import RAMStore
from ..utils import query
from ..utils.config import Settings, settings as default_settings
from ..utils.logging import get_logger
from ..utils.paths import address, pstrip

log = get_logger(__name__)


@dataclass(frozen=True)
class RegistryConfig:
    mount: str = "/_r/"
    max_age: int = 60 * 60  # default idle seconds before gc; 0 means no gc

    @classmethod
    def from_settings(cls, s: Optional[Settings] = None, **options) -> "RegistryConfig":
        """
        Build from environment settings, letting `options` override any
        field. Unknown option names raise TypeError.
        """
        s = s or default_settings
        return replace(cls(mount=s.REST_MOUNT, max_age=int(s.REST_MAX_AGE)), **options)


def again(r: Dict[str, Any]) -> Dict[str, Any]:
    """
    Keep the current callback alive for one more call. Meant to be used from
    inside a callback, whose return value should carry the updated `env`.
    """
    env = dict(r["env"])
    env["count"] = int(env.get("count", 0)) + 1
    return {**r, "env": env}


def server_error(rsp: Dict[str, Any], message: str, context: str = "") -> Dict[str, Any]:
    return {
        **rsp,
        "code": 500,
        "content": {"error": message, "context": context},
        "content_type": "application/json",
    }


class Registry:
    again = staticmethod(again)

    def __init__(self, config: Optional[RegistryConfig] = None, store=None,
                 clock: Callable[[], float] = time.time):
        self.config = config or RegistryConfig.from_settings()
        self.store = store if store is not None else RAMStore()
        self._clock = clock
        self._timer: Optional[threading.Timer] = None
        self._timer_lock = threading.Lock()
        self._stopped = True

    @property
    def mount(self) -> str:
        return self.config.mount

    def _now(self) -> int:
        return int(self._clock())

    def _new_key(self) -> str:
        # unique among current keys only; not meant to be unguessable
        while True:
            key = f"{time.time_ns() // 1000}{random.randint(0, 9999)}"
            if not self.store.exists(key):
                return key

    def exists(self, key: str) -> bool:
        return self.store.exists(key)

    # -------------------- registration --------------------

    def emit(self, callback: Callable, rsp: Optional[Dict[str, Any]] = None, *,
             key: Optional[str] = None, count: int = 1, max_age: Optional[int] = None,
             signature: Optional[Signature] = None, **env) -> str:
        """
        Store `callback` and return its address. `count` is the number of
        calls it is good for; `max_age` overrides the registry's idle limit
        for this entry. Any other keyword becomes part of its environment.
        Passing the current request makes the address absolute.
        """
        if key is None:
            key = self._new_key()
        env["count"] = count
        if max_age is not None:
            env["max_age"] = max_age
        env["access_time"] = self._now()

        self.store.set(key, callback, signature or Signature.of(callback), env)
        log.debug(f"emit {key} count={count}", extra={"key": key, "count": count})
        return address(self.mount, key, (rsp or {}).get("host_url"))

    def redirect(self, callback: Callable, rsp: Dict[str, Any], **options) -> Dict[str, Any]:
        """Emit and answer the current request with a 303 to the new address."""
        location = self.emit(callback, rsp, **options)
        return {**rsp, "code": 303, "location": location, "content": ""}

    # -------------------- dispatch --------------------

    def dispatch(self, rsp: Dict[str, Any]) -> Dict[str, Any]:
        rsp = dict(rsp)
        if "suffix" in rsp:
            # caller has munged the path already
            suffix = rsp["suffix"]
        else:
            path = rsp.get("path", "")
            suffix = pstrip(self.mount, path)
            if suffix != "/" and suffix.startswith("/"):
                # not inside our mount
                raise NotFound(path)

        try:
            callback, signature, env = self.store.get(suffix)
        except KeyError:
            raise NotFound(rsp.get("path", suffix)) from None

        qd = query.parse(rsp)
        rsp["query"] = qd
        rsp["env"] = dict(env)
        args, _ = signature.bind(qd)

        rsp["dynamic"] = True
        rsp.pop("content", None)
        result = invoke(callback, {**rsp, **env, "env": dict(env)}, args)
        if isinstance(result, Failure):
            log.warning(f"callback {suffix} failed: {result.message}", extra={"suffix": suffix})
            return server_error(rsp, result.message, result.context)

        out = dict(result.value)
        if "env" in out:
            env = dict(out.pop("env") or {})

        if "count" in env:
            env["count"] = int(env["count"]) - 1
            if env["count"] <= 0:
                log.debug(f"unsetting {suffix}", extra={"suffix": suffix})
                self.store.unset(suffix)
            else:
                env["access_time"] = self._now()
                self.store.set(suffix, callback, signature, env)
        else:
            env["access_time"] = self._now()
            self.store.set(suffix, callback, signature, env)

        return {**rsp, **out}

    # -------------------- garbage collection --------------------

    def gc(self) -> List[str]:
        """
        Remove callbacks idle for longer than their `max_age` (or the
        registry default). Errors are logged, never raised.
        """
        evicted: List[str] = []
        try:
            now = self._now()
            for key in self.store.keys():
                try:
                    _, _, env = self.store.get(key)
                except KeyError:
                    continue  # dispatched away meanwhile
                limit = env.get("max_age", self.config.max_age)
                if now - env["access_time"] > limit:
                    self.store.unset(key)
                    evicted.append(key)
        except Exception:
            log.exception("Rest gc failed")
        if evicted:
            log.debug(f"gc evicted {len(evicted)}", extra={"evicted": evicted})
        return evicted

    def start(self):
        """Schedule periodic gc every `max_age` seconds (no-op when 0)."""
        with self._timer_lock:
            self._stopped = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        self._schedule()

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._stopped

    def stop(self):
        with self._timer_lock:
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _schedule(self):
        if self.config.max_age <= 0:
            return
        with self._timer_lock:
            if self._stopped:
                return
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self.config.max_age, self.tick)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def tick(self):
        """One timer firing: sweep, then schedule the next one unless stopped."""
        self.gc()
        self._schedule()
