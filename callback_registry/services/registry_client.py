from typing import Any, Dict, Optional
from urllib.parse import urljoin
from ..utils.config import settings
from ..utils.http import get, post
from ..utils.logging import get_logger

log = get_logger(__name__)

def resolve(address: str, base: Optional[str] = None) -> str:
    """
    Absolute url for an emitted address. Relative addresses (e.g. "/_r/17...")
    are joined onto REGISTRY_API_BASE.
    """
    base = (base or settings.REGISTRY_API_BASE).rstrip("/") + "/"
    return urljoin(base, address)

def call(address: str, params: Optional[Dict[str, Any]] = None, base: Optional[str] = None):
    """
    Invoke a temporary callback over http:
      GET {REGISTRY_API_BASE}{address}?{params}
    Returns decoded json, or the body text for non-json responses.
    A spent or expired address raises requests.HTTPError (404).
    Never retried: every request that arrives runs the callback.
    """
    url = resolve(address, base)
    log.debug(f"calling {url}")
    return get(url, params=params)

def submit(address: str, form: Dict[str, Any], base: Optional[str] = None):
    """POST form fields to a temporary callback, the way a browser form would."""
    return post(resolve(address, base), data=form)
