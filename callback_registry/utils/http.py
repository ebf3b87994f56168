import requests
from .config import settings
from .logging import get_logger

log = get_logger(__name__)

# No retries: a request to an emitted address runs its callback, so a
# second attempt could repeat a side effect or hit an already spent address.

def _decode(resp):
    if "json" in resp.headers.get("Content-Type", ""):
        return resp.json()
    return resp.text

def get(url, params=None, timeout=None):
    try:
        resp = requests.get(url, params=params, timeout=timeout or settings.HTTP_TIMEOUT)
        resp.raise_for_status()
    except requests.RequestException as e:
        log.warning(f"http.get failed url={url} err={e}")
        raise
    return _decode(resp)

def post(url, data=None, timeout=None):
    try:
        resp = requests.post(url, data=data, timeout=timeout or settings.HTTP_TIMEOUT)
        resp.raise_for_status()
    except requests.RequestException as e:
        log.warning(f"http.post failed url={url} err={e}")
        raise
    return _decode(resp)
