import posixpath
from typing import Optional
from urllib.parse import urljoin

def pstrip(prefix: str, path: str) -> str:
    """
    Strip a mount prefix from a request path.

    Returns the remainder (no leading slash) when the path lives under the
    prefix, "/" when the path is the prefix itself without its trailing
    slash, and the path unchanged (absolute) when it is outside the prefix.
    """
    prefix = "/" + prefix.strip("/") + "/"
    path = "/" + (path or "").lstrip("/")
    if prefix == "//":
        return path[1:]
    if path.startswith(prefix):
        return path[len(prefix):]
    if path == prefix[:-1]:
        return "/"
    return path

def address(mount: str, key: str, host_url: Optional[str] = None) -> str:
    target = posixpath.join(mount, key)
    if host_url:
        return urljoin(host_url, target)
    return target
