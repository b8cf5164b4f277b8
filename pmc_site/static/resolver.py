"""
    **Static Asset Resolver**
        maps request paths onto files under the site's public directory
"""
import errno
import posixpath
from typing import NamedTuple

PUBLIC_DIR = "public"
INDEX_DOCUMENT = "index.html"
DEFAULT_EXTENSION = ".html"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

MIME_TYPES: dict[str, str] = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".json": "application/json",
}

NOT_FOUND_HTML = "<h1>404 - Page Not Found</h1><p>The page you're looking for doesn't exist.</p>"


class RouteResolution(NamedTuple):
    file_path: str
    content_type: str


def content_type_for(file_path: str) -> str:
    _, extension = posixpath.splitext(file_path)
    return MIME_TYPES.get(extension.lower(), DEFAULT_CONTENT_TYPE)


def resolve_asset(url_path: str, site_root: str = ".") -> RouteResolution:
    """
    **resolve_asset**
        / -> ./public/index.html, /public/x passes through, /foo -> ./public/foo.html

    :param url_path: request path, any query string is ignored
    :param site_root: directory holding the public folder
    :return: RouteResolution
    """
    path = url_path.split("?", 1)[0]

    if path in ("", "/"):
        file_path = posixpath.join(site_root, PUBLIC_DIR, INDEX_DOCUMENT)
    elif path.startswith(f"/{PUBLIC_DIR}/"):
        file_path = site_root + path
    else:
        file_path = f"{site_root}/{PUBLIC_DIR}{path}"
        if not posixpath.splitext(file_path)[1]:
            file_path += DEFAULT_EXTENSION

    return RouteResolution(file_path=file_path, content_type=content_type_for(file_path))


def is_within_public(resolution: RouteResolution, site_root: str = ".") -> bool:
    """False when '..' segments carry the path outside the public directory"""
    public = posixpath.normpath(posixpath.join(site_root, PUBLIC_DIR))
    target = posixpath.normpath(resolution.file_path)
    return target.startswith(public + "/")


def read_asset(resolution: RouteResolution) -> bytes:
    """raises FileNotFoundError for missing files and OSError for everything else"""
    with open(resolution.file_path, "rb") as asset:
        return asset.read()


def error_code(exc: OSError) -> str:
    """symbolic errno name, e.g. EACCES"""
    if exc.errno is None:
        return type(exc).__name__
    return errno.errorcode.get(exc.errno, str(exc.errno))
