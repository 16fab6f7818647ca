"""Links analysis - counts distinct internal and external anchors.

An href is classified by parsing it as an HTTP request URI: anything with a
non-empty host is external, everything else that parses is internal, and
hrefs that do not parse are ignored.
"""

import logging
import re
import string
from dataclasses import dataclass

from ..core.document import Document
from ..core.errors import InvalidHrefError
from ..core.registry import registry
from .protocol import AnalysisConfig, Emit, ResultMessage, RunState

logger = logging.getLogger(__name__)

_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")

# Characters allowed unescaped in a host besides ASCII letters and digits
_HOST_CHARS = set("-_.~!$&'()*+,;=:[]<>\"")
_USERINFO_CHARS = set("-._:~!$&'()*+,;=%@")


@dataclass(frozen=True)
class RequestURI:
    """Components of a parsed request URI."""

    scheme: str = ""
    host: str = ""
    path: str = ""
    query: str = ""
    opaque: str = ""


def _split_scheme(raw: str) -> tuple[str, str]:
    """Split a leading ``scheme:`` off raw, returning ("", raw) if absent."""
    for i, c in enumerate(raw):
        if c in string.ascii_letters:
            continue
        if c in string.digits or c in "+-.":
            if i == 0:
                return "", raw
            continue
        if c == ":":
            if i == 0:
                raise InvalidHrefError("missing protocol scheme")
            return raw[:i].lower(), raw[i + 1 :]
        # Anything else means there is no valid scheme
        return "", raw
    return "", raw


def _check_escapes(value: str) -> None:
    if _BAD_ESCAPE_RE.search(value):
        raise InvalidHrefError(f"invalid URL escape in {value!r}")


def _valid_optional_port(port: str) -> bool:
    if port == "":
        return True
    if port[0] != ":":
        return False
    return all(c in string.digits for c in port[1:])


def _parse_host(host: str) -> str:
    if host.startswith("["):
        end = host.rfind("]")
        if end < 0:
            raise InvalidHrefError("missing ']' in host")
        if not _valid_optional_port(host[end + 1 :]):
            raise InvalidHrefError(f"invalid port {host[end + 1:]!r} after host")
    else:
        colon = host.rfind(":")
        if colon != -1 and not _valid_optional_port(host[colon:]):
            raise InvalidHrefError(f"invalid port {host[colon:]!r} after host")

    _check_escapes(host)
    for c in host:
        if c.isascii() and not c.isalnum() and c not in _HOST_CHARS and c != "%":
            raise InvalidHrefError(f"invalid character {c!r} in host name")
    return host


def _parse_authority(authority: str) -> str:
    userinfo, at, host = authority.rpartition("@")
    if at:
        for c in userinfo:
            if c.isascii() and not c.isalnum() and c not in _USERINFO_CHARS:
                raise InvalidHrefError("invalid userinfo")
        _check_escapes(userinfo)
    return _parse_host(host)


def parse_request_uri(raw: str) -> RequestURI:
    """
    Parse an href the way an HTTP server parses a request target.

    The reference must be absolute (``scheme:...``) or an absolute path
    (``/...``). Fragments are not split off. A ``//host`` prefix is only
    treated as an authority when a scheme is present.

    Args:
        raw: Raw href value

    Returns:
        Parsed components

    Raises:
        InvalidHrefError: If raw is not a valid request URI

    Example:
        >>> parse_request_uri("http://x.com/a").host
        'x.com'
        >>> parse_request_uri("/about").host
        ''
    """
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in raw):
        raise InvalidHrefError("invalid control character in URL")
    if raw == "":
        raise InvalidHrefError("empty url")
    if raw == "*":
        return RequestURI(path="*")

    scheme, rest = _split_scheme(raw)

    query = ""
    if rest.endswith("?") and rest.count("?") == 1:
        rest = rest[:-1]
    else:
        rest, _, query = rest.partition("?")

    if not rest.startswith("/"):
        if scheme:
            return RequestURI(scheme=scheme, query=query, opaque=rest)
        raise InvalidHrefError("invalid URI for request")

    host = ""
    if scheme and rest.startswith("//"):
        authority, slash, path = rest[2:].partition("/")
        host = _parse_authority(authority)
        rest = slash + path

    _check_escapes(rest)
    return RequestURI(scheme=scheme, host=host, path=rest, query=query)


@registry.register
class LinksAnalysis:
    """
    Counts internal and external links among the page's anchors.

    Each distinct href is counted once; repeats and unparseable hrefs are
    skipped without a message.
    """

    analysis_id = "links"
    name = "Links"
    description = "Internal and external link counts"
    category = "links"
    order = 40
    config_class = AnalysisConfig

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or self.config_class()

    def run(self, document: Document, emit: Emit, state: RunState) -> None:
        seen: set[str] = set()

        for anchor in document.find("a[href]"):
            link, _ = anchor.attr("href")
            if link in seen:
                continue
            seen.add(link)

            try:
                parsed = parse_request_uri(link)
            except InvalidHrefError as e:
                logger.debug(f"Ignoring href {link!r}: {e}")
                continue

            if parsed.host == "":
                state.internal_link_count += 1
            else:
                state.external_link_count += 1

        emit(ResultMessage.success(f"internal link count : {state.internal_link_count}"))
        emit(ResultMessage.success(f"external link count : {state.external_link_count}"))
