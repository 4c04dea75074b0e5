import logging
import re

from .errors import InvalidProtocolError, InvalidUrlError
from .models import Scheme, TargetSpec

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^(?P<scheme>[A-Za-z][A-Za-z0-9+.\-]*)://")
_HOST_RE = re.compile(r"^(?P<host>[A-Za-z0-9._\-]+)(?P<rest>.*)$", re.DOTALL)


def decompose_url(raw: str) -> TargetSpec:
    """
    Split a raw URL into scheme, host, port and resource.

    Only ``http`` and ``https`` are accepted (case-insensitive). A missing
    ``scheme://`` prefix falls back to plain http on port 80; the returned
    target has ``scheme_defaulted`` set so callers can tell the user.
    The port always comes from the scheme.
    """
    if not raw or any(c.isspace() for c in raw):
        raise InvalidUrlError(f"Malformed URL: {raw!r}")

    m = _SCHEME_RE.match(raw)
    if m:
        token = m.group("scheme").lower()
        try:
            scheme = Scheme(token)
        except ValueError:
            raise InvalidProtocolError(
                f"Unsupported protocol '{m.group('scheme')}' (expected http or https)"
            ) from None
        remainder = raw[m.end():]
        defaulted = False
    else:
        scheme = Scheme.HTTP
        remainder = raw
        defaulted = True

    hm = _HOST_RE.match(remainder)
    if not hm:
        raise InvalidUrlError(f"Missing host in URL: {raw!r}")

    host, resource = hm.group("host"), hm.group("rest")
    if resource.startswith("?"):
        resource = "/" + resource
    elif not resource:
        resource = "/"
    elif not resource.startswith("/"):
        raise InvalidUrlError(
            f"Unexpected {resource[0]!r} after host {host!r} in URL: {raw!r}"
        )

    if defaulted:
        logger.warning(f"No protocol given in {raw!r}, defaulting to http on port 80")

    target = TargetSpec(
        scheme=scheme,
        host=host,
        port=scheme.default_port,
        resource=resource,
        scheme_defaulted=defaulted,
    )
    logger.debug(f"Decomposed {raw!r} into {target}")
    return target
