"""
Storefront Gateway: Service Proxy
=================================

What:  Forwards a matched request to its upstream service and relays the
       upstream response back unchanged.
How:   One httpx attempt per request, bounded by PROXY_TIMEOUT. The upstream
       response is opened in streaming mode and its raw bytes are passed
       through a StreamingResponse, so status, headers (minus hop-by-hop) and
       body reach the client exactly as the backend sent them, compressed or
       not.

Outbound request:
    URL      target + rule.rewrite(raw path) + original query string; the
             path keeps its percent-escapes (%2F, %3F) end to end
    Method   unchanged
    Headers  inbound headers minus Host, Content-Length and hop-by-hop
             headers; httpx sets Host to the target's host
    Body     inbound body bytes

Failures (no retries):
    httpx.TimeoutException → UpstreamTimeoutError      (504)
    other httpx.RequestError → UpstreamUnavailableError (502)
"""

import logging
from typing import List, Tuple
from urllib.parse import quote

import httpx
from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import StreamingResponse

from storefront.exceptions import UpstreamTimeoutError, UpstreamUnavailableError
from storefront.gateway.routing import RouteRule
from storefront.middleware.request_id import REQUEST_ID_HEADER

logger = logging.getLogger(__name__)

# RFC 7230 section 6.1 connection-scoped headers, plus the legacy proxy variant
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "proxy-connection",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)

# Recomputed by httpx for the outbound request
_DROPPED_REQUEST_HEADERS = HOP_BY_HOP_HEADERS | {"host", "content-length"}

_RAW_SAFE = "".join(chr(i) for i in range(0x21, 0x7F))


def _to_ascii(text: str) -> bytes:
    # Printable ASCII (including "%") passes through; other octets are escaped
    return quote(text, safe=_RAW_SAFE, encoding="latin-1").encode("ascii")


def build_target_url(base_url: str, raw_path: str, query: str = "") -> httpx.URL:
    """
    Join a service base URL, a still-encoded path and a raw query string.

    The path is passed to httpx as raw bytes, so escapes such as %2F and %3F
    reach the upstream unchanged instead of becoming separators.
    """
    base = httpx.URL(base_url)
    prefix = base.raw_path.split(b"?", 1)[0].rstrip(b"/")
    if not raw_path.startswith("/"):
        raw_path = "/" + raw_path
    target = prefix + _to_ascii(raw_path)
    if query:
        target += b"?" + _to_ascii(query)
    return base.copy_with(raw_path=target)


def raw_request_path(request: Request) -> str:
    """The request path exactly as the client sent it (percent-escapes intact)."""
    raw = request.scope.get("raw_path")
    if raw:
        return raw.decode("latin-1").split("?", 1)[0]
    return request.url.path


class ServiceProxy:
    """
    Forwards requests over a shared httpx.AsyncClient.

    The client is owned by the gateway lifespan; this class never closes it.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: float):
        self.client = client
        self.timeout = httpx.Timeout(timeout)

    def outbound_headers(self, request: Request) -> List[Tuple[str, str]]:
        headers = [
            (key, value)
            for key, value in request.headers.items()
            if key.lower() not in _DROPPED_REQUEST_HEADERS
        ]
        rid = getattr(request.state, "request_id", None)
        if rid and REQUEST_ID_HEADER.lower() not in request.headers:
            headers.append((REQUEST_ID_HEADER, rid))
        return headers

    @staticmethod
    def relay_headers(upstream: httpx.Response) -> List[Tuple[bytes, bytes]]:
        # multi_items keeps repeated headers such as Set-Cookie
        return [
            (key.lower().encode("latin-1"), value.encode("latin-1"))
            for key, value in upstream.headers.multi_items()
            if key.lower() not in HOP_BY_HOP_HEADERS
        ]

    async def forward(self, request: Request, rule: RouteRule) -> StreamingResponse:
        """
        Proxy `request` according to `rule` and return the relayed response.

        Raises:
            UpstreamTimeoutError: the upstream did not answer within the timeout
            UpstreamUnavailableError: the upstream could not be reached
        """
        upstream_path = rule.rewrite(raw_request_path(request))
        url = build_target_url(rule.target, upstream_path, request.url.query)
        body = await request.body()

        logger.info(
            "[%s] %s %s -> %s",
            rule.log_tag,
            request.method,
            request.url.path + (f"?{request.url.query}" if request.url.query else ""),
            rule.target,
        )

        upstream_request = self.client.build_request(
            request.method,
            url,
            headers=self.outbound_headers(request),
            content=body,
            timeout=self.timeout,
        )

        try:
            upstream = await self.client.send(upstream_request, stream=True)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(
                context={"route": rule.name, "url": url, "error": str(e)}
            ) from e
        except httpx.RequestError as e:
            raise UpstreamUnavailableError(
                context={"route": rule.name, "url": url, "error": type(e).__name__}
            ) from e

        response = StreamingResponse(
            upstream.aiter_raw(),
            status_code=upstream.status_code,
            background=BackgroundTask(upstream.aclose),
        )
        response.raw_headers = self.relay_headers(upstream)
        return response
