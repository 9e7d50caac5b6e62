"""
Storefront Gateway: Route Table
===============================

What:  Static mapping from (method, external path) to target service, path
       rewrite and auth requirement.
How:   RouteRule objects are built once from GatewaySettings at startup and
       never change. RouteTable.match() picks the rule whose pattern matches
       the longest prefix of the path among the rules accepting the method,
       so method-specific rules sharing a prefix never collide.

Route table:
    external path                         method           auth  target    rewrite
    /api/users/{register,login,profile}   any              none  users     ^/api/users/ → /
    /api/products*                        GET (and HEAD)   none  products  ^/api/products → /products
    /api/products*                        POST PUT DELETE  JWT   products  ^/api/products → /products
    anything else                         any              -     -         404 Route not found

TODO: /api/users/profile is served without the auth gate; decide whether the
user service or the gateway owns that check before moving it to a JWT rule.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Pattern, Tuple

from storefront.config import GatewaySettings

ANY_METHOD: FrozenSet[str] = frozenset(
    {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"}
)


@dataclass(frozen=True)
class PathRewrite:
    """Regex replacement applied to the external path (first match wins)."""

    pattern: Pattern[str]
    replacement: str

    @classmethod
    def compile(cls, pattern: str, replacement: str) -> "PathRewrite":
        return cls(re.compile(pattern), replacement)


@dataclass(frozen=True)
class RouteRule:
    """
    One immutable gateway route.

    Attributes:
        name:          Identifier used in logs and tests
        pattern:       Regex anchored at the start of the path
        target:        Upstream base URL (scheme://host:port)
        rewrites:      Ordered path rewrites; the first matching one is applied
        methods:       HTTP methods this rule serves
        auth_required: Whether the auth gate runs before proxying
        log_tag:       Prefix for the per-request proxy log line
    """

    name: str
    pattern: Pattern[str]
    target: str
    rewrites: Tuple[PathRewrite, ...] = ()
    methods: FrozenSet[str] = ANY_METHOD
    auth_required: bool = False
    log_tag: str = "PROXY"

    def accepts(self, method: str) -> bool:
        method = method.upper()
        # HEAD is answered by GET handlers, as in most HTTP routers
        return method in self.methods or (method == "HEAD" and "GET" in self.methods)

    def match_length(self, path: str) -> Optional[int]:
        """Length of the matched prefix, or None when the pattern does not match."""
        match = self.pattern.match(path)
        return match.end() if match else None

    def rewrite(self, path: str) -> str:
        for rewrite in self.rewrites:
            if rewrite.pattern.search(path):
                return rewrite.pattern.sub(rewrite.replacement, path, count=1)
        return path


class RouteTable:
    """Immutable, ordered collection of RouteRules."""

    def __init__(self, rules: Iterable[RouteRule]):
        self._rules: Tuple[RouteRule, ...] = tuple(rules)

    def __iter__(self):
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def match(self, method: str, path: str) -> Optional[RouteRule]:
        """
        Select the rule for a request.

        Longest matched prefix wins; equal lengths keep declaration order.
        Returns None when no rule accepts the method and path.
        """
        best: Optional[RouteRule] = None
        best_length = -1
        for rule in self._rules:
            if not rule.accepts(method):
                continue
            length = rule.match_length(path)
            if length is not None and length > best_length:
                best, best_length = rule, length
        return best


def build_route_table(settings: GatewaySettings) -> RouteTable:
    """Build the gateway's static route table from configuration."""
    products_rewrite = (PathRewrite.compile(r"^/api/products", "/products"),)
    products_pattern = re.compile(r"^/api/products")

    return RouteTable(
        [
            RouteRule(
                name="users",
                pattern=re.compile(r"^/api/users/(?:register|login|profile)(?=/|$)"),
                target=settings.user_service_url,
                rewrites=(PathRewrite.compile(r"^/api/users/", "/"),),
                methods=ANY_METHOD,
                auth_required=False,
                log_tag="USER-PROXY",
            ),
            RouteRule(
                name="products-read",
                pattern=products_pattern,
                target=settings.product_service_url,
                rewrites=products_rewrite,
                methods=frozenset({"GET"}),
                auth_required=False,
                log_tag="PRODUCT-PROXY",
            ),
            RouteRule(
                name="products-write",
                pattern=products_pattern,
                target=settings.product_service_url,
                rewrites=products_rewrite,
                methods=frozenset({"POST", "PUT", "DELETE"}),
                auth_required=True,
                log_tag="PRODUCT-PROXY-AUTH",
            ),
        ]
    )
