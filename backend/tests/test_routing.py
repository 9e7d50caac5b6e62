"""
Storefront Gateway: Route Table Unit Tests
==========================================

What we test:
    ✅ Users, product-read and product-write rules are selected correctly
    ✅ Method decides between rules sharing a prefix
    ✅ Unmatched paths and methods return None
    ✅ Path rewrites (users prefix stripped, products prefix replaced)
    ✅ Longest match wins, ties keep declaration order
"""

import re

import pytest

from storefront.gateway.proxy import build_target_url
from storefront.gateway.routing import PathRewrite, RouteRule, RouteTable, build_route_table


@pytest.fixture
def table(gateway_settings):
    return build_route_table(gateway_settings)


class TestRouteSelection:
    """Tests for RouteTable.match() with the gateway's real table."""

    @pytest.mark.parametrize("path", ["/api/users/register", "/api/users/login", "/api/users/profile"])
    def test_user_paths_are_public(self, table, path):
        rule = table.match("POST", path)
        assert rule.name == "users"
        assert rule.auth_required is False

    def test_user_subpath_matches(self, table):
        assert table.match("GET", "/api/users/profile/settings").name == "users"

    @pytest.mark.parametrize("path", ["/api/users/admin", "/api/users/loginx", "/api/users"])
    def test_other_user_paths_do_not_match(self, table, path):
        assert table.match("GET", path) is None

    def test_get_products_is_public(self, table):
        rule = table.match("GET", "/api/products/1")
        assert rule.name == "products-read"
        assert rule.auth_required is False

    def test_head_uses_read_rule(self, table):
        assert table.match("HEAD", "/api/products").name == "products-read"

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE"])
    def test_product_writes_require_auth(self, table, method):
        rule = table.match(method, "/api/products/1")
        assert rule.name == "products-write"
        assert rule.auth_required is True

    def test_patch_on_products_has_no_rule(self, table):
        assert table.match("PATCH", "/api/products/1") is None

    @pytest.mark.parametrize("path", ["/", "/api/unknown", "/api/cart", "/products"])
    def test_unknown_paths(self, table, path):
        assert table.match("GET", path) is None

    def test_targets_come_from_settings(self, table, gateway_settings):
        assert table.match("GET", "/api/products").target == gateway_settings.product_service_url
        assert table.match("POST", "/api/users/login").target == gateway_settings.user_service_url


class TestRewrite:
    """Tests for RouteRule.rewrite()."""

    def test_users_prefix_is_stripped(self, table):
        rule = table.match("POST", "/api/users/login")
        assert rule.rewrite("/api/users/login") == "/login"

    def test_products_prefix_is_replaced(self, table):
        rule = table.match("GET", "/api/products/2/stock")
        assert rule.rewrite("/api/products/2/stock") == "/products/2/stock"
        assert rule.rewrite("/api/products") == "/products"

    def test_only_first_occurrence_is_rewritten(self):
        rule = RouteRule(
            name="r",
            pattern=re.compile(r"^/a"),
            target="http://x",
            rewrites=(PathRewrite.compile(r"/a", "/b"),),
        )
        assert rule.rewrite("/a/a") == "/b/a"

    def test_no_matching_rewrite_keeps_path(self):
        rule = RouteRule(name="r", pattern=re.compile(r"^/"), target="http://x")
        assert rule.rewrite("/anything") == "/anything"


class TestPrecedence:
    """Tests for overlapping rules."""

    def test_longest_match_wins(self):
        short = RouteRule(name="short", pattern=re.compile(r"^/api"), target="http://a")
        long = RouteRule(name="long", pattern=re.compile(r"^/api/special"), target="http://b")
        table = RouteTable([short, long])
        assert table.match("GET", "/api/special/1").name == "long"
        assert table.match("GET", "/api/other").name == "short"

    def test_equal_length_keeps_declaration_order(self):
        first = RouteRule(name="first", pattern=re.compile(r"^/x"), target="http://a")
        second = RouteRule(name="second", pattern=re.compile(r"^/x"), target="http://b")
        assert RouteTable([first, second]).match("GET", "/x").name == "first"


class TestBuildTargetUrl:
    def test_query_string_is_appended(self):
        url = build_target_url("http://p:3002/", "/products", "category=books&search=a")
        assert str(url) == "http://p:3002/products?category=books&search=a"

    def test_missing_leading_slash(self):
        assert str(build_target_url("http://p", "login")) == "http://p/login"

    @pytest.mark.parametrize("raw_path", ["/products/x%3Fy", "/products/a%2Fb", "/products/c%23d"])
    def test_escapes_are_kept(self, raw_path):
        url = build_target_url("http://p:3002", raw_path)
        assert url.raw_path == raw_path.encode("ascii")
        assert url.query == b""

    def test_non_ascii_octets_are_escaped(self):
        url = build_target_url("http://p", "/products/caf\xc3\xa9")
        assert url.raw_path == b"/products/caf%C3%A9"
