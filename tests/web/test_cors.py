# Copyright 2026 The FileScout Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for CORS enforcement on a live Starlette application."""

from __future__ import annotations

import pytest
from starlette.applications import Starlette
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from filescout.kernel.exceptions import InvalidCorsConfigurationException, InvalidPathPatternException
from filescout.web.adapters.starlette.app import create_app, register
from filescout.web.adapters.starlette.filters import CorsFilter
from filescout.web.cors import CorsPolicy

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

LOCAL = "http://localhost:3001"
NETLIFY = "https://aquamarine-selkie-7ea2ff.netlify.app"
PROD = "https://filemanagerapp.harshaanc.dev"

FILESCOUT_POLICY = CorsPolicy(
    path_pattern="/**",
    allowed_origins=(LOCAL, NETLIFY, PROD),
    allowed_methods=("GET", "POST", "PUT", "DELETE"),
    allowed_headers=("*",),
    allow_credentials=True,
)


async def files(request):
    return JSONResponse({"files": [], "method": request.method})


async def preset_cors(request):
    return PlainTextResponse("own", headers={"Access-Control-Allow-Origin": "https://own.example"})


ROUTES = [
    Route("/api/files", files, methods=["GET", "POST", "PUT", "DELETE"]),
    Route("/public/info", files),
    Route("/preset", preset_cors),
]


def _client(*policies: CorsPolicy) -> TestClient:
    app = create_app(cors=policies, extra_routes=ROUTES, request_logging=False)
    return TestClient(app)


def _cors_headers(resp) -> list[str]:
    return [k for k in resp.headers if k.lower().startswith("access-control-allow-")]


# ---------------------------------------------------------------------------
# Actual (non-preflight) requests
# ---------------------------------------------------------------------------


class TestAllowedOrigin:
    def setup_method(self):
        self.client = _client(FILESCOUT_POLICY)

    def test_get_from_allowed_origin_echoes_origin(self):
        resp = self.client.get("/api/files", headers={"Origin": LOCAL})

        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == LOCAL
        assert resp.headers["access-control-allow-credentials"] == "true"

    @pytest.mark.parametrize("origin", [LOCAL, NETLIFY, PROD])
    def test_every_configured_origin_is_echoed_never_wildcard(self, origin):
        resp = self.client.post("/api/files", headers={"Origin": origin})

        assert resp.headers["access-control-allow-origin"] == origin
        assert resp.headers["access-control-allow-origin"] != "*"

    def test_vary_lists_cors_request_headers(self):
        resp = self.client.get("/api/files", headers={"Origin": LOCAL})

        vary = resp.headers["vary"]
        assert "Origin" in vary
        assert "Access-Control-Request-Method" in vary
        assert "Access-Control-Request-Headers" in vary

    def test_route_response_body_is_preserved(self):
        resp = self.client.delete("/api/files", headers={"Origin": PROD})

        assert resp.json() == {"files": [], "method": "DELETE"}

    def test_route_cors_headers_are_not_overwritten(self):
        resp = self.client.get("/preset", headers={"Origin": LOCAL})

        assert resp.headers["access-control-allow-origin"] == "https://own.example"
        assert "access-control-allow-credentials" not in resp.headers


class TestDisallowedOrigin:
    def setup_method(self):
        self.client = _client(FILESCOUT_POLICY)

    def test_get_from_unknown_origin_has_no_cors_headers(self):
        resp = self.client.get("/api/files", headers={"Origin": "http://evil.example.com"})

        assert resp.status_code == 200
        assert _cors_headers(resp) == []

    def test_request_is_still_processed(self):
        resp = self.client.put("/api/files", headers={"Origin": "http://evil.example.com"})

        assert resp.json()["method"] == "PUT"

    def test_origin_comparison_is_case_sensitive(self):
        resp = self.client.get("/api/files", headers={"Origin": "HTTP://LOCALHOST:3001"})

        assert "access-control-allow-origin" not in resp.headers

    def test_origin_with_different_port_is_rejected(self):
        resp = self.client.get("/api/files", headers={"Origin": "http://localhost:3000"})

        assert "access-control-allow-origin" not in resp.headers


class TestSameOriginRequests:
    def setup_method(self):
        self.client = _client(FILESCOUT_POLICY)

    def test_request_without_origin_gets_no_cors_headers(self):
        resp = self.client.get("/api/files")

        assert resp.status_code == 200
        assert not [k for k in resp.headers if k.lower().startswith("access-control-")]
        assert "vary" not in resp.headers

    def test_origin_matching_the_server_is_same_origin(self):
        resp = self.client.get("/api/files", headers={"Origin": "http://testserver"})

        assert resp.status_code == 200
        assert _cors_headers(resp) == []


# ---------------------------------------------------------------------------
# Preflight requests
# ---------------------------------------------------------------------------


class TestPreflight:
    def setup_method(self):
        self.client = _client(FILESCOUT_POLICY)

    def test_preflight_from_allowed_origin_lists_methods(self):
        resp = self.client.options(
            "/api/files",
            headers={"Origin": PROD, "Access-Control-Request-Method": "PUT"},
        )

        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == PROD
        assert resp.headers["access-control-allow-methods"] == "GET, POST, PUT, DELETE"
        assert resp.headers["access-control-allow-credentials"] == "true"
        assert resp.headers["access-control-max-age"] == "1800"

    def test_wildcard_headers_with_credentials_echo_requested_headers(self):
        resp = self.client.options(
            "/api/files",
            headers={
                "Origin": LOCAL,
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type, X-Requested-With",
            },
        )

        assert resp.status_code == 200
        assert resp.headers["access-control-allow-headers"] == "Content-Type, X-Requested-With"

    def test_preflight_without_requested_headers_omits_allow_headers(self):
        resp = self.client.options(
            "/api/files",
            headers={"Origin": LOCAL, "Access-Control-Request-Method": "GET"},
        )

        assert "access-control-allow-headers" not in resp.headers

    def test_preflight_is_answered_for_paths_without_routes(self):
        resp = self.client.options(
            "/not/a/route",
            headers={"Origin": LOCAL, "Access-Control-Request-Method": "GET"},
        )

        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == LOCAL

    def test_preflight_from_unknown_origin_is_forbidden(self):
        resp = self.client.options(
            "/api/files",
            headers={"Origin": "http://evil.example.com", "Access-Control-Request-Method": "GET"},
        )

        assert resp.status_code == 403
        assert resp.text == "Invalid CORS request"
        assert _cors_headers(resp) == []

    def test_preflight_for_disallowed_method_is_forbidden(self):
        resp = self.client.options(
            "/api/files",
            headers={"Origin": LOCAL, "Access-Control-Request-Method": "PATCH"},
        )

        assert resp.status_code == 403
        assert _cors_headers(resp) == []

    def test_options_without_request_method_is_not_a_preflight(self):
        resp = self.client.options("/api/files", headers={"Origin": LOCAL})

        # Reaches the router, which does not route OPTIONS for this path.
        assert resp.status_code == 405
        assert resp.headers["access-control-allow-origin"] == LOCAL


class TestExplicitHeaders:
    def setup_method(self):
        self.client = _client(
            CorsPolicy(
                allowed_origins=(LOCAL,),
                allowed_methods=("GET", "POST"),
                allowed_headers=("Content-Type", "Authorization"),
                exposed_headers=("X-Total-Count",),
                max_age=600,
            )
        )

    def test_allowed_headers_are_matched_case_insensitively(self):
        resp = self.client.options(
            "/api/files",
            headers={
                "Origin": LOCAL,
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type,authorization",
            },
        )

        assert resp.status_code == 200
        assert resp.headers["access-control-allow-headers"] == "content-type, authorization"
        assert resp.headers["access-control-max-age"] == "600"
        assert "access-control-allow-credentials" not in resp.headers

    def test_unlisted_header_fails_preflight(self):
        resp = self.client.options(
            "/api/files",
            headers={
                "Origin": LOCAL,
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "X-Secret",
            },
        )

        assert resp.status_code == 403
        assert _cors_headers(resp) == []

    def test_head_is_allowed_when_get_is(self):
        resp = self.client.options(
            "/api/files",
            headers={"Origin": LOCAL, "Access-Control-Request-Method": "HEAD"},
        )

        assert resp.status_code == 200

    def test_exposed_headers_on_actual_response(self):
        resp = self.client.get("/api/files", headers={"Origin": LOCAL})

        assert resp.headers["access-control-expose-headers"] == "X-Total-Count"


class TestWildcardOrigin:
    def test_wildcard_without_credentials_answers_star(self):
        client = _client(CorsPolicy(allowed_origins=("*",)))

        resp = client.get("/api/files", headers={"Origin": "https://anyone.example"})

        assert resp.headers["access-control-allow-origin"] == "*"
        assert "access-control-allow-credentials" not in resp.headers


# ---------------------------------------------------------------------------
# Path patterns and multiple policies
# ---------------------------------------------------------------------------


class TestPathScopedPolicies:
    def setup_method(self):
        self.client = _client(
            CorsPolicy(path_pattern="/public/**", allowed_origins=("*",)),
            CorsPolicy(path_pattern="/api/**", allowed_origins=(LOCAL,), allow_credentials=True),
        )

    def test_first_matching_policy_wins(self):
        public = self.client.get("/public/info", headers={"Origin": "https://anyone.example"})
        api = self.client.get("/api/files", headers={"Origin": "https://anyone.example"})

        assert public.headers["access-control-allow-origin"] == "*"
        assert "access-control-allow-origin" not in api.headers

    def test_paths_outside_every_pattern_are_untouched(self):
        resp = self.client.get("/health", headers={"Origin": LOCAL})

        assert resp.status_code == 200
        assert _cors_headers(resp) == []
        assert "vary" not in resp.headers


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


class TestRegister:
    def test_register_attaches_filter_to_plain_starlette_app(self):
        app = Starlette(routes=ROUTES)
        cors_filter = register(app, FILESCOUT_POLICY)

        assert isinstance(cors_filter, CorsFilter)
        assert [p.policy for p in cors_filter.processors] == [FILESCOUT_POLICY]

        resp = TestClient(app).get("/api/files", headers={"Origin": NETLIFY})
        assert resp.headers["access-control-allow-origin"] == NETLIFY

    def test_register_rejects_wildcard_origin_with_credentials(self):
        app = Starlette(routes=ROUTES)

        with pytest.raises(InvalidCorsConfigurationException, match="allow_credentials"):
            register(app, CorsPolicy(allowed_origins=("*",), allow_credentials=True))

        assert app.user_middleware == []

    def test_register_rejects_invalid_path_pattern(self):
        app = Starlette(routes=ROUTES)

        with pytest.raises(InvalidPathPatternException):
            register(app, CorsPolicy(path_pattern="/api/{id", allowed_origins=(LOCAL,)))

    def test_no_cors_when_not_configured(self):
        client = TestClient(create_app(extra_routes=ROUTES, request_logging=False))

        resp = client.get("/api/files", headers={"Origin": LOCAL})

        assert "access-control-allow-origin" not in resp.headers
