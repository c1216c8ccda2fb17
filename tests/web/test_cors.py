# Copyright 2026 Firefly Software Solutions Inc.
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
"""Tests for PolicyConfig, RequestSnapshot and Decision."""

from __future__ import annotations

import dataclasses

import pytest
from starlette.datastructures import Headers

from corsfly.web.cors import Decision, PolicyConfig, RequestKind, RequestSnapshot


class TestPolicyConfigDefaults:
    def test_defaults(self):
        policy = PolicyConfig()

        assert policy.allowed_origins == frozenset({"*"})
        assert policy.allowed_methods == ()
        assert policy.allowed_headers == ()
        assert policy.exposed_headers == ()
        assert policy.allow_credentials is False
        assert policy.max_age == 0
        assert policy.allow_private_network is False
        assert policy.options_passthrough is False
        assert policy.options_success_status == 204

    def test_empty_origins_mean_wildcard(self):
        assert PolicyConfig(allowed_origins=frozenset()).allows_any_origin


class TestPolicyConfigInvariants:
    @pytest.mark.parametrize("status", [100, 199, 400, 500])
    def test_rejects_non_success_status(self, status):
        with pytest.raises(ValueError, match="options_success_status"):
            PolicyConfig(options_success_status=status)

    def test_accepts_redirect_status(self):
        assert PolicyConfig(options_success_status=302).options_success_status == 302

    def test_rejects_negative_max_age(self):
        with pytest.raises(ValueError, match="max_age"):
            PolicyConfig(max_age=-1)

    def test_frozen(self):
        policy = PolicyConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            policy.allow_credentials = True  # type: ignore[misc]


class TestPolicyConfigOriginMatching:
    def test_exact_match(self):
        policy = PolicyConfig(allowed_origins=frozenset({"http://foobar.com"}))
        assert policy.matches_origin("http://foobar.com")
        assert not policy.matches_origin("http://foobar.com.evil.net")
        assert not policy.matches_origin("HTTP://FOOBAR.COM")

    def test_wildcard_pattern(self):
        policy = PolicyConfig(allowed_origins=frozenset({"https://*.example.com"}))
        assert policy.matches_origin("https://api.example.com")
        assert policy.matches_origin("https://a.b.example.com")
        assert not policy.matches_origin("https://example.com")
        assert not policy.matches_origin("http://api.example.com")

    def test_wildcard_matches_everything(self):
        assert PolicyConfig().matches_origin("http://anything.test")


class TestRequestSnapshot:
    def test_from_headers(self):
        headers = Headers(
            {
                "origin": "http://foobar.com",
                "access-control-request-method": "GET",
                "access-control-request-headers": "X-Token, Content-Type",
                "access-control-request-private-network": "true",
            }
        )
        snapshot = RequestSnapshot.from_headers("OPTIONS", headers)

        assert snapshot == RequestSnapshot(
            method="OPTIONS",
            origin="http://foobar.com",
            requested_method="GET",
            requested_headers="X-Token, Content-Type",
            requested_private_network=True,
            private_network_header=True,
        )

    def test_missing_and_empty_headers_are_absent(self):
        snapshot = RequestSnapshot.from_headers("GET", Headers({"origin": ""}))
        assert snapshot.origin is None
        assert snapshot.requested_method is None
        assert snapshot.requested_headers is None
        assert snapshot.requested_private_network is False
        assert snapshot.private_network_header is False

    def test_private_network_requires_true(self):
        headers = Headers({"access-control-request-private-network": "false"})
        snapshot = RequestSnapshot.from_headers("OPTIONS", headers)
        assert snapshot.requested_private_network is False
        assert snapshot.private_network_header is True


class TestDecision:
    def test_kind_flags(self):
        assert not Decision(kind=RequestKind.NOT_CORS).is_cors
        assert Decision(kind=RequestKind.ACTUAL).is_cors
        assert not Decision(kind=RequestKind.ACTUAL).is_preflight
        assert Decision(kind=RequestKind.PREFLIGHT).is_preflight
