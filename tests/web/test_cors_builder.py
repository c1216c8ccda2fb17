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
"""Tests for build_policy and the DISABLED marker."""

from __future__ import annotations

import pytest
from structlog.testing import CapturingLogger

from corsfly.core.config import Config
from corsfly.web.cors import PolicyConfig
from corsfly.web.cors_builder import DISABLED, Disabled, build_policy


def _raw(section) -> dict:
    return {"corsfly": {"cors": section}}


class TestDisabledMarker:
    def test_singleton_and_falsy(self):
        assert Disabled() is DISABLED
        assert not DISABLED
        assert repr(DISABLED) == "DISABLED"

    def test_cannot_wrap(self):
        assert not hasattr(DISABLED, "wrap")


class TestBuildPolicyAbsent:
    @pytest.mark.parametrize(
        "raw",
        [None, {}, {"corsfly": {}}, {"corsfly": {"cors": None}}, {"corsfly": {"cors": "yes"}}, {"other": {"cors": {}}}],
    )
    def test_missing_section_disables(self, raw):
        assert build_policy(raw) is DISABLED

    def test_absent_section_logs_nothing(self):
        logger = CapturingLogger()
        assert build_policy({}, logger) is DISABLED
        assert logger.calls == []


class TestBuildPolicyValues:
    def test_empty_section_uses_defaults(self):
        assert build_policy(_raw({})) == PolicyConfig()

    def test_full_section(self):
        policy = build_policy(
            _raw(
                {
                    "allow_origins": ["http://foobar.com", "https://*.foobar.com"],
                    "allow_methods": ["GET", "POST"],
                    "allow_headers": ["Origin", "Authorization"],
                    "expose_headers": ["X-Total"],
                    "allow_credentials": True,
                    "max_age": "2h",
                    "allow_private_network": True,
                    "options_passthrough": True,
                    "options_success_status": 200,
                    "debug": True,
                }
            )
        )

        assert policy == PolicyConfig(
            allowed_origins=frozenset({"http://foobar.com", "https://*.foobar.com"}),
            allowed_methods=("GET", "POST"),
            allowed_headers=("Origin", "Authorization"),
            exposed_headers=("X-Total",),
            allow_credentials=True,
            max_age=7200,
            allow_private_network=True,
            options_passthrough=True,
            options_success_status=200,
            debug=True,
        )

    def test_empty_origins_default_to_wildcard(self):
        policy = build_policy(_raw({"allow_origins": []}))
        assert isinstance(policy, PolicyConfig)
        assert policy.allowed_origins == frozenset({"*"})

    def test_accepts_config_instance(self):
        policy = build_policy(Config(_raw({"max_age": "90s"})))
        assert isinstance(policy, PolicyConfig)
        assert policy.max_age == 90

    def test_environment_overrides_section(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CORSFLY_CORS_DEBUG", "true")
        monkeypatch.setenv("CORSFLY_CORS_MAX_AGE", "1h")
        policy = build_policy(_raw({"debug": False}))
        assert isinstance(policy, PolicyConfig)
        assert policy.debug is True
        assert policy.max_age == 3600

    def test_environment_alone_does_not_enable(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CORSFLY_CORS_DEBUG", "true")
        assert build_policy({}) is DISABLED

    def test_success_logs_nothing(self):
        logger = CapturingLogger()
        build_policy(_raw({"allow_origins": ["http://foobar.com"], "max_age": "2h"}), logger)
        assert logger.calls == []


class TestBuildPolicyMalformed:
    @pytest.mark.parametrize(
        "section",
        [
            {"max_age": "two hours"},
            {"max_age": "-1h"},
            {"max_age": "9" * 400 + "h"},
            {"allow_origins": "http://foobar.com"},
            {"allow_methods": [1]},
            {"allow_credentials": "maybe"},
            {"options_success_status": 500},
            {"options_success_status": "ok"},
        ],
    )
    def test_malformed_section_disables(self, section):
        assert build_policy(_raw(section)) is DISABLED

    def test_malformed_section_logs_once(self):
        logger = CapturingLogger()
        assert build_policy(_raw({"max_age": "two hours"}), logger) is DISABLED

        assert len(logger.calls) == 1
        call = logger.calls[0]
        assert call.method_name == "warning"
        assert call.args == ("cors_config_malformed",)
        assert call.kwargs["prefix"] == "corsfly.cors"
        assert "two hours" in call.kwargs["error"]
