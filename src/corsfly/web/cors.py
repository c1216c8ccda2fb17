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
"""CORS policy, per-request snapshot and decision types."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final

WILDCARD: Final = "*"

# Request headers
ORIGIN: Final = "Origin"
REQUEST_METHOD: Final = "Access-Control-Request-Method"
REQUEST_HEADERS: Final = "Access-Control-Request-Headers"
REQUEST_PRIVATE_NETWORK: Final = "Access-Control-Request-Private-Network"

# Response headers
VARY: Final = "Vary"
ALLOW_ORIGIN: Final = "Access-Control-Allow-Origin"
ALLOW_METHODS: Final = "Access-Control-Allow-Methods"
ALLOW_HEADERS: Final = "Access-Control-Allow-Headers"
ALLOW_CREDENTIALS: Final = "Access-Control-Allow-Credentials"
MAX_AGE: Final = "Access-Control-Max-Age"
EXPOSE_HEADERS: Final = "Access-Control-Expose-Headers"
ALLOW_PRIVATE_NETWORK: Final = "Access-Control-Allow-Private-Network"

CORS_RESPONSE_HEADERS: Final = (
    VARY,
    ALLOW_ORIGIN,
    ALLOW_METHODS,
    ALLOW_HEADERS,
    ALLOW_CREDENTIALS,
    MAX_AGE,
    EXPOSE_HEADERS,
    ALLOW_PRIVATE_NETWORK,
)


@dataclass(frozen=True)
class PolicyConfig:
    """Validated Cross-Origin Resource Sharing policy.

    Built once at startup and shared read-only by every request.

    Attributes:
        allowed_origins: Origin patterns. ``"*"`` allows any origin; an entry
            with a single ``*`` (``https://*.example.com``) matches by prefix
            and suffix. Empty means ``{"*"}``.
        allowed_methods: Methods advertised on preflight, case as configured.
        allowed_headers: Headers advertised on preflight. Empty echoes the
            headers the browser asked for.
        exposed_headers: Value of ``Access-Control-Expose-Headers``.
        allow_credentials: Emit ``Access-Control-Allow-Credentials: true``.
        max_age: Preflight cache lifetime in seconds; ``0`` omits the header.
        allow_private_network: Answer private network access preflights.
        options_passthrough: Forward successful preflights downstream.
        options_success_status: Status of a terminated preflight.
        debug: Log every CORS decision through the injected logger.
    """

    allowed_origins: frozenset[str] = frozenset({WILDCARD})
    allowed_methods: tuple[str, ...] = ()
    allowed_headers: tuple[str, ...] = ()
    exposed_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int = 0  # seconds
    allow_private_network: bool = False
    options_passthrough: bool = False
    options_success_status: int = 204
    debug: bool = False
    _patterns: tuple[tuple[str, str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.allowed_origins:
            object.__setattr__(self, "allowed_origins", frozenset({WILDCARD}))
        if not 200 <= self.options_success_status < 400:
            raise ValueError(
                f"options_success_status must be a 2xx or 3xx status, got {self.options_success_status}"
            )
        if self.max_age < 0:
            raise ValueError(f"max_age must not be negative, got {self.max_age}")

        patterns = []
        for origin in sorted(self.allowed_origins):
            if origin != WILDCARD and origin.count(WILDCARD) == 1:
                prefix, suffix = origin.split(WILDCARD)
                patterns.append((prefix, suffix))
        object.__setattr__(self, "_patterns", tuple(patterns))

    @property
    def allows_any_origin(self) -> bool:
        return WILDCARD in self.allowed_origins

    def matches_origin(self, origin: str) -> bool:
        """Return ``True`` if *origin* is listed or matches a pattern."""
        if self.allows_any_origin or origin in self.allowed_origins:
            return True
        return any(
            len(origin) >= len(prefix) + len(suffix) and origin.startswith(prefix) and origin.endswith(suffix)
            for prefix, suffix in self._patterns
        )


@dataclass(frozen=True)
class RequestSnapshot:
    """The CORS-relevant view of one inbound request.

    ``private_network_header`` records that
    ``Access-Control-Request-Private-Network`` was sent at all;
    ``requested_private_network`` that its value was ``true``.
    """

    method: str
    origin: str | None = None
    requested_method: str | None = None
    requested_headers: str | None = None
    requested_private_network: bool = False
    private_network_header: bool = False

    @classmethod
    def from_headers(cls, method: str, headers: Mapping[str, str]) -> RequestSnapshot:
        """Build a snapshot from a case-insensitive header mapping.

        Empty header values are treated as absent.
        """
        private_network = headers.get(REQUEST_PRIVATE_NETWORK) or ""
        return cls(
            method=method,
            origin=headers.get(ORIGIN) or None,
            requested_method=headers.get(REQUEST_METHOD) or None,
            requested_headers=headers.get(REQUEST_HEADERS) or None,
            requested_private_network=private_network.lower() == "true",
            private_network_header=bool(private_network),
        )


class RequestKind(enum.Enum):
    """Classification of a request with respect to CORS."""

    NOT_CORS = "not_cors"
    PREFLIGHT = "preflight"
    ACTUAL = "actual"


@dataclass(frozen=True)
class Decision:
    """What to do with one request.

    ``headers`` holds only the headers to set, in emission order.
    ``status_code`` is meaningful only when ``terminate`` is set.
    """

    kind: RequestKind
    headers: dict[str, str] = field(default_factory=dict)
    terminate: bool = False
    status_code: int | None = None

    @property
    def is_cors(self) -> bool:
        return self.kind is not RequestKind.NOT_CORS

    @property
    def is_preflight(self) -> bool:
        return self.kind is RequestKind.PREFLIGHT
