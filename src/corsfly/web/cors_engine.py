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
"""PolicyEngine — maps a request snapshot and a policy to a CORS decision.

Each request is classified first (not CORS, preflight, or actual) and then
handed to the header computation for that kind. Evaluation only reads the
policy and the snapshot, so one engine serves any number of concurrent
requests.
"""

from __future__ import annotations

from corsfly.web.cors import (
    ALLOW_CREDENTIALS,
    ALLOW_HEADERS,
    ALLOW_METHODS,
    ALLOW_ORIGIN,
    ALLOW_PRIVATE_NETWORK,
    EXPOSE_HEADERS,
    MAX_AGE,
    ORIGIN,
    REQUEST_HEADERS,
    REQUEST_METHOD,
    REQUEST_PRIVATE_NETWORK,
    VARY,
    WILDCARD,
    Decision,
    PolicyConfig,
    RequestKind,
    RequestSnapshot,
)

# Implicitly allowed when no methods are configured.
SIMPLE_METHODS = frozenset({"GET", "HEAD", "POST"})

_PREFLIGHT_VARY = ", ".join((ORIGIN, REQUEST_METHOD, REQUEST_HEADERS))


class PolicyEngine:
    """Evaluates requests against one immutable :class:`PolicyConfig`."""

    def __init__(self, policy: PolicyConfig) -> None:
        self._policy = policy

    @property
    def policy(self) -> PolicyConfig:
        return self._policy

    @staticmethod
    def classify(snapshot: RequestSnapshot) -> RequestKind:
        if snapshot.origin is None:
            return RequestKind.NOT_CORS
        if snapshot.method.upper() == "OPTIONS" and snapshot.requested_method is not None:
            return RequestKind.PREFLIGHT
        return RequestKind.ACTUAL

    def evaluate(self, snapshot: RequestSnapshot) -> Decision:
        kind = self.classify(snapshot)
        if kind is RequestKind.PREFLIGHT:
            return self._preflight(snapshot)
        if kind is RequestKind.ACTUAL:
            return self._actual(snapshot)
        return Decision(kind=RequestKind.NOT_CORS)

    def allowed_origin(self, origin: str) -> str | None:
        """Value for ``Access-Control-Allow-Origin``, or ``None`` to omit it.

        A wildcard policy answers ``*`` unless credentials are allowed, in
        which case the origin itself is echoed; browsers refuse ``*`` on
        credentialed responses.
        """
        policy = self._policy
        if policy.allows_any_origin and not policy.allow_credentials:
            return WILDCARD
        if policy.matches_origin(origin):
            return origin
        return None

    def _preflight(self, snapshot: RequestSnapshot) -> Decision:
        policy = self._policy
        headers: dict[str, str] = {}

        vary = _PREFLIGHT_VARY
        if snapshot.private_network_header:
            vary += ", " + REQUEST_PRIVATE_NETWORK
        headers[VARY] = vary

        self._set_origin(headers, snapshot)

        methods = self._allowed_methods(snapshot.requested_method or "")
        if methods:
            headers[ALLOW_METHODS] = methods

        allowed_headers = self._allowed_headers(snapshot.requested_headers or "")
        if allowed_headers:
            headers[ALLOW_HEADERS] = allowed_headers

        if policy.max_age > 0:
            headers[MAX_AGE] = str(policy.max_age)
        if policy.allow_private_network and snapshot.requested_private_network:
            headers[ALLOW_PRIVATE_NETWORK] = "true"
        if policy.allow_credentials:
            headers[ALLOW_CREDENTIALS] = "true"

        if policy.options_passthrough:
            return Decision(kind=RequestKind.PREFLIGHT, headers=headers)
        return Decision(
            kind=RequestKind.PREFLIGHT,
            headers=headers,
            terminate=True,
            status_code=policy.options_success_status,
        )

    def _actual(self, snapshot: RequestSnapshot) -> Decision:
        policy = self._policy
        headers: dict[str, str] = {VARY: ORIGIN}
        self._set_origin(headers, snapshot)
        if policy.allow_credentials:
            headers[ALLOW_CREDENTIALS] = "true"
        if policy.exposed_headers:
            headers[EXPOSE_HEADERS] = ", ".join(policy.exposed_headers)
        return Decision(kind=RequestKind.ACTUAL, headers=headers)

    def _set_origin(self, headers: dict[str, str], snapshot: RequestSnapshot) -> None:
        allowed = self.allowed_origin(snapshot.origin or "")
        if allowed is not None:
            headers[ALLOW_ORIGIN] = allowed

    def _allowed_methods(self, requested: str) -> str:
        if self._policy.allowed_methods:
            return ", ".join(self._policy.allowed_methods)
        requested = requested.upper()
        return requested if requested in SIMPLE_METHODS else ""

    def _allowed_headers(self, requested: str) -> str:
        configured = self._policy.allowed_headers
        if not configured:
            return requested
        if WILDCARD in configured:
            return requested

        # Echo what was asked for, in the browser's spelling, when the policy allows it.
        allowed = {name.lower() for name in configured}
        echoed = [name for name in (part.strip() for part in requested.split(",")) if name.lower() in allowed]
        return ", ".join(echoed) if echoed else ", ".join(configured)
