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
"""CORS middleware for Starlette and any other ASGI application.

Usage::

    cors = new_with_logger(config, logger)
    if cors is not DISABLED:
        app = cors.wrap(app)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from starlette.datastructures import Headers, MutableHeaders
from starlette.middleware import Middleware
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from corsfly.core.config import Config
from corsfly.web.cors import ALLOW_ORIGIN, Decision, PolicyConfig, RequestSnapshot
from corsfly.web.cors_builder import DISABLED, Disabled, build_policy
from corsfly.web.cors_engine import PolicyEngine


class CORSMiddleware:
    """Pure ASGI middleware applying a :class:`PolicyEngine` decision.

    Terminated preflights are answered here with an empty body. Everything
    else reaches the downstream app; the decision's headers are set on its
    ``http.response.start`` message, replacing any value it wrote.
    """

    def __init__(self, app: ASGIApp, engine: PolicyEngine, logger: Any = None) -> None:
        self.app = app
        self._engine = engine
        self._logger = logger

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        snapshot = RequestSnapshot.from_headers(scope["method"], Headers(scope=scope))
        decision = self._engine.evaluate(snapshot)

        if not decision.is_cors:
            await self.app(scope, receive, send)
            return

        if self._engine.policy.debug and self._logger is not None:
            self._log_decision(snapshot, decision)

        if decision.terminate:
            response = Response(status_code=decision.status_code or 204, headers=decision.headers)
            await response(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in decision.headers.items():
                    headers[name] = value
            await send(message)

        await self.app(scope, receive, send_with_cors)

    def _log_decision(self, snapshot: RequestSnapshot, decision: Decision) -> None:
        self._logger.debug(
            "cors_request",
            kind=decision.kind.value,
            method=snapshot.method,
            origin=snapshot.origin,
            allowed_origin=decision.headers.get(ALLOW_ORIGIN),
            terminate=decision.terminate,
        )


class CORSHandler:
    """Wraps downstream ASGI apps with one shared CORS policy."""

    def __init__(self, policy: PolicyConfig, logger: Any = None) -> None:
        self._engine = PolicyEngine(policy)
        self._logger = logger

    @property
    def policy(self) -> PolicyConfig:
        return self._engine.policy

    def wrap(self, app: ASGIApp) -> ASGIApp:
        """Return *app* guarded by the CORS middleware."""
        return CORSMiddleware(app, self._engine, self._logger)

    def middleware(self) -> Middleware:
        """Return a Starlette middleware entry for this handler."""
        return Middleware(CORSMiddleware, engine=self._engine, logger=self._logger)


def new(raw: Config | Mapping[str, Any] | None) -> CORSHandler | Disabled:
    """Build a handler from the ``corsfly.cors`` section of *raw*.

    Returns :data:`DISABLED` when the section is absent or malformed.
    """
    return new_with_logger(raw, None)


def new_with_logger(raw: Config | Mapping[str, Any] | None, logger: Any) -> CORSHandler | Disabled:
    """Like :func:`new`, reporting configuration problems on *logger*."""
    policy = build_policy(raw, logger)
    if isinstance(policy, Disabled):
        return DISABLED
    return CORSHandler(policy, logger)
