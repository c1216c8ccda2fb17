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
"""Starlette application factory with CORS installed from configuration."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from corsfly.config.properties.cors import CORS_PREFIX
from corsfly.core.config import Config
from corsfly.logging.port import LoggingPort
from corsfly.web.adapters.starlette.cors import CORSHandler, new_with_logger


def create_app(
    routes: Sequence[BaseRoute] | None = None,
    config: Config | Mapping[str, Any] | None = None,
    logger: Any = None,
    debug: bool = False,
    middleware: Sequence[Middleware] | None = None,
    logging_port: LoggingPort | None = None,
) -> Starlette:
    """Create a Starlette application guarded by the configured CORS policy.

    The CORS middleware is installed outermost, ahead of any caller-supplied
    *middleware*, and only when ``corsfly.cors`` is present and valid in
    *config*. Otherwise the application is built without it.

    With a *logging_port* and no explicit *logger*, the port is configured
    from *config* and its ``corsfly.cors`` logger is injected.
    """
    stack: list[Middleware] = []

    if logging_port is not None and logger is None:
        logging_port.configure(Config.of(config))
        logger = logging_port.get_logger(CORS_PREFIX)

    cors = new_with_logger(config, logger)
    if isinstance(cors, CORSHandler):
        stack.append(cors.middleware())

    stack.extend(middleware or ())

    return Starlette(debug=debug, routes=list(routes or ()), middleware=stack)
