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
"""StructlogAdapter — LoggingPort implementation using structlog."""

from __future__ import annotations

import logging
from typing import Any, TextIO

import structlog

from corsfly.core.config import Config

LOGGING_PREFIX = "corsfly.logging"

_FORMATS = ("console", "json")


class StructlogAdapter:
    """Renders corsfly's structured events through structlog.

    Reads ``corsfly.logging.level`` (``debug`` .. ``critical``, default
    ``info``) and ``corsfly.logging.format`` (``console`` or ``json``).
    Events below the level are dropped by the bound logger itself, so a
    ``cors_request`` debug entry costs nothing at ``info``.

    Args:
        stream: Where rendered lines go. Defaults to stdout.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self.level = logging.INFO
        self.format = "console"

    def configure(self, config: Config) -> None:
        """Configure structlog from the ``corsfly.logging`` section.

        Raises:
            ValueError: unknown level or format.
        """
        level_name = str(config.get(f"{LOGGING_PREFIX}.level", "info")).upper()
        level = logging.getLevelNamesMapping().get(level_name)
        if level is None:
            raise ValueError(f"unknown log level {level_name!r}")
        fmt = str(config.get(f"{LOGGING_PREFIX}.format", "console")).lower()
        if fmt not in _FORMATS:
            raise ValueError(f"unknown log format {fmt!r}, expected one of {', '.join(_FORMATS)}")

        self.level = level
        self.format = fmt

        renderer: structlog.types.Processor
        if fmt == "json":
            renderer = structlog.processors.JSONRenderer()
        else:
            renderer = structlog.dev.ConsoleRenderer(colors=False)

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                renderer,
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            logger_factory=structlog.PrintLoggerFactory(file=self._stream),
            cache_logger_on_first_use=False,
        )

    def get_logger(self, name: str) -> Any:
        """Return a lazy structlog logger whose events carry ``logger=name``."""
        return structlog.get_logger(logger=name)
