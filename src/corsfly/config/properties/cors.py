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
"""CORS configuration properties (corsfly.cors.*)."""

from __future__ import annotations

import math
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from corsfly.core.config import config_properties

CORS_PREFIX = "corsfly.cors"

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: str) -> float:
    """Parse a duration string such as ``"2h"``, ``"1h30m"`` or ``"250ms"``.

    Returns the duration in seconds. ``"0"`` is accepted without a unit.

    Raises:
        ValueError: the string is empty, negative, or not a sequence of
            ``<number><unit>`` parts, or too large to represent.
    """
    text = value.strip()
    if text == "0":
        return 0.0
    if not text or text.startswith("-"):
        raise ValueError(f"invalid duration {value!r}")

    text = text.removeprefix("+")
    total = 0.0
    pos = 0
    for match in _DURATION_PART_RE.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(text):
        raise ValueError(f"invalid duration {value!r}")
    if not math.isfinite(total):
        raise ValueError(f"duration out of range {value!r}")
    return total


@config_properties(prefix=CORS_PREFIX)
class CORSProperties(BaseModel):
    """Raw CORS section as written by the host application."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    allow_methods: list[str] = Field(default_factory=list)
    allow_headers: list[str] = Field(default_factory=list)
    expose_headers: list[str] = Field(default_factory=list)
    allow_credentials: bool = False
    max_age: int = Field(default=0, ge=0)  # seconds
    allow_private_network: bool = False
    options_passthrough: bool = False
    options_success_status: int = Field(default=204, ge=200, le=399)
    debug: bool = False

    @field_validator("allow_origins", "allow_methods", "allow_headers", "expose_headers", mode="before")
    @classmethod
    def null_lists_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("max_age", mode="before")
    @classmethod
    def parse_max_age(cls, value: Any) -> Any:
        if value is None:
            return 0
        if isinstance(value, str):
            return int(parse_duration(value))
        return value
