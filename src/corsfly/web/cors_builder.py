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
"""Builds a :class:`PolicyConfig` from the host's configuration record.

A missing ``corsfly.cors`` section or a malformed one disables CORS instead
of failing the host application. Malformed sections are reported once on the
injected logger; successful builds log nothing.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from corsfly.config.properties.cors import CORS_PREFIX, CORSProperties
from corsfly.core.config import Config
from corsfly.web.cors import PolicyConfig


class Disabled:
    """Marker returned instead of a policy or handler when CORS is off.

    Deliberately has no ``wrap`` method, so it cannot be mistaken for a
    working handler.
    """

    _instance: Disabled | None = None

    def __new__(cls) -> Disabled:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "DISABLED"


DISABLED: Final = Disabled()


def build_policy(raw: Config | Mapping[str, Any] | None, logger: Any = None) -> PolicyConfig | Disabled:
    """Convert the ``corsfly.cors`` section of *raw* into a policy.

    Args:
        raw: The host configuration, as a :class:`Config` or a plain mapping.
        logger: Optional structlog-style logger for the parse failure entry.

    Returns:
        The policy, or :data:`DISABLED` when the section is absent or malformed.
    """
    config = Config.of(raw)
    if not config.has_section(CORS_PREFIX):
        return DISABLED

    try:
        props = config.bind(CORSProperties)
        return PolicyConfig(
            allowed_origins=frozenset(props.allow_origins),
            allowed_methods=tuple(props.allow_methods),
            allowed_headers=tuple(props.allow_headers),
            exposed_headers=tuple(props.expose_headers),
            allow_credentials=props.allow_credentials,
            max_age=props.max_age,
            allow_private_network=props.allow_private_network,
            options_passthrough=props.options_passthrough,
            options_success_status=props.options_success_status,
            debug=props.debug,
        )
    except ValueError as exc:
        if logger is not None:
            logger.warning("cors_config_malformed", prefix=CORS_PREFIX, error=str(exc))
        return DISABLED
