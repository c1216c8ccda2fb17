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
"""corsfly web layer — CORS policy types, builder, engine and adapters.

Transport-agnostic types are exported directly; the default adapter
(Starlette) is re-exported for convenience.
"""

from corsfly.web.adapters.starlette import CORSHandler, CORSMiddleware, create_app, new, new_with_logger
from corsfly.web.cors import Decision, PolicyConfig, RequestKind, RequestSnapshot
from corsfly.web.cors_builder import DISABLED, Disabled, build_policy
from corsfly.web.cors_engine import PolicyEngine

__all__ = [
    "DISABLED",
    "CORSHandler",
    "CORSMiddleware",
    "Decision",
    "Disabled",
    "PolicyConfig",
    "PolicyEngine",
    "RequestKind",
    "RequestSnapshot",
    "build_policy",
    "create_app",
    "new",
    "new_with_logger",
]
