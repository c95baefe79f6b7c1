# Copyright 2026 TIER IV, inc.
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

"""Per-schema validator cache with first-come-first-served request slots."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Generic, TypeVar

from .validator import YamlSchemaValidator

logger = logging.getLogger(__name__)

T = TypeVar("T")
V = TypeVar("V")


class ValidatorRegistry(Generic[V]):
    """Lazily constructs one validator per schema name and serializes its use.

    Every request naming the same schema runs strictly one at a time, in the
    order the requests arrived. Requests for different schemas never wait on
    each other. Validators are kept for the lifetime of the registry.
    """

    def __init__(self, factory: Callable[[Any], V] = YamlSchemaValidator):
        self._factory = factory
        self._validators: Dict[str, V] = {}
        self._queues: Dict[str, asyncio.Lock] = {}

    def __contains__(self, schema_name: str) -> bool:
        return schema_name in self._validators

    def get_validator(self, schema_name: str, schema: Any) -> V:
        validator = self._validators.get(schema_name)
        if validator is None:
            logger.debug(f"Constructing validator for schema '{schema_name}'")
            validator = self._factory(schema)
            self._validators[schema_name] = validator
        return validator

    def _queue(self, schema_name: str) -> asyncio.Lock:
        # asyncio.Lock wakes waiters in FIFO order
        queue = self._queues.get(schema_name)
        if queue is None:
            queue = asyncio.Lock()
            self._queues[schema_name] = queue
        return queue

    @asynccontextmanager
    async def slot(self, schema_name: str) -> AsyncIterator[None]:
        """Hold the schema's slot without touching its validator."""
        async with self._queue(schema_name):
            yield

    @asynccontextmanager
    async def checkout(self, schema_name: str, schema: Any) -> AsyncIterator[V]:
        """Hold the schema's slot and yield its validator."""
        async with self._queue(schema_name):
            yield self.get_validator(schema_name, schema)

    async def with_validator(self, schema_name: str, schema: Any,
                             fun: Callable[[V], Awaitable[T]]) -> T:
        async with self.checkout(schema_name, schema) as validator:
            return await fun(validator)
