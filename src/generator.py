"""Text prompt -> task list, via a hosted chat-completions model.

GenerationAdapter does the single HTTP request/response pair.
GenerationController wraps it for the UI: one request in flight at a
time, a request id so a stale (cancelled) response never overwrites newer
state, and a wholesale store replacement only on success.
"""
from __future__ import annotations
import asyncio
import itertools
import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Optional

import aiohttp

from errors import AdapterError, ValidationError
from store import TaskStore

logger = logging.getLogger(__name__)

Transport = Callable[[str, Dict[str, str], Dict[str, Any], float], Awaitable[Dict[str, Any]]]

SYSTEM_PROMPT = """You are a project management assistant. Based on the user's input, generate a list of tasks for a project plan.
Reply ONLY with a valid JSON object containing a key "tasks" holding an array of task objects. Do not add any other text, markdown or explanation.
Every task object must have this structure: {{ "id": number, "name": string, "start": string (YYYY-MM-DD), "end": string (YYYY-MM-DD), "color": string (blue, green, yellow, or red), "dependencies": number[] (ids of tasks it depends on), "completed": boolean }}
The first task should have id 1. Dates are relative to today ({today}) when no timeframe is given; the project starts today.
Example reply:
{{"tasks": [
  {{"id": 1, "name": "Task 1", "start": "2024-03-01", "end": "2024-03-05", "color": "blue", "dependencies": [], "completed": false}},
  {{"id": 2, "name": "Task 2", "start": "2024-03-06", "end": "2024-03-10", "color": "green", "dependencies": [1], "completed": false}}
]}}"""


def build_messages(prompt: str, today: Optional[date] = None) -> List[Dict[str, str]]:
    today = today or date.today()
    return [
        {'role': 'system', 'content': SYSTEM_PROMPT.format(today=today.isoformat())},
        {'role': 'user', 'content': prompt},
    ]


def parse_completion(body: Any) -> List[Dict[str, Any]]:
    """Extract the task records from a chat-completions response body."""
    try:
        content = body['choices'][0]['message']['content']
    except (KeyError, IndexError, TypeError) as exc:
        raise AdapterError('The model response had an unexpected shape.') from exc
    try:
        result = json.loads(content)
    except (TypeError, ValueError) as exc:
        raise AdapterError('The model did not return valid JSON.') from exc
    if isinstance(result, dict):
        result = result.get('tasks')
    if not isinstance(result, list):
        raise AdapterError('The model response did not contain a task list.')
    return result


async def aiohttp_transport(url: str, headers: Dict[str, str], payload: Dict[str, Any],
                            timeout: float) -> Dict[str, Any]:
    """POST payload as JSON and return the decoded JSON body."""
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    try:
        async with aiohttp.ClientSession(timeout=client_timeout) as session:
            async with session.post(url, json=payload, headers=headers) as response:
                if response.status >= 400:
                    detail = await response.text()
                    raise AdapterError(f'Task generation failed (HTTP {response.status}): {detail[:200]}')
                return await response.json(content_type=None)
    except asyncio.TimeoutError as exc:
        raise AdapterError(f'Task generation timed out after {timeout:g}s.') from exc
    except aiohttp.ClientError as exc:
        raise AdapterError(f'Task generation failed: {exc}') from exc
    except ValueError as exc:
        raise AdapterError('The generation service returned invalid JSON.') from exc


class GenerationAdapter:
    def __init__(self, api_key: Optional[str], model: str, endpoint: str,
                 timeout: float = 60.0, transport: Optional[Transport] = None):
        self.api_key = api_key
        self.model = model
        self.endpoint = endpoint
        self.timeout = timeout
        self._transport = transport or aiohttp_transport

    @classmethod
    def from_settings(cls, settings) -> "GenerationAdapter":
        return cls(settings.api_key, settings.model, settings.api_url, settings.api_timeout)

    async def generate(self, prompt: str) -> List[Dict[str, Any]]:
        prompt = (prompt or '').strip()
        if not prompt:
            raise ValidationError('Please describe your project first.')
        if not self.api_key:
            raise AdapterError('OPENAI_API_KEY is not set; task generation is unavailable.')
        payload = {
            'model': self.model,
            'messages': build_messages(prompt),
            'response_format': {'type': 'json_object'},
        }
        headers = {'Authorization': f'Bearer {self.api_key}'}
        logger.info('Requesting task generation from %s (model %s)', self.endpoint, self.model)
        body = await self._transport(self.endpoint, headers, payload, self.timeout)
        records = parse_completion(body)
        logger.info('Model returned %d task record(s)', len(records))
        return records


@dataclass
class GenerationOutcome:
    accepted: bool
    task_count: int = 0
    warnings: List[str] = field(default_factory=list)


class GenerationController:
    def __init__(self, adapter: GenerationAdapter, store: TaskStore):
        self.adapter = adapter
        self.store = store
        self.busy: bool = False
        self._ids = itertools.count(1)
        self._current: Optional[int] = None

    def cancel(self) -> None:
        """Forget the in-flight request; its response will be discarded."""
        self._current = None
        self.busy = False

    async def run(self, prompt: str) -> GenerationOutcome:
        if self.busy:
            raise AdapterError('A generation request is already running.')
        request_id = next(self._ids)
        self._current = request_id
        self.busy = True
        try:
            records = await self.adapter.generate(prompt)
            if request_id != self._current:
                logger.info('Discarding stale generation response #%d', request_id)
                return GenerationOutcome(accepted=False)
            try:
                warnings = self.store.replace_all(records)
            except ValidationError as exc:
                raise AdapterError('The generated plan contained no usable tasks.') from exc
            return GenerationOutcome(accepted=True, task_count=len(self.store), warnings=warnings)
        finally:
            if request_id == self._current:
                self.busy = False
                self._current = None
