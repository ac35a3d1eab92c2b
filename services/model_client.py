# services/model_client.py
"""
Client for the hosted generative model.

Every content feature goes through this module: a prompt plus behavioral
instructions go in, free text or a schema-validated value comes out. Any
failure (transport, API rejection, empty or malformed output) is raised as
ModelServiceError with a message that can be shown to the user as-is.
"""
import json
import logging
import re
import threading
from typing import Any, List, Optional, Tuple

import anthropic
from pydantic import BaseModel, TypeAdapter, ValidationError

from config import Config

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


class ModelServiceError(Exception):
    """A failure talking to the model, carrying a user-facing message."""
    status_code = 502

    def __init__(self, message):
        super().__init__(message)
        self.message = message


def _as_adapter(schema):
    if isinstance(schema, TypeAdapter):
        return schema
    return TypeAdapter(schema)


def schema_instruction(schema) -> str:
    """Describe the expected reply shape for the system instructions."""
    json_schema = _as_adapter(schema).json_schema()
    return (
        "Respond ONLY with JSON that conforms to this JSON schema. "
        "Do not wrap it in prose.\n"
        f"{json.dumps(json_schema, ensure_ascii=False)}"
    )


def parse_json_response(raw_text: str) -> Any:
    """Parse a JSON reply, tolerating markdown fences and leading prose."""
    text = (raw_text or '').strip()
    if not text:
        raise ValueError("empty response")

    # The response might be wrapped in ```json ... ```
    fenced = _FENCE_RE.search(text)
    if fenced:
        text = fenced.group(1).strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # Fall back to the first JSON object or array in the reply
    starts = [i for i in (text.find('{'), text.find('[')) if i != -1]
    if not starts:
        raise ValueError("no JSON value in response")
    value, _ = json.JSONDecoder().raw_decode(text[min(starts):])
    return value


def _block_attr(block, name, default=None):
    if isinstance(block, dict):
        return block.get(name, default)
    return getattr(block, name, default)


def extract_text(message) -> str:
    """Join the text blocks of a Messages API response."""
    parts = []
    for block in _block_attr(message, 'content', None) or []:
        if _block_attr(block, 'type') == 'text':
            parts.append(_block_attr(block, 'text', '') or '')
    return ''.join(parts).strip()


def extract_sources(message) -> List[Tuple[str, str]]:
    """Collect (uri, title) pairs from web search results and citations."""
    sources = []
    seen = set()

    def add(uri, title):
        if uri and title and uri not in seen:
            seen.add(uri)
            sources.append((uri, title))

    for block in _block_attr(message, 'content', None) or []:
        block_type = _block_attr(block, 'type')
        if block_type == 'web_search_tool_result':
            results = _block_attr(block, 'content', None)
            # An error result is a single object, not a list
            if isinstance(results, list):
                for result in results:
                    add(_block_attr(result, 'url'), _block_attr(result, 'title'))
        elif block_type == 'text':
            for citation in _block_attr(block, 'citations', None) or []:
                add(_block_attr(citation, 'url'), _block_attr(citation, 'title'))
    return sources


class ModelClient:
    """Thin wrapper over the Anthropic Messages API."""

    def __init__(self, api_key=None, model=None, max_tokens=None, timeout=None,
                 max_retries=None, web_search=None):
        self.api_key = api_key if api_key is not None else Config.ANTHROPIC_API_KEY
        self.model = model or Config.MODEL_NAME
        self.max_tokens = max_tokens or Config.MODEL_MAX_TOKENS
        self.timeout = timeout or Config.MODEL_TIMEOUT
        self.max_retries = Config.MODEL_MAX_RETRIES if max_retries is None else max_retries
        self.web_search = Config.MIRACLE_WEB_SEARCH if web_search is None else web_search
        # Defer initialization to first access
        self._client = None
        self._client_lock = threading.Lock()

    @property
    def client(self):
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    if not self.api_key:
                        logger.error("Anthropic API key not found in environment variables.")
                        raise ModelServiceError("The AI service is not configured.")
                    logger.info(f"Initializing Anthropic client for model {self.model}")
                    self._client = anthropic.Anthropic(
                        api_key=self.api_key,
                        timeout=self.timeout,
                        max_retries=self.max_retries,
                    )
        return self._client

    def _create(self, prompt, system, max_tokens=None, temperature=None, tools=None):
        kwargs = {
            'model': self.model,
            'max_tokens': max_tokens or self.max_tokens,
            'system': system,
            'messages': [{'role': 'user', 'content': prompt}],
        }
        if temperature is not None:
            kwargs['temperature'] = temperature
        if tools:
            kwargs['tools'] = tools

        logger.info(f"Sending prompt to Anthropic ({len(prompt)} chars)")
        try:
            return self.client.messages.create(**kwargs)
        except anthropic.APIStatusError as api_err:
            logger.error(f"Anthropic API error {api_err.status_code}: {api_err}", exc_info=True)
            if api_err.status_code == 529:
                raise ModelServiceError("The AI service is currently overloaded. Please try again in a few minutes.")
            raise ModelServiceError("AI service communication error.")
        except anthropic.APIError as api_err:
            logger.error(f"Anthropic API error: {api_err}", exc_info=True)
            raise ModelServiceError("AI service communication error.")

    def generate_text(self, prompt: str, system: str, max_tokens: Optional[int] = None,
                      temperature: Optional[float] = None) -> str:
        message = self._create(prompt, system, max_tokens=max_tokens, temperature=temperature)
        text = extract_text(message)
        if not text:
            logger.warning("Model returned an empty text response")
            raise ModelServiceError("The AI service returned an empty response.")
        return text

    def generate_json(self, prompt: str, system: str, schema, max_tokens: Optional[int] = None,
                      temperature: Optional[float] = 0.0):
        """Run the prompt and validate the JSON reply against `schema`.

        `schema` is a pydantic model class, a typing construct such as
        List[Model], or a ready TypeAdapter.
        """
        adapter = _as_adapter(schema)
        full_system = f"{system}\n\n{schema_instruction(adapter)}"
        message = self._create(prompt, full_system, max_tokens=max_tokens, temperature=temperature)
        raw_text = extract_text(message)
        logger.debug(f"Raw model response: {raw_text}")

        try:
            data = parse_json_response(raw_text)
            return adapter.validate_python(data)
        except (ValueError, ValidationError) as parse_err:
            logger.error(f"Failed to parse model response: {raw_text[:500]}. Error: {parse_err}")
            raise ModelServiceError("Failed to process AI response.")

    def research(self, prompt: str, system: str, max_searches: Optional[int] = None,
                 max_tokens: Optional[int] = None) -> Tuple[str, List[Tuple[str, str]]]:
        """Answer a prompt grounded in web search results."""
        tools = None
        if self.web_search:
            tools = [{
                'type': 'web_search_20250305',
                'name': 'web_search',
                'max_uses': max_searches or Config.MIRACLE_MAX_SEARCHES,
            }]
        message = self._create(prompt, system, max_tokens=max_tokens, tools=tools)
        text = extract_text(message)
        sources = extract_sources(message) if self.web_search else []
        logger.info(f"Research response: {len(text)} chars, {len(sources)} sources")
        return text, sources


# --- Shared client instance ---
_model_client_instance = None


def get_model_client():
    """Get the shared ModelClient, creating it on first use."""
    global _model_client_instance
    if _model_client_instance is None:
        _model_client_instance = ModelClient()
    return _model_client_instance


def set_model_client(client):
    """Replace the shared client (used by the app factory and tests)."""
    global _model_client_instance
    _model_client_instance = client
