"""AI collaborator backed by the Anthropic Messages API."""

from __future__ import annotations

import json
import logging
import re

import anthropic
from anthropic import AsyncAnthropic
from pydantic import TypeAdapter, ValidationError

from bundle_blitz.core.exceptions import CollaboratorError
from bundle_blitz.models import ComponentMetadata, LintIssue

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
MAX_TOKENS = 4096

# Bundles are truncated before they go out; linting gets a tighter window.
ANALYSIS_CHAR_LIMIT = 100_000
LINT_CHAR_LIMIT = 50_000

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n(.*?)\n```\s*$", re.DOTALL)

_LINT_ADAPTER = TypeAdapter(list[LintIssue])
_COMPONENTS_ADAPTER = TypeAdapter(list[ComponentMetadata])

AUDIT_SYSTEM = (
    "You are an expert senior software engineer specializing in web security, code quality, "
    "and performance optimization. Provide concise, actionable, and harsh feedback."
)
AUDIT_PROMPT = """Analyze the provided JavaScript/TypeScript bundled code.

Output a report in Markdown with these sections:
### 1. Security Risks
### 2. Bad Practices & Anti-Patterns
### 3. Performance Optimizations
### 4. Style Guide & Consistency
### 5. Executive Summary (include an overall quality score 0-100)

Code to analyze:
```javascript
{code}
```
"""

LINT_SYSTEM = (
    "You are a strict code linter assistant. Identify syntax errors, logical bugs, potential runtime "
    "errors, code style violations, and bad practices in JavaScript/TypeScript code."
)
LINT_PROMPT = """Lint the following bundled JavaScript code.
Reply with a JSON array only. Each item: {{"line": int (optional, 1-based), "severity": "error"|"warning"|"info",
"message": str, "suggestion": str (optional)}}.

Code:
{code}
"""

REFACTOR_SYSTEM = "You are a senior engineer refactoring JavaScript bundles. Reply with the complete refactored code only."
REFACTOR_PROMPT = """Apply this instruction to the bundle below: {instruction}

Code:
{code}
"""

DISCOVER_SYSTEM = "You identify UI components and their props in JavaScript/React code."
DISCOVER_PROMPT = """List the components defined in the code below.
Reply with a JSON array only. Each item: {{"name": str, "description": str (optional), "props": [{{"name": str,
"type": str, "options": [str] (optional), "default_value": str (optional), "description": str (optional)}}]}}.

Code:
{code}
"""


def _truncate(code: str, limit: int) -> str:
    if len(code) > limit:
        return code[:limit] + "\n...[truncated]"
    return code


def _strip_fences(text: str) -> str:
    match = _FENCE_RE.match(text.strip())
    return match.group(1) if match else text.strip()


class AnthropicAiClient:
    def __init__(self, api_key: str | None = None, model: str = DEFAULT_MODEL) -> None:
        self._model = model
        self._client: AsyncAnthropic | None = AsyncAnthropic(api_key=api_key) if api_key else None

    async def _complete(self, system: str, prompt: str) -> str:
        if self._client is None:
            raise CollaboratorError("ANTHROPIC_API_KEY not configured in environment.")
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=MAX_TOKENS,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as exc:
            logger.warning("Anthropic request failed: %s", exc)
            raise CollaboratorError(f"AI request failed: {exc}") from exc
        return "".join(block.text for block in response.content if block.type == "text")

    async def analyze(self, bundle: str) -> str:
        return await self._complete(AUDIT_SYSTEM, AUDIT_PROMPT.format(code=_truncate(bundle, ANALYSIS_CHAR_LIMIT)))

    async def lint(self, bundle: str) -> list[LintIssue]:
        text = await self._complete(LINT_SYSTEM, LINT_PROMPT.format(code=_truncate(bundle, LINT_CHAR_LIMIT)))
        return parse_lint_issues(text)

    async def refactor(self, bundle: str, instruction: str) -> str:
        text = await self._complete(
            REFACTOR_SYSTEM,
            REFACTOR_PROMPT.format(instruction=instruction, code=_truncate(bundle, ANALYSIS_CHAR_LIMIT)),
        )
        return _strip_fences(text) if text.strip() else ""

    async def discover_components(self, bundle: str) -> list[ComponentMetadata]:
        text = await self._complete(DISCOVER_SYSTEM, DISCOVER_PROMPT.format(code=_truncate(bundle, ANALYSIS_CHAR_LIMIT)))
        return parse_components(text)


def parse_lint_issues(text: str) -> list[LintIssue]:
    """Parse a JSON lint reply. An empty reply means no issues."""
    body = _strip_fences(text)
    if not body:
        return []
    try:
        return _LINT_ADAPTER.validate_json(body)
    except (ValidationError, json.JSONDecodeError) as exc:
        raise CollaboratorError(f"Unreadable lint response: {exc.__class__.__name__}") from exc


def parse_components(text: str) -> list[ComponentMetadata]:
    body = _strip_fences(text)
    if not body:
        return []
    try:
        return _COMPONENTS_ADAPTER.validate_json(body)
    except (ValidationError, json.JSONDecodeError) as exc:
        raise CollaboratorError(f"Unreadable component response: {exc.__class__.__name__}") from exc
