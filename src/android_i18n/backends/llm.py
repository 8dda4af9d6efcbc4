"""
OpenAI-compatible LLM backend.

Works with any chat completions endpoint that follows the OpenAI format
(OpenAI, DeepSeek, Gemini's OpenAI endpoint, local servers).
"""

import threading
from typing import Dict

from android_i18n.backends.base import TranslationBackend
from android_i18n.backends.http import post_json
from android_i18n.config import DEFAULT_PROMPT, DEFAULT_SYSTEM_MESSAGE
from android_i18n.exceptions import NetworkError
from android_i18n.language_codes import Language
from android_i18n.logger import get_logger

logger = get_logger(__name__)


def clean_completion(content: str) -> str:
    """Strip code fences and wrapping quotes some models add around a bare answer."""
    text = content.strip()
    if text.startswith("```"):
        lines = text.split("\n")[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'"):
        text = text[1:-1]
    return text


class LlmBackend(TranslationBackend):
    """Chat-completions backend; every catalog language is addressable by BCP 47 tag."""

    name = "llm"
    display_name = "OpenAI-compatible LLM"
    required_settings = ("api_key", "api_url", "model")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._usage_lock = threading.Lock()
        self.total_prompt_tokens = 0
        self.total_completion_tokens = 0

    def get_total_token_usage(self) -> Dict[str, int]:
        with self._usage_lock:
            return {
                'prompt_tokens': self.total_prompt_tokens,
                'completion_tokens': self.total_completion_tokens,
            }

    def _accumulate_tokens(self, usage: Dict[str, int]) -> None:
        with self._usage_lock:
            self.total_prompt_tokens += usage.get('prompt_tokens', 0) or 0
            self.total_completion_tokens += usage.get('completion_tokens', 0) or 0

    def build_prompt(self, text: str, source: Language, target: Language) -> str:
        template = self.settings.get("prompt") or DEFAULT_PROMPT
        return template.format(
            source_language_name=source.display_name,
            source_language_code=source.code_for(self.name),
            target_language_name=target.display_name,
            target_language_code=target.code_for(self.name),
            text=text,
        )

    def _translate(self, text: str, source: Language, target: Language) -> str:
        model = self.settings["model"]
        headers = {
            "Authorization": f"Bearer {self.settings['api_key']}",
            "Content-Type": "application/json"
        }
        body = {
            "model": model,
            "messages": [
                {"role": "system", "content": self.settings.get("system_message") or DEFAULT_SYSTEM_MESSAGE},
                {"role": "user", "content": self.build_prompt(text, source, target)},
            ],
        }

        logger.debug(f"  Calling LLM API (model: {model}) for {target.code}...")
        result = post_json(
            self.display_name,
            self.settings["api_url"],
            timeout=self.timeout,
            transport=self.transport,
            headers=headers,
            body=body,
        )

        if isinstance(result, dict):
            self._accumulate_tokens(result.get('usage') or {})

        try:
            content = result['choices'][0]['message'].get('content') or ''
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise NetworkError(f"Unexpected {self.display_name} response format") from e

        translated = clean_completion(content)
        if not translated:
            raise NetworkError(f"No content in {self.display_name} response")
        return translated
