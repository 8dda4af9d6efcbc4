"""Google Cloud Translation (v2 REST) backend."""

import html

from android_i18n.backends.base import TranslationBackend
from android_i18n.backends.http import post_json
from android_i18n.exceptions import NetworkError
from android_i18n.language_codes import Language
from android_i18n.logger import get_logger

logger = get_logger(__name__)

DEFAULT_API_URL = "https://translation.googleapis.com/language/translate/v2"


class GoogleTranslateBackend(TranslationBackend):
    """Google Translate over the v2 REST API with an API key."""

    name = "google"
    display_name = "Google Translate"

    def _translate(self, text: str, source: Language, target: Language) -> str:
        api_url = self.settings.get("api_url") or DEFAULT_API_URL
        body = {
            "q": text,
            "source": source.code_for(self.name),
            "target": target.code_for(self.name),
            "format": "text",
        }

        logger.debug(f"Calling Google Translate: {body['source']} -> {body['target']}")
        result = post_json(
            "Google Translate",
            api_url,
            timeout=self.timeout,
            transport=self.transport,
            params={"key": self.settings["api_key"]},
            body=body,
        )

        try:
            translated = result["data"]["translations"][0]["translatedText"]
        except (KeyError, IndexError, TypeError) as e:
            raise NetworkError(f"Unexpected Google Translate response format: {result}") from e

        # format=text should come back unescaped, older keys still return entities
        return html.unescape(translated)
