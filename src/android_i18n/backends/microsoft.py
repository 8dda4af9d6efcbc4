"""Microsoft Translator (v3) backend."""

from android_i18n.backends.base import TranslationBackend
from android_i18n.backends.http import post_json
from android_i18n.exceptions import NetworkError
from android_i18n.language_codes import Language
from android_i18n.logger import get_logger

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.cognitive.microsofttranslator.com/translate"
API_VERSION = "3.0"


class MicrosoftTranslatorBackend(TranslationBackend):
    """Microsoft Translator text API, formerly Bing Translator."""

    name = "microsoft"
    display_name = "Microsoft Translator"

    def _translate(self, text: str, source: Language, target: Language) -> str:
        api_url = self.settings.get("api_url") or DEFAULT_API_URL
        headers = {
            "Ocp-Apim-Subscription-Key": self.settings["api_key"],
            "Content-Type": "application/json",
        }
        region = self.settings.get("region")
        if region:
            headers["Ocp-Apim-Subscription-Region"] = region

        params = {
            "api-version": API_VERSION,
            "from": source.code_for(self.name),
            "to": target.code_for(self.name),
            "textType": "plain",
        }

        logger.debug(f"Calling Microsoft Translator: {params['from']} -> {params['to']}")
        result = post_json(
            "Microsoft Translator",
            api_url,
            timeout=self.timeout,
            transport=self.transport,
            params=params,
            headers=headers,
            body=[{"Text": text}],
        )

        try:
            return result[0]["translations"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise NetworkError(f"Unexpected Microsoft Translator response format: {result}") from e
