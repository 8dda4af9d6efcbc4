"""
Language catalog and code mappings.

Android resource qualifiers differ from the codes translation engines expect:
- Android uses legacy ISO 639 codes and an "r" region prefix
  (values-iw, values-in, values-zh-rCN)
- Google Translate uses ISO 639-1 / BCP 47 tags (he, id, zh-CN)
- Microsoft Translator uses its own script tags (zh-Hans, zh-Hant)

Each Language records the code every engine needs. An engine supports a
language only if it has a code for it; anything else is silently excluded
from a run.

Resource directory naming convention:
- Source strings live in 'values/strings.xml'
- Language 'zh-rCN' maps to 'values-zh-rCN/strings.xml'
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional


@dataclass(frozen=True)
class Language:
    """One target language and its per-engine codes."""
    code: str
    display_name: str
    backend_codes: Dict[str, str] = field(default_factory=dict, compare=False, hash=False, repr=False)

    def code_for(self, engine: str) -> Optional[str]:
        """Engine-specific code, or None when the engine lacks this language."""
        return self.backend_codes.get(engine)

    @property
    def resource_dir(self) -> str:
        return f"values-{self.code}"


def _lang(code: str, name: str, google: Optional[str], microsoft: Optional[str], bcp47: str) -> Language:
    codes = {"llm": bcp47}
    if google:
        codes["google"] = google
    if microsoft:
        codes["microsoft"] = microsoft
    return Language(code=code, display_name=name, backend_codes=codes)


# (android qualifier, display name, google, microsoft, BCP 47)
_LANGUAGE_TABLE = [
    ('en', 'English', 'en', 'en', 'en'),
    ('af', 'Afrikaans', 'af', 'af', 'af'),
    ('sq', 'Albanian', 'sq', 'sq', 'sq'),
    ('ar', 'Arabic', 'ar', 'ar', 'ar'),
    ('hy', 'Armenian', 'hy', 'hy', 'hy'),
    ('az', 'Azerbaijani', 'az', 'az', 'az'),
    ('eu', 'Basque', 'eu', 'eu', 'eu'),
    ('be', 'Belarusian', 'be', None, 'be'),
    ('bn', 'Bengali', 'bn', 'bn', 'bn'),
    ('bs', 'Bosnian', 'bs', 'bs', 'bs'),
    ('bg', 'Bulgarian', 'bg', 'bg', 'bg'),
    ('ca', 'Catalan', 'ca', 'ca', 'ca'),
    ('zh-rCN', 'Chinese (Simplified)', 'zh-CN', 'zh-Hans', 'zh-CN'),
    ('zh-rTW', 'Chinese (Traditional)', 'zh-TW', 'zh-Hant', 'zh-TW'),
    ('hr', 'Croatian', 'hr', 'hr', 'hr'),
    ('cs', 'Czech', 'cs', 'cs', 'cs'),
    ('da', 'Danish', 'da', 'da', 'da'),
    ('nl', 'Dutch', 'nl', 'nl', 'nl'),
    ('eo', 'Esperanto', 'eo', None, 'eo'),
    ('et', 'Estonian', 'et', 'et', 'et'),
    ('tl', 'Filipino', 'tl', 'fil', 'fil'),
    ('fi', 'Finnish', 'fi', 'fi', 'fi'),
    ('fr', 'French', 'fr', 'fr', 'fr'),
    ('gl', 'Galician', 'gl', 'gl', 'gl'),
    ('ka', 'Georgian', 'ka', 'ka', 'ka'),
    ('de', 'German', 'de', 'de', 'de'),
    ('el', 'Greek', 'el', 'el', 'el'),
    ('gu', 'Gujarati', 'gu', 'gu', 'gu'),
    ('ht', 'Haitian Creole', 'ht', 'ht', 'ht'),
    ('iw', 'Hebrew', 'iw', 'he', 'he'),
    ('hi', 'Hindi', 'hi', 'hi', 'hi'),
    ('mww', 'Hmong Daw', None, 'mww', 'mww'),
    ('hu', 'Hungarian', 'hu', 'hu', 'hu'),
    ('is', 'Icelandic', 'is', 'is', 'is'),
    ('in', 'Indonesian', 'id', 'id', 'id'),
    ('ga', 'Irish', 'ga', 'ga', 'ga'),
    ('it', 'Italian', 'it', 'it', 'it'),
    ('ja', 'Japanese', 'ja', 'ja', 'ja'),
    ('kn', 'Kannada', 'kn', 'kn', 'kn'),
    ('km', 'Khmer', 'km', 'km', 'km'),
    ('ko', 'Korean', 'ko', 'ko', 'ko'),
    ('lo', 'Lao', 'lo', 'lo', 'lo'),
    ('la', 'Latin', 'la', None, 'la'),
    ('lv', 'Latvian', 'lv', 'lv', 'lv'),
    ('lt', 'Lithuanian', 'lt', 'lt', 'lt'),
    ('mk', 'Macedonian', 'mk', 'mk', 'mk'),
    ('ms', 'Malay', 'ms', 'ms', 'ms'),
    ('mt', 'Maltese', 'mt', 'mt', 'mt'),
    ('mr', 'Marathi', 'mr', 'mr', 'mr'),
    ('nb', 'Norwegian', 'no', 'nb', 'nb'),
    ('fa', 'Persian', 'fa', 'fa', 'fa'),
    ('pl', 'Polish', 'pl', 'pl', 'pl'),
    ('pt', 'Portuguese', 'pt', 'pt', 'pt'),
    ('pt-rBR', 'Portuguese (Brazil)', 'pt-BR', 'pt', 'pt-BR'),
    ('ro', 'Romanian', 'ro', 'ro', 'ro'),
    ('ru', 'Russian', 'ru', 'ru', 'ru'),
    ('sr', 'Serbian', 'sr', 'sr-Cyrl', 'sr'),
    ('sk', 'Slovak', 'sk', 'sk', 'sk'),
    ('sl', 'Slovenian', 'sl', 'sl', 'sl'),
    ('es', 'Spanish', 'es', 'es', 'es'),
    ('sw', 'Swahili', 'sw', 'sw', 'sw'),
    ('sv', 'Swedish', 'sv', 'sv', 'sv'),
    ('ta', 'Tamil', 'ta', 'ta', 'ta'),
    ('te', 'Telugu', 'te', 'te', 'te'),
    ('th', 'Thai', 'th', 'th', 'th'),
    ('tr', 'Turkish', 'tr', 'tr', 'tr'),
    ('uk', 'Ukrainian', 'uk', 'uk', 'uk'),
    ('ur', 'Urdu', 'ur', 'ur', 'ur'),
    ('vi', 'Vietnamese', 'vi', 'vi', 'vi'),
    ('cy', 'Welsh', 'cy', 'cy', 'cy'),
    ('yi', 'Yiddish', 'yi', None, 'yi'),
]

LANGUAGES: Dict[str, Language] = {
    row[0]: _lang(*row) for row in _LANGUAGE_TABLE
}

# Codes people type that Android spells differently
_ALIASES = {
    'he': 'iw',
    'id': 'in',
    'no': 'nb',
    'zh': 'zh-rCN',
    'zh-CN': 'zh-rCN',
    'zh-Hans': 'zh-rCN',
    'zh-TW': 'zh-rTW',
    'zh-Hant': 'zh-rTW',
    'pt-BR': 'pt-rBR',
    'fil': 'tl',
}


def normalize_language_code(code: str) -> str:
    """
    Map a user-supplied code onto an Android qualifier.

    Examples:
        >>> normalize_language_code('zh-CN')
        'zh-rCN'
        >>> normalize_language_code('he')
        'iw'
        >>> normalize_language_code('fr')
        'fr'
    """
    code = code.strip()
    return _ALIASES.get(code, code)


def get_language(code: str) -> Optional[Language]:
    """Look up a language by Android qualifier or common alias."""
    return LANGUAGES.get(normalize_language_code(code))


def languages_for_engine(engine: str) -> List[Language]:
    """Every language the named engine has a code for, in catalog order."""
    return [language for language in LANGUAGES.values() if language.code_for(engine)]


def filter_supported(languages: Iterable[Language], supported) -> List[Language]:
    """
    Keep the languages found in `supported`, preserving the requested order
    and dropping duplicates.
    """
    supported = set(supported)
    kept: List[Language] = []
    for language in languages:
        if language in supported and language not in kept:
            kept.append(language)
    return kept


def resolve_languages(codes: Iterable[str]) -> List[Language]:
    """
    Resolve codes to Language objects in order; unknown codes are skipped.

    Examples:
        >>> [l.code for l in resolve_languages(['fr', 'zh-CN', 'xx'])]
        ['fr', 'zh-rCN']
    """
    resolved: List[Language] = []
    for code in codes:
        if not isinstance(code, str) or not code.strip():
            continue
        language = get_language(code)
        if language and language not in resolved:
            resolved.append(language)
    return resolved


def extract_language_from_dir(dir_name: str) -> Optional[Language]:
    """
    Extract the language from a resource directory name.

    Examples:
        >>> extract_language_from_dir('values-fr').code
        'fr'
        >>> extract_language_from_dir('values') is None
        True
        >>> extract_language_from_dir('values-night') is None
        True
    """
    if not dir_name.startswith('values-'):
        return None
    return LANGUAGES.get(dir_name[len('values-'):])
