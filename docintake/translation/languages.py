"""Language code tables for the translation API."""

# Names used in user-facing messages
LANGUAGE_NAMES: dict[str, str] = {
    # Western European
    "es": "Spanish", "fr": "French", "de": "German", "it": "Italian", "pt": "Portuguese", "nl": "Dutch",
    # Central European
    "pl": "Polish", "cs": "Czech", "hu": "Hungarian", "ro": "Romanian", "sk": "Slovak", "sl": "Slovenian",
    "hr": "Croatian",
    # Nordic
    "sv": "Swedish", "da": "Danish", "fi": "Finnish", "no": "Norwegian", "is": "Icelandic",
    # Other Latin-script
    "tr": "Turkish", "id": "Indonesian", "ms": "Malay", "vi": "Vietnamese", "tl": "Tagalog",
    # East Asian
    "zh": "Chinese", "zh-CN": "Chinese (Simplified)", "zh-TW": "Chinese (Traditional)",
    "ja": "Japanese", "ko": "Korean",
    # South Asian
    "hi": "Hindi", "bn": "Bengali", "ta": "Tamil", "te": "Telugu", "mr": "Marathi", "ur": "Urdu",
    "gu": "Gujarati", "kn": "Kannada", "ml": "Malayalam", "pa": "Punjabi", "si": "Sinhala", "ne": "Nepali",
    # Middle Eastern
    "ar": "Arabic", "he": "Hebrew", "fa": "Persian",
    # Cyrillic
    "ru": "Russian", "uk": "Ukrainian", "bg": "Bulgarian", "sr": "Serbian", "be": "Belarusian",
    # Greek
    "el": "Greek",
    # Thai and Southeast Asian
    "th": "Thai", "km": "Khmer", "lo": "Lao", "my": "Burmese",
    # Additional
    "af": "Afrikaans", "sq": "Albanian", "am": "Amharic", "hy": "Armenian", "az": "Azerbaijani",
    "eu": "Basque", "bs": "Bosnian", "ca": "Catalan", "et": "Estonian", "ka": "Georgian",
    "kk": "Kazakh", "lv": "Latvian", "lt": "Lithuanian", "mk": "Macedonian", "mn": "Mongolian",
    "sw": "Swahili",
    "en": "English",
}

# Regional variants the translation API does not accept, mapped to the code it does
CANONICAL_CODES: dict[str, str] = {
    "zh-cn": "zh",
    "zh-tw": "zh",
    "zh-hk": "zh",
    "zh-hans": "zh",
    "zh-hant": "zh",
    "pt-br": "pt",
    "pt-pt": "pt",
    "es-419": "es",
    "es-mx": "es",
    "fr-ca": "fr",
    "en-us": "en",
    "en-gb": "en",
    "iw": "he",
}


_NAMES_BY_KEY = {code.lower(): name for code, name in LANGUAGE_NAMES.items()}


def _language_key(code: str) -> str:
    return code.strip().lower().replace("_", "-")


def normalize_language(code: str) -> str:
    """
    Collapse a regional variant to the code the translation API accepts.

    The result is always lower-case with '-' as separator; codes without a
    known variant mapping are otherwise passed through.
    """
    key = _language_key(code)
    return CANONICAL_CODES.get(key, key)


def language_name(code: str) -> str:
    """Human-readable name for a language code, falling back to the code itself."""
    key = _language_key(code)
    return _NAMES_BY_KEY.get(key) or _NAMES_BY_KEY.get(CANONICAL_CODES.get(key, key)) or code
