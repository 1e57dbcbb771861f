"""User-facing messages returned in the `error` and `fallback` fields."""

MESSAGES: dict[str, dict[str, str]] = {
    "fr": {
        "missing_audio": "Aucun fichier audio fourni",
        "too_large": "Fichier trop volumineux ({size_mb}MB). Maximum: {limit_mb}MB",
        "too_large_upstream": "Fichier audio trop volumineux",
        "unsupported_format": "Format audio non supporté ou fichier corrompu",
        "invalid_model": "Modèle inconnu '{model}' (valeurs acceptées: flash, pro)",
        "timeout": "Timeout: le fichier audio est trop long à traiter",
        "quota": "Quota API dépassé, réessayez plus tard",
        "transient": "Le service de rédaction est momentanément indisponible, réessayez dans quelques instants",
        "failed": "Erreur lors de la rédaction",
        "empty_response": "Réponse vide du modèle",
        "fallback": "Quota atteint pour Pro, fallback automatique sur Flash",
    },
    "en": {
        "missing_audio": "No audio file provided",
        "too_large": "File too large ({size_mb}MB). Maximum: {limit_mb}MB",
        "too_large_upstream": "Audio file too large",
        "unsupported_format": "Unsupported audio format or corrupt file",
        "invalid_model": "Unknown model '{model}' (accepted values: flash, pro)",
        "timeout": "Timeout: the audio took too long to process",
        "quota": "API quota exceeded, please retry later",
        "transient": "The drafting service is temporarily unavailable, please retry shortly",
        "failed": "Drafting failed",
        "empty_response": "Empty model response",
        "fallback": "Pro quota reached, automatically fell back to Flash",
    },
}

DEFAULT_LOCALE = "fr"


def get_message(key: str, locale: str = DEFAULT_LOCALE, **params) -> str:
    catalog = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])
    template = catalog.get(key) or MESSAGES[DEFAULT_LOCALE][key]
    return template.format(**params) if params else template
