"""Conversion of parsed key entries into Lokalise request bodies."""
from typing import Any, Dict, List, Sequence

from lokalise_keys.key_file_parser import KeyEntry

DEFAULT_PLATFORMS = ["ios", "android", "web", "other"]


def build_translation_payload(entry: KeyEntry, language_iso: str) -> Dict[str, Any]:
    """Build the base-language translation object for one key."""
    if entry.is_plural:
        translation: Any = {
            "one": entry.translations.singular,
            "other": entry.translations.plural,
        }
    else:
        translation = entry.translation
    return {"language_iso": language_iso, "translation": translation}


def build_key_payload(
        entry: KeyEntry,
        language_iso: str,
        platforms: Sequence[str] = DEFAULT_PLATFORMS
) -> Dict[str, Any]:
    """
    Build the object Lokalise expects for a single key.

    Args:
        entry (KeyEntry): The parsed key.
        language_iso (str): ISO code of the project's base language.
        platforms (Sequence[str]): Platforms the key is enabled for.

    Returns:
        Dict[str, Any]: The key object for the ``keys`` array.
    """
    return {
        "key_name": entry.key,
        "platforms": list(platforms),
        "is_plural": entry.is_plural,
        "tags": list(entry.tags),
        "translations": [build_translation_payload(entry, language_iso)],
    }


def build_create_keys_body(
        batch: Sequence[KeyEntry],
        language_iso: str,
        platforms: Sequence[str] = DEFAULT_PLATFORMS
) -> Dict[str, List[Dict[str, Any]]]:
    """Build the JSON body of a bulk "create keys" request."""
    return {"keys": [build_key_payload(entry, language_iso, platforms) for entry in batch]}
