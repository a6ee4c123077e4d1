"""
lokalise_keys - create localization keys in Lokalise from a YAML file.

Quick start:
    export LOKALISE_API_TOKEN=...
    lokalise-add-keys --project "My App" keys.yaml
"""

__version__ = "0.1.0"

from .errors import AuthError, LokaliseKeysError, ParseError, RemoteError
from .key_file_parser import KeyEntry, PluralTranslation, parse_key_document, parse_key_file
from .batching import MAX_KEYS_PER_REQUEST, split_into_batches

__all__ = [
    "AuthError",
    "LokaliseKeysError",
    "ParseError",
    "RemoteError",
    "KeyEntry",
    "PluralTranslation",
    "parse_key_document",
    "parse_key_file",
    "MAX_KEYS_PER_REQUEST",
    "split_into_batches",
]
