"""Parser for the YAML file that lists the keys to add."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import jsonschema
import yaml

from lokalise_keys.errors import ParseError


# Shape of the input document. Fields not listed here are ignored.
KEY_FILE_SCHEMA = {
    "type": "object",
    "required": ["keys"],
    "properties": {
        "keys": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["key"],
                "properties": {
                    "key": {"type": "string", "minLength": 1},
                    "translation": {"type": "string"},
                    "translations": {
                        "type": "object",
                        "required": ["singular", "plural"],
                        "properties": {
                            "singular": {"type": "string"},
                            "plural": {"type": "string"},
                        },
                    },
                    "tags": {
                        "type": "array",
                        "items": {"type": "string"},
                    },
                },
                "oneOf": [
                    {"required": ["translation"]},
                    {"required": ["translations"]},
                ],
            },
        }
    },
}


@dataclass
class PluralTranslation:
    singular: str
    plural: str


@dataclass
class KeyEntry:
    """A single key to create, with its base-language translation."""
    key: str
    translation: Optional[str] = None
    translations: Optional[PluralTranslation] = None
    tags: List[str] = field(default_factory=list)

    @property
    def is_plural(self) -> bool:
        return self.translations is not None


def _format_location(path) -> str:
    """Render a jsonschema error path like ``keys[2].translations``."""
    location = ""
    for part in path:
        if isinstance(part, int):
            location += f"[{part}]"
        elif location:
            location += f".{part}"
        else:
            location = str(part)
    return location or "document"


def _describe_schema_error(error: jsonschema.ValidationError) -> str:
    location = _format_location(error.absolute_path)
    if error.validator == "oneOf":
        return (f"{location}: a key entry must define exactly one of "
                f"'translation' or 'translations'")
    if not error.absolute_path and error.validator == "type":
        return "document: expected a mapping with a top-level 'keys' list"
    return f"{location}: {error.message}"


def _entry_from_mapping(raw_entry: Dict[str, Any]) -> KeyEntry:
    plural = raw_entry.get("translations")
    return KeyEntry(
        key=raw_entry["key"],
        translation=raw_entry.get("translation"),
        translations=PluralTranslation(plural["singular"], plural["plural"]) if plural is not None else None,
        tags=list(raw_entry.get("tags") or []),
    )


def parse_key_document(text: str) -> List[KeyEntry]:
    """
    Parse the content of a key file.

    Args:
        text (str): YAML document with a top-level ``keys`` list.

    Returns:
        List[KeyEntry]: One entry per item of ``keys``, in file order.

    Raises:
        ParseError: If the YAML is invalid or an entry has the wrong shape.
    """
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as yaml_exc:
        raise ParseError(f"Invalid YAML: {yaml_exc}") from yaml_exc

    validator = jsonschema.Draft7Validator(KEY_FILE_SCHEMA)
    errors = sorted(validator.iter_errors(document), key=lambda e: e.path)
    if errors:
        raise ParseError(_describe_schema_error(errors[0]))

    return [_entry_from_mapping(raw_entry) for raw_entry in document["keys"]]


def parse_key_file(file_path: str) -> List[KeyEntry]:
    """
    Read and parse a key file from disk.

    Args:
        file_path (str): Path to the YAML file.

    Returns:
        List[KeyEntry]: The parsed entries.
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as read_exc:
        raise ParseError(f"Could not read '{file_path}': {read_exc}") from read_exc

    try:
        return parse_key_document(content)
    except ParseError as parse_exc:
        raise ParseError(f"{file_path}: {parse_exc}") from parse_exc
