"""
Configuration loading for signing contexts

Loads the settings of a Context from a dict, a JSON string or a JSON file.
Key material values may be literal secrets, PEM text, or ``file://`` URIs.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..exceptions import ConfigError
from ..signing.dates import DEFAULT_CREATED_DRIFT, DEFAULT_EXPIRES_DRIFT

KeyMaterial = Union[str, List[str]]

_STRING_FIELDS = ('algorithm', 'hash_algorithm', 'signing_key_id', 'digest_hash_algorithm')
_INT_FIELDS = ('created_drift', 'expires_drift')


@dataclass
class ContextConfig:
    """Settings for a signing/verification context"""
    algorithm: str = 'hs2019'
    hash_algorithm: Optional[str] = None
    headers: Optional[List[str]] = None
    signing_key_id: Optional[str] = None
    digest_hash_algorithm: Optional[str] = None
    created: Union[int, str, None] = 'now'
    expires: Union[int, str, None] = 'none'
    created_drift: int = DEFAULT_CREATED_DRIFT
    expires_drift: int = DEFAULT_EXPIRES_DRIFT
    keys: Dict[str, KeyMaterial] = field(default_factory=dict)
    allowed_digests: Optional[List[str]] = None
    enforce_dates: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContextConfig':
        """
        Build configuration from a plain dict.

        Raises:
            ConfigError: For unknown keys or values of the wrong type
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object", "INVALID_FORMAT")
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}", "UNKNOWN_KEYS", {"keys": unknown})

        for name in _STRING_FIELDS:
            if data.get(name) is not None and not isinstance(data[name], str):
                raise ConfigError(f"'{name}' must be a string", "INVALID_VALUE", {"field": name})
        for name in _INT_FIELDS:
            if name in data and (isinstance(data[name], bool) or not isinstance(data[name], int)):
                raise ConfigError(f"'{name}' must be an integer", "INVALID_VALUE", {"field": name})
        for name in ('created', 'expires'):
            value = data.get(name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, (int, str))):
                raise ConfigError(f"'{name}' must be an integer or an offset string", "INVALID_VALUE", {"field": name})
        if 'enforce_dates' in data and not isinstance(data['enforce_dates'], bool):
            raise ConfigError("'enforce_dates' must be a boolean", "INVALID_VALUE", {"field": 'enforce_dates'})

        headers = data.get('headers')
        if isinstance(headers, str):
            data = dict(data, headers=headers.split())
        elif headers is not None and not _is_string_list(headers):
            raise ConfigError("'headers' must be a string or a list of strings", "INVALID_VALUE", {"field": 'headers'})

        allowed_digests = data.get('allowed_digests')
        if allowed_digests is not None and not _is_string_list(allowed_digests):
            raise ConfigError("'allowed_digests' must be a list of strings", "INVALID_VALUE", {"field": 'allowed_digests'})

        keys = data.get('keys', {})
        if not isinstance(keys, dict):
            raise ConfigError("'keys' must be an object of key id to key material", "INVALID_VALUE", {"field": 'keys'})
        for key_id, material in keys.items():
            if not isinstance(material, str) and not _is_string_list(material):
                raise ConfigError(
                    f"Key material for '{key_id}' must be a string or a list of strings",
                    "INVALID_VALUE",
                    {"field": 'keys', "key_id": key_id}
                )

        return cls(**data)

    @classmethod
    def from_json(cls, json_string: str) -> 'ContextConfig':
        """Load configuration from a JSON string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse configuration JSON: {e}", "PARSE_ERROR") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'ContextConfig':
        """Load configuration from a JSON file"""
        try:
            path = Path(file_path)
            with open(path, 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ConfigError(f"Failed to read configuration file: {e}", "FILE_ERROR") from e
        return cls.from_json(json_string)


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)
