"""Serialize an assembled document to JSON or YAML text."""

import json

import yaml


def dump_json(document: dict, indent: int = 2) -> str:
    return json.dumps(document, indent=indent, ensure_ascii=False) + "\n"


def dump_yaml(document: dict) -> str:
    """YAML text with keys kept in declaration order."""
    return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
