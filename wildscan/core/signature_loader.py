"""Signature set loading and validation for YAML-based wildscan signature files."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from wildscan.core.errors import PatternParseError, SignatureLoadError, SignatureValidationError
from wildscan.core.model import Signature, SignatureSet
from wildscan.core.pattern import parse_pattern

LOGGER = logging.getLogger(__name__)

# Bare tokens like 90, 0x10, on or 1e5 must stay strings; they are pattern text.
_STRING_ONLY_TAGS = frozenset(
    {
        "tag:yaml.org,2002:bool",
        "tag:yaml.org,2002:int",
        "tag:yaml.org,2002:float",
    }
)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag not in _STRING_ONLY_TAGS
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise SignatureValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedSignatureSets:
    sets: dict[str, SignatureSet]
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = (
        resources.files("wildscan")
        .joinpath("schemas", "signature_set.schema.json")
        .read_text(encoding="utf-8")
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _signature_dirs() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "wildscan/signatures", xdg_data / "wildscan/signatures"


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SignatureLoadError(f"Could not read signature file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise SignatureValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise SignatureValidationError(f"Signature file {path} must contain a mapping at root")
    return loaded


def _build_signature_set(doc: dict[str, Any], source: Path | Traversable) -> SignatureSet:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise SignatureValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    signatures: list[Signature] = []
    for name, text in doc["signatures"].items():
        try:
            pattern = parse_pattern(text)
        except PatternParseError as exc:
            raise SignatureValidationError(f"{doc['id']}.{name}: {exc}") from exc
        if pattern.is_all_wildcard:
            raise SignatureValidationError(f"{doc['id']}.{name} must contain at least one known byte")
        signatures.append(Signature(name=name, pattern=pattern))

    return SignatureSet(
        id=doc["id"],
        name=doc["name"],
        description=doc.get("description", ""),
        signatures=tuple(signatures),
    )


def _iter_packaged_signature_paths() -> list[Traversable]:
    signature_root = resources.files("wildscan").joinpath("signatures")
    return [item for item in signature_root.iterdir() if item.name.endswith((".yml", ".yaml"))]


def _iter_user_signature_paths() -> list[Path]:
    paths: list[Path] = []
    for directory in _signature_dirs():
        if not directory.exists() or not directory.is_dir():
            continue
        paths.extend(sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"}))
    return paths


def load_signature_sets() -> LoadedSignatureSets:
    sets: dict[str, SignatureSet] = {}
    warnings: list[str] = []

    for path in sorted(_iter_packaged_signature_paths(), key=lambda p: p.name):
        doc = _read_yaml(path)
        signature_set = _build_signature_set(doc, path)
        sets[signature_set.id] = signature_set

    for path in _iter_user_signature_paths():
        doc = _read_yaml(path)
        signature_set = _build_signature_set(doc, path)
        if signature_set.id in sets:
            warning = f"User signature set '{signature_set.id}' overrides packaged set"
            LOGGER.warning(warning)
            warnings.append(warning)
        sets[signature_set.id] = signature_set

    return LoadedSignatureSets(sets=sets, warnings=tuple(warnings))
