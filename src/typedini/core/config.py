from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from typedini.core.coercion import choices_coercion
from typedini.core.errors import SchemaError
from typedini.core.models import FieldKind, FieldSpec, ParserOptions, SchemaDocument
from typedini.core.schema import Parser, Section

# Python 3.11+ has tomllib; for 3.9/3.10 use tomli
try:
    import tomllib  # type: ignore
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore


# Schema files looked up from the working directory upwards
DEFAULT_SCHEMA_FILES = (
    ".typedini/schema.yaml",
    ".typedini/schema.yml",
    ".typedini/schema.toml",
)


def _read_document(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".toml":
        data = tomllib.loads(text)
    else:
        data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SchemaError(f"{path}: schema document must be a mapping")
    return data


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep-merge override into base (dict-only). Lists/scalars are replaced.
    """
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)  # type: ignore[arg-type]
        else:
            out[k] = v
    return out


def find_schema_file(start_dir: Path) -> Optional[Path]:
    """
    Walk upward to find a schema file.
    Finds the closest one in the parent chain.
    """
    cur = start_dir.resolve()
    for parent in [cur, *cur.parents]:
        for rel in DEFAULT_SCHEMA_FILES:
            p = (parent / rel).resolve()
            if p.exists() and p.is_file():
                return p
    return None


def load_schema_document(path: Path) -> SchemaDocument:
    try:
        data = _read_document(path)
    except (OSError, UnicodeDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        raise SchemaError(f"{path}: cannot read schema: {e}") from e
    try:
        return SchemaDocument.model_validate(data)
    except ValidationError as e:
        raise SchemaError(f"{path}: invalid schema: {e}") from e


def _add_spec_field(section: Section, name: str, spec: FieldSpec) -> None:
    ty = spec.type.field_type
    default = spec.default

    if spec.choices:
        section.add(
            name,
            ty,
            spec.choices[0] if default is None else default,
            choices_coercion(tuple(spec.choices)),
        )
        return

    # YAML/TOML give ints for whole floats
    if spec.type == FieldKind.FLOAT64 and isinstance(default, int) and not isinstance(default, bool):
        default = float(default)
    if spec.type == FieldKind.FLOAT64_LIST and isinstance(default, list):
        default = [float(x) if isinstance(x, int) and not isinstance(x, bool) else x for x in default]

    adders = {
        FieldKind.STRING: section.add_string,
        FieldKind.BOOL: section.add_bool,
        FieldKind.INT64: section.add_int64,
        FieldKind.UINT64: section.add_uint64,
        FieldKind.FLOAT64: section.add_float64,
        FieldKind.STRING_LIST: section.add_string_list,
        FieldKind.FLOAT64_LIST: section.add_float64_list,
    }
    adders[spec.type](name, default)


def build_parser(
    doc: SchemaDocument,
    option_overrides: Optional[Dict[str, Any]] = None,
) -> Parser:
    """
    Precedence for options (lowest -> highest):
      defaults (ParserOptions) ->
      schema document `options` ->
      option_overrides
    """
    merged = _deep_merge(doc.options, option_overrides or {})
    try:
        options = ParserOptions.model_validate(merged)
    except ValidationError as e:
        raise SchemaError(f"invalid parser options: {e}") from e

    parser = Parser(
        comment_char=options.comment_char,
        quote_char=options.quote_char,
        expand_vars=options.expand_vars,
    )
    for section_name, fields in doc.sections.items():
        section = parser.add_section(section_name)
        for field_name, spec in fields.items():
            _add_spec_field(section, field_name, spec)
    return parser


@dataclass(frozen=True)
class LoadedSchema:
    parser: Parser
    document: SchemaDocument
    path: Path


def load_parser(
    path: Path,
    option_overrides: Optional[Dict[str, Any]] = None,
) -> LoadedSchema:
    doc = load_schema_document(path)
    return LoadedSchema(
        parser=build_parser(doc, option_overrides),
        document=doc,
        path=path,
    )
