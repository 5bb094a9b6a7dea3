from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, Field

from .registry import registry

# Ensure built-in rules are imported/registered when generating a catalog.
from . import rules as _builtin_rules  # noqa: F401


class RuleCatalogEntry(BaseModel):
    name: str
    description: str = ""
    granularity: str
    unique_key_prefix: str = ""
    helper: str = ""

    module: str
    class_name: str

    labels: List[str] = Field(default_factory=list)
    defaults: Dict[str, str] = Field(default_factory=dict)


def build_catalog() -> List[RuleCatalogEntry]:
    entries: List[RuleCatalogEntry] = []
    for name in registry.ids():
        rule_cls = registry.get(name)
        definition = rule_cls.definition
        entries.append(
            RuleCatalogEntry(
                name=definition.name,
                description=definition.description,
                granularity=definition.granularity.value,
                unique_key_prefix=definition.unique_key_prefix,
                helper=definition.helper,
                module=getattr(rule_cls, "__module__", ""),
                class_name=getattr(rule_cls, "__name__", ""),
                labels=definition.labels(),
                defaults={
                    definition.params[key].label: value
                    for key, value in (definition.defaults or {}).items()
                    if key in definition.params
                },
            )
        )

    entries.sort(key=lambda e: e.name)
    return entries


def _dump_json(catalog: list[dict[str, Any]]) -> str:
    return json.dumps(catalog, indent=2, sort_keys=True)


def _dump_yaml(catalog: list[dict[str, Any]]) -> str:
    return yaml.safe_dump(catalog, sort_keys=True)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a rules catalog from the registry.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    args = parser.parse_args(argv)

    catalog = [e.model_dump() for e in build_catalog()]
    if args.format == "json":
        print(_dump_json(catalog))
    else:
        print(_dump_yaml(catalog))


if __name__ == "__main__":
    main()
