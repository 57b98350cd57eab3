"""Model test generator."""

from __future__ import annotations

import logging
from pathlib import Path

from ...constants import DEFAULT_KEY_TYPE, DEFAULT_MODELS_PACKAGE
from ..analyzer.models import ModelDescriptor, RelationshipInfo, ScopeInfo, TableDescriptor
from .base import (
    ConfirmHook,
    GenerationOutcome,
    GeneratorBase,
    identifier,
    output_file,
    py_literal,
)
from .renderer import join_blocks

logger = logging.getLogger(__name__)

MODEL_TESTS_DIR = Path("unit") / "models"


class ModelTestGenerator(GeneratorBase):
    """
    Writes the model test file plus relationship, scope and validation
    siblings, each only when the model has something for it to cover.
    """

    def generate(
        self,
        descriptor: ModelDescriptor,
        output_root: Path,
        force: bool = False,
        confirm: ConfirmHook | None = None,
    ) -> list[GenerationOutcome]:
        directory = Path(output_root) / MODEL_TESTS_DIR
        subs = self._substitutions(descriptor)
        name = descriptor.short_name

        outcomes = [
            self.emit("model_test", subs, output_file(directory, name), "model", force, confirm)
        ]

        if descriptor.relationships:
            subs_rel = {
                **subs,
                "relationship_names": py_literal([r.name for r in descriptor.relationships]),
                "relationship_tests": join_blocks(
                    _relationship_test(subs["model_slug"], r) for r in descriptor.relationships
                ),
            }
            outcomes.append(self.emit(
                "model_relationships_test", subs_rel,
                output_file(directory, name, "relationships"), "model_relationships",
                force, confirm,
            ))

        if descriptor.scopes:
            subs_scope = {
                **subs,
                "scope_methods": py_literal([s.method for s in descriptor.scopes]),
                "scope_tests": join_blocks(
                    _scope_test(subs["model_slug"], s) for s in descriptor.scopes
                ),
            }
            outcomes.append(self.emit(
                "model_scopes_test", subs_scope,
                output_file(directory, name, "scopes"), "model_scopes",
                force, confirm,
            ))

        if descriptor.validation_rules:
            subs_rules = {
                **subs,
                "validation_rules": py_literal(descriptor.validation_rules),
                "validation_tests": join_blocks(
                    _validation_test(subs["model_slug"], field_name, rule)
                    for field_name, rule in descriptor.validation_rules.items()
                ),
            }
            outcomes.append(self.emit(
                "model_validation_test", subs_rules,
                output_file(directory, name, "validation"), "model_validation",
                force, confirm,
            ))

        return outcomes

    def generate_from_table(
        self,
        table: TableDescriptor,
        output_root: Path,
        force: bool = False,
        confirm: ConfirmHook | None = None,
        namespace: str = DEFAULT_MODELS_PACKAGE,
    ) -> list[GenerationOutcome]:
        """Generate model tests for the model a table is expected to back."""
        logger.info(f"Generating model tests for table {table.table} as {table.model_name}")
        return self.generate(model_from_table(table, namespace), output_root, force, confirm)

    def _substitutions(self, d: ModelDescriptor) -> dict[str, str]:
        factory = f"{d.short_name}.factory()" if d.has_factory else f"{d.short_name}()"
        # The primary key cast is implied by incrementing keys, not declared
        casts = {k: v for k, v in d.casts.items() if k != d.primary_key}
        return {
            "model_module": d.namespace,
            "model_class": d.short_name,
            "model_slug": identifier(d.short_name),
            "model_instance": factory,
            "table_name": d.table,
            "primary_key": d.primary_key,
            "incrementing": str(d.incrementing),
            "timestamps": str(d.timestamps),
            "fillable": py_literal(d.fillable),
            "hidden": py_literal(d.hidden),
            "casts": py_literal(casts),
            "mixins": py_literal([m.name for m in d.mixins]),
        }


def model_from_table(table: TableDescriptor, namespace: str = DEFAULT_MODELS_PACKAGE) -> ModelDescriptor:
    """Build the descriptor of the model a table implies."""
    primary_key = table.primary_key[0] if table.primary_key else "id"
    return ModelDescriptor(
        qualified_name=f"{namespace}.{table.model_name}",
        short_name=table.model_name,
        namespace=namespace,
        table=table.table,
        primary_key=primary_key,
        incrementing=True,
        key_type=DEFAULT_KEY_TYPE,
        timestamps=table.has_timestamps,
        fillable=tuple(table.column_names),
    )


# =============================================================================
# Fragments
# =============================================================================

def _relationship_test(slug: str, relation: RelationshipInfo) -> str:
    lines = [
        f"def test_{slug}_{identifier(relation.name)}_relationship(model):",
        f"    relation = model.{relation.name}()",
        f"    assert type(relation).__name__ == {relation.kind!r}",
    ]
    if relation.related:
        lines.append(f"    assert _related(relation) == {relation.related!r}")
    return "\n".join(lines)


def _scope_test(slug: str, scope: ScopeInfo) -> str:
    expected = [p.name for p in scope.parameters]
    return "\n".join([
        f"def test_{slug}_scope_{identifier(scope.name)}_parameters():",
        f"    assert _scope_parameters({scope.method!r}) == {expected!r}",
    ])


def _validation_test(slug: str, field_name: str, rule: str) -> str:
    return "\n".join([
        f"def test_{slug}_{identifier(field_name)}_rules():",
        f"    assert _rule_parts({field_name!r}) == {rule.split('|')!r}",
    ])
