"""Reactive component test generator."""

from __future__ import annotations

from pathlib import Path

from ..analyzer.models import ComponentDescriptor, EventInfo
from .base import (
    ConfirmHook,
    GenerationOutcome,
    GeneratorBase,
    identifier,
    output_file,
    py_literal,
)
from .renderer import join_blocks

COMPONENT_TESTS_DIR = Path("feature") / "components"


class ComponentTestGenerator(GeneratorBase):

    def generate(
        self,
        descriptor: ComponentDescriptor,
        output_root: Path,
        force: bool = False,
        confirm: ConfirmHook | None = None,
    ) -> list[GenerationOutcome]:
        d = descriptor
        slug = identifier(d.short_name)
        subs = {
            "component_module": d.namespace,
            "component_class": d.short_name,
            "component_name": d.name,
            "component_slug": slug,
            "property_names": py_literal([p.name for p in d.properties]),
            "method_names": py_literal([m.name for m in d.methods]),
            "rule_fields": py_literal(list(d.validation_rules)),
            "listener_events": py_literal([listener.event for listener in d.listeners]),
            "event_tests": join_blocks(_event_test(slug, e) for e in d.events),
        }
        path = output_file(Path(output_root) / COMPONENT_TESTS_DIR, d.short_name)
        return [self.emit("component_test", subs, path, "component", force, confirm)]


def _event_test(slug: str, event: EventInfo) -> str:
    return "\n".join([
        f"def test_{slug}_{identifier(event.method)}_emits_{identifier(event.name)}(component):",
        "    emitted = _record_events(component)",
        "    try:",
        f"        component.{event.method}()",
        "    except TypeError:",
        f"        pytest.skip({event.method + ' needs arguments'!r})",
        f"    assert {event.name!r} in emitted",
    ])
