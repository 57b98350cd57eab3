"""Controller test generators (HTML and API flavours)."""

from __future__ import annotations

import re
from pathlib import Path

from ..analyzer.models import ControllerDescriptor, RouteInfo
from .base import (
    ConfirmHook,
    GenerationOutcome,
    GeneratorBase,
    identifier,
    output_file,
    py_literal,
)
from .renderer import join_blocks

CONTROLLER_TESTS_DIR = Path("feature") / "controllers"

_ROUTE_PARAMETER = re.compile(r"\{[^}]+\}")
_BODY_VERBS = frozenset({"POST", "PUT", "PATCH"})


def sample_uri(uri: str) -> str:
    """Fill route parameters with a sample value: /users/{id} -> /users/1."""
    return _ROUTE_PARAMETER.sub("1", uri)


class ControllerTestGenerator(GeneratorBase):
    """One test per route and verb, plus a check for unrouted actions."""

    stub = "controller_test"
    role = "controller"

    def generate(
        self,
        descriptor: ControllerDescriptor,
        output_root: Path,
        force: bool = False,
        confirm: ConfirmHook | None = None,
    ) -> list[GenerationOutcome]:
        path = output_file(Path(output_root) / CONTROLLER_TESTS_DIR, descriptor.short_name)
        return [self.emit(self.stub, self._substitutions(descriptor), path, self.role, force, confirm)]

    def _substitutions(self, d: ControllerDescriptor) -> dict[str, str]:
        slug = identifier(d.short_name)
        routed = {route.action for route in d.routes}
        blocks = self._route_tests(slug, d.routes)
        blocks.extend(
            _unrouted_test(slug, d.short_name, m.name) for m in d.methods if m.name not in routed
        )
        return {
            "controller_module": d.namespace,
            "controller_class": d.short_name,
            "controller_slug": slug,
            "model": d.model or "none",
            "resourceful": "yes" if d.is_resourceful else "no",
            "middleware": ", ".join(d.middleware) or "none",
            "action_names": py_literal([m.name for m in d.methods]),
            "route_tests": join_blocks(blocks),
        }

    def _route_tests(self, slug: str, routes: tuple[RouteInfo, ...]) -> list[str]:
        blocks, seen = [], set()
        for route in routes:
            for verb in route.methods:
                if verb == "HEAD":
                    continue
                name = f"test_{slug}_{identifier(route.action)}_{verb.lower()}"
                # Same action and verb on several URIs
                unique, n = name, 2
                while unique in seen:
                    unique, n = f"{name}_{n}", n + 1
                seen.add(unique)
                blocks.append(self.route_test(unique, verb, sample_uri(route.uri)))
        return blocks

    def route_test(self, name: str, verb: str, uri: str) -> str:
        payload = ", data={}" if verb in _BODY_VERBS else ""
        return "\n".join([
            f"def {name}(client):",
            f"    response = client.{verb.lower()}({uri!r}{payload})",
            "    assert response.status_code < 500",
        ])


class ApiControllerTestGenerator(ControllerTestGenerator):
    """Like ControllerTestGenerator, but requests and expects JSON."""

    stub = "api_controller_test"
    role = "api_controller"

    def route_test(self, name: str, verb: str, uri: str) -> str:
        payload = ", json={}" if verb in _BODY_VERBS else ""
        return "\n".join([
            f"def {name}(client):",
            f"    response = client.{verb.lower()}({uri!r}{payload}, headers=JSON_HEADERS)",
            "    assert response.status_code < 500",
            "    if response.status_code != 204:",
            "        assert _is_json(response)",
        ])


def _unrouted_test(slug: str, controller_class: str, method: str) -> str:
    return "\n".join([
        f"def test_{slug}_{identifier(method)}_is_callable():",
        f"    assert callable(getattr({controller_class}, {method!r}))",
    ])


def generator_for(descriptor: ControllerDescriptor, **kwargs) -> ControllerTestGenerator:
    """Pick the API generator for API controllers, the plain one otherwise."""
    if descriptor.is_api:
        return ApiControllerTestGenerator(**kwargs)
    return ControllerTestGenerator(**kwargs)
