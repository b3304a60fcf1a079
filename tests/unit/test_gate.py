# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Unit tests for the readiness gate."""

import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from platform_lifecycle.registry import (
    ComponentRegistry,
    are_dependencies_met,
    check_dependencies,
    override_catalog_source,
    unready_dependencies,
)
from tests.fixtures.fakes import make_component


@pytest.fixture
def platform():
    """Ingress ready, mesh not ready, app depending on both."""
    ingress = make_component('Ingress', ready=True)
    mesh = make_component('Mesh', ready=False)
    app = make_component('App', 'Ingress', 'Mesh')
    reg = ComponentRegistry(lambda: [ingress, mesh, app], allow_shared_dependencies=False)
    return reg, ingress, mesh, app


@pytest.mark.fast
class TestGate:

    def test_no_dependencies_always_met(self, ctx, info_logs):
        lonely = make_component('lonely', ready=False)
        reg = ComponentRegistry(lambda: [lonely])

        assert are_dependencies_met(lonely, ctx, reg)
        assert "No dependencies declared for lonely" in info_logs.text

    def test_one_unready_dependency_blocks(self, ctx, platform, info_logs):
        reg, _, _, app = platform

        assert not are_dependencies_met(app, ctx, reg)
        assert check_dependencies(app, ctx, reg) == {'Ingress': True, 'Mesh': False}
        assert "Dependencies not ready for App: Mesh" in info_logs.text

    def test_all_ready_passes(self, ctx, platform):
        reg, _, mesh, app = platform
        mesh.ready = True
        assert are_dependencies_met(app, ctx, reg)

    def test_transitive_unready_blocks(self, ctx):
        deep = make_component('deep', ready=False)
        mid = make_component('mid', 'deep')
        top = make_component('top', 'mid')
        reg = ComponentRegistry(lambda: [deep, mid, top])

        assert not are_dependencies_met(top, ctx, reg)

    def test_reevaluated_on_every_call(self, ctx, platform):
        reg, _, mesh, app = platform
        assert not are_dependencies_met(app, ctx, reg)
        mesh.ready = True
        assert are_dependencies_met(app, ctx, reg)
        mesh.ready = False
        assert not are_dependencies_met(app, ctx, reg)

    def test_cycle_fails_closed_and_logs(self, ctx, caplog):
        x = make_component('X', 'Y', ready=True)
        y = make_component('Y', 'X', ready=True)
        reg = ComponentRegistry(lambda: [x, y])

        with caplog.at_level(logging.ERROR):
            assert not are_dependencies_met(x, ctx, reg)

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert errors
        assert "dependency cycle found" in errors[0].getMessage()

    def test_missing_dependency_fails_closed(self, ctx, caplog):
        app = make_component('app', 'ready-dep', 'ghost')
        ready_dep = make_component('ready-dep', ready=True)
        reg = ComponentRegistry(lambda: [app, ready_dep])

        with caplog.at_level(logging.ERROR):
            assert not are_dependencies_met(app, ctx, reg)
        assert "declared dependency not found for app: ghost" in caplog.text

    def test_structural_error_does_not_affect_other_components(self, ctx):
        broken = make_component('broken', 'ghost')
        fine = make_component('fine', 'base')
        base = make_component('base')
        reg = ComponentRegistry(lambda: [broken, fine, base])

        assert not are_dependencies_met(broken, ctx, reg)
        assert are_dependencies_met(fine, ctx, reg)

    def test_default_registry(self, ctx, platform):
        _, ingress, mesh, app = platform
        override_catalog_source(lambda: [ingress, mesh, app])
        assert not are_dependencies_met(app, ctx)
        assert are_dependencies_met(ingress, ctx)

    def test_unready_dependencies_helper(self):
        assert unready_dependencies({'a': True, 'b': False, 'c': False}) == ['b', 'c']
        assert unready_dependencies({}) == []


@pytest.mark.fast
def test_concurrent_gate_checks_share_dependency(ctx):
    """Many workers query dependents of one shared component at once."""
    shared = make_component('shared')
    dependents = [make_component(f'dep-{i}', 'shared') for i in range(16)]
    reg = ComponentRegistry(lambda: [shared, *dependents], allow_shared_dependencies=False)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(
            lambda c: are_dependencies_met(c, ctx, reg),
            dependents * 10,
        ))

    assert all(results)
