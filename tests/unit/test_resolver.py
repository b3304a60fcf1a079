# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Unit tests for the dependency walk.

Covers trace contents and order, cycle and missing-reference detection,
the strict and shared revisit policies, and deterministic error reporting.
"""

import pytest

from platform_lifecycle.exceptions import DependencyCycleError, MissingDependencyError
from platform_lifecycle.registry import ComponentRegistry, check_dependencies
from platform_lifecycle.settings import reset_config
from tests.fixtures.fakes import make_component


def registry_of(*components, allow_shared=False):
    return ComponentRegistry(lambda: list(components), allow_shared_dependencies=allow_shared)


@pytest.mark.fast
class TestTrace:

    def test_no_dependencies_gives_empty_trace(self, ctx):
        leaf = make_component('leaf')
        assert check_dependencies(leaf, ctx, registry_of(leaf)) == {}

    def test_trace_holds_exactly_transitive_dependencies(self, ctx):
        dns = make_component('dns')
        certs = make_component('certs', 'dns')
        mesh = make_component('mesh')
        ingress = make_component('ingress', 'certs')
        app = make_component('app', 'ingress', 'mesh')
        unrelated = make_component('unrelated')
        reg = registry_of(dns, certs, mesh, ingress, app, unrelated)

        trace = check_dependencies(app, ctx, reg)

        assert set(trace) == {'ingress', 'certs', 'dns', 'mesh'}
        assert all(trace.values())

    def test_dependencies_recorded_depth_first(self, ctx):
        a = make_component('a', 'b', 'd')
        b = make_component('b', 'c')
        c = make_component('c')
        d = make_component('d')
        trace = check_dependencies(a, ctx, registry_of(a, b, c, d))
        assert list(trace) == ['c', 'b', 'd']

    def test_unready_dependency_does_not_stop_walk(self, ctx):
        ingress = make_component('ingress', ready=True)
        mesh = make_component('mesh', ready=False)
        late = make_component('late', ready=True)
        app = make_component('app', 'mesh', 'ingress', 'late')

        trace = check_dependencies(app, ctx, registry_of(ingress, mesh, late, app))

        assert trace == {'mesh': False, 'ingress': True, 'late': True}
        assert late.ready_probes == 1

    def test_root_readiness_not_probed(self, ctx):
        dep = make_component('dep')
        root = make_component('root', 'dep', ready=False)
        check_dependencies(root, ctx, registry_of(dep, root))
        assert root.ready_probes == 0

    def test_trace_rebuilt_on_every_call(self, ctx):
        mesh = make_component('mesh', ready=False)
        app = make_component('app', 'mesh')
        reg = registry_of(mesh, app)

        assert check_dependencies(app, ctx, reg) == {'mesh': False}
        mesh.ready = True
        assert check_dependencies(app, ctx, reg) == {'mesh': True}

    def test_deterministic(self, ctx):
        a = make_component('a', 'b', 'c')
        b = make_component('b')
        c = make_component('c', ready=False)
        reg = registry_of(a, b, c)
        assert check_dependencies(a, ctx, reg) == check_dependencies(a, ctx, reg)


@pytest.mark.fast
class TestStructuralErrors:

    def test_two_cycle(self, ctx):
        x = make_component('X', 'Y')
        y = make_component('Y', 'X')

        with pytest.raises(DependencyCycleError) as exc_info:
            check_dependencies(x, ctx, registry_of(x, y))

        message = str(exc_info.value)
        assert 'X' in message and 'Y' in message
        assert message.startswith("Illegal state, dependency cycle found for")

    def test_self_dependency_is_cycle(self, ctx):
        me = make_component('me', 'me')
        with pytest.raises(DependencyCycleError, match="for me: me"):
            check_dependencies(me, ctx, registry_of(me))

    def test_longer_cycle(self, ctx):
        a = make_component('a', 'b')
        b = make_component('b', 'c')
        c = make_component('c', 'a')
        with pytest.raises(DependencyCycleError, match="for c: a"):
            check_dependencies(a, ctx, registry_of(a, b, c))

    def test_missing_dependency(self, ctx):
        app = make_component('app', 'database')

        with pytest.raises(MissingDependencyError) as exc_info:
            check_dependencies(app, ctx, registry_of(app))

        err = exc_info.value
        assert err.component == 'app'
        assert err.dependency == 'database'
        assert str(err) == "Illegal state, declared dependency not found for app: database"

    def test_first_error_in_declared_order_is_reported(self, ctx):
        app = make_component('app', 'first-missing', 'second-missing')
        with pytest.raises(MissingDependencyError, match="first-missing"):
            check_dependencies(app, ctx, registry_of(app))

    def test_error_carries_partial_trace(self, ctx):
        ok = make_component('ok', ready=False)
        app = make_component('app', 'ok', 'ghost')

        with pytest.raises(MissingDependencyError) as exc_info:
            check_dependencies(app, ctx, registry_of(ok, app))

        assert exc_info.value.trace == {'ok': False}

    def test_missing_transitive_dependency(self, ctx):
        mid = make_component('mid', 'ghost')
        app = make_component('app', 'mid')
        with pytest.raises(MissingDependencyError, match="for mid: ghost"):
            check_dependencies(app, ctx, registry_of(mid, app))


@pytest.mark.fast
class TestRevisitPolicy:

    @pytest.fixture
    def diamond(self):
        base = make_component('base')
        left = make_component('left', 'base')
        right = make_component('right', 'base')
        top = make_component('top', 'left', 'right')
        return top, [base, left, right, top]

    def test_strict_policy_rejects_diamond(self, ctx, diamond):
        top, components = diamond
        with pytest.raises(DependencyCycleError, match="for right: base"):
            check_dependencies(top, ctx, registry_of(*components, allow_shared=False))

    def test_strict_policy_rejects_repeated_direct_dependency(self, ctx):
        dep = make_component('dep')
        app = make_component('app', 'dep', 'dep')
        with pytest.raises(DependencyCycleError):
            check_dependencies(app, ctx, registry_of(dep, app, allow_shared=False))

    def test_shared_policy_allows_diamond(self, ctx, diamond):
        top, components = diamond
        trace = check_dependencies(top, ctx, registry_of(*components, allow_shared=True))
        assert trace == {'base': True, 'left': True, 'right': True}
        # Shared dependency probed once per walk
        assert components[0].ready_probes == 1

    def test_shared_policy_still_detects_cycles(self, ctx):
        x = make_component('x', 'y')
        y = make_component('y', 'x')
        with pytest.raises(DependencyCycleError):
            check_dependencies(x, ctx, registry_of(x, y, allow_shared=True))

    def test_policy_defaults_to_configuration(self, ctx, diamond, monkeypatch):
        top, components = diamond
        reg = ComponentRegistry(lambda: components)

        with pytest.raises(DependencyCycleError):
            check_dependencies(top, ctx, reg)

        monkeypatch.setenv('PLM_ALLOW_SHARED_DEPENDENCIES', 'true')
        reset_config()
        assert set(check_dependencies(top, ctx, reg)) == {'base', 'left', 'right'}
