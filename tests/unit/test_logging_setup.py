# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Logging setup and component-scoped context loggers."""

import logging

import pytest
from rich.logging import RichHandler

from platform_lifecycle import configure_logging
from platform_lifecycle._internal.logging import resolve_level, setup_logging
from platform_lifecycle.context import ComponentContext
from platform_lifecycle.settings import load_config


def rich_handlers() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]


@pytest.mark.fast
class TestSetupLogging:

    def test_single_rich_handler(self):
        setup_logging('verbose')
        setup_logging('debug')
        handlers = rich_handlers()
        assert len(handlers) == 1
        assert handlers[0].level == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG

    @pytest.mark.parametrize('name,level', [
        ('quiet', logging.ERROR),
        ('normal', logging.WARNING),
        ('verbose', logging.INFO),
        ('DEBUG', logging.DEBUG),
        ('unknown', logging.WARNING),
    ])
    def test_level_names(self, name, level):
        assert resolve_level(name) == level


@pytest.mark.fast
class TestConfigureLogging:

    def test_level_from_env_shorthand(self, monkeypatch):
        monkeypatch.setenv('PLM_LOG_LEVEL', 'debug')
        configure_logging()
        assert logging.getLogger().level == logging.DEBUG
        assert [h.level for h in rich_handlers()] == [logging.DEBUG]

    def test_explicit_config(self):
        configure_logging(load_config(logging={'level': 'quiet'}))
        assert logging.getLogger().level == logging.ERROR

    def test_default_level_is_warning(self):
        configure_logging()
        assert logging.getLogger().level == logging.WARNING


@pytest.mark.fast
class TestContextLogger:

    def test_messages_prefixed_with_component(self, caplog):
        caplog.set_level(logging.INFO)
        ctx = ComponentContext().for_component('istio')
        ctx.log.info("Running install")
        assert caplog.records[-1].getMessage() == "[istio] Running install"

    def test_unscoped_context_has_no_prefix(self, caplog):
        caplog.set_level(logging.INFO)
        ComponentContext().log.info("Reconciling")
        assert caplog.records[-1].getMessage() == "Reconciling"

    def test_rescoping_replaces_prefix(self, caplog):
        caplog.set_level(logging.INFO)
        ctx = ComponentContext().for_component('mysql').for_component('keycloak')
        ctx.log.info("ready")
        assert caplog.records[-1].getMessage() == "[keycloak] ready"
