from __future__ import annotations

from pathlib import Path

import click
import pytest

from depcore.config import DepcoreConfig
from depcore.context import DepcoreContext, pass_context


@pytest.mark.unit
class TestDepcoreContext:
    """Tests for DepcoreContext class."""

    def test_default_initialization(self) -> None:
        ctx = DepcoreContext()

        assert ctx.config_path is None
        assert ctx.verbose == 0
        assert ctx.color is True
        assert ctx.config == DepcoreConfig()

    def test_instances_are_independent(self) -> None:
        ctx1 = DepcoreContext()
        ctx2 = DepcoreContext()

        ctx1.verbose = 2
        ctx1.config.strict_not_equal = True

        assert ctx2.verbose == 0
        assert ctx2.config.strict_not_equal is False
        assert ctx1.config is not ctx2.config

    def test_attributes_can_be_set(self) -> None:
        ctx = DepcoreContext()
        config = DepcoreConfig(timeout=5, source_path=Path("/tmp/depcore.toml"))

        ctx.config_path = Path("/tmp/depcore.toml")
        ctx.config = config

        assert ctx.config_path == Path("/tmp/depcore.toml")
        assert ctx.config is config

    def test_slots_prevent_arbitrary_attributes(self) -> None:
        ctx = DepcoreContext()

        with pytest.raises(AttributeError):
            ctx.arbitrary_attribute = "value"  # type: ignore


@pytest.mark.unit
class TestPassContextDecorator:
    """Tests for pass_context decorator."""

    def test_injects_existing_context(self) -> None:
        @click.command()
        @pass_context
        def test_command(ctx: DepcoreContext) -> DepcoreContext:
            return ctx

        click_ctx = click.Context(click.Command("test"))
        depcore_ctx = DepcoreContext()
        click_ctx.obj = depcore_ctx

        assert click_ctx.invoke(test_command) is depcore_ctx

    def test_creates_context_when_missing(self) -> None:
        """Test a default context is created when the group set none."""

        @click.command()
        @pass_context
        def test_command(ctx: DepcoreContext) -> DepcoreContext:
            return ctx

        click_ctx = click.Context(click.Command("test"))

        result = click_ctx.invoke(test_command)

        assert isinstance(result, DepcoreContext)
        assert result.config.strict_not_equal is False
