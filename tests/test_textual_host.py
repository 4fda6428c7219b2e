from unittest.mock import MagicMock

import pytest
from textual.app import App, ComposeResult
from textual.widgets import Input, Static

from chips_input import ChipsInputConfig, ChipsInputController, OverlayStatus
from chips_input.presentation import TextualOverlayHost

from conftest import RecordingFetcher


class _ChipsApp(App):
    def compose(self) -> ComposeResult:
        yield Input(id="chips-query")


def test_host_mounts_and_removes_surface():
    parent = MagicMock()
    surface = MagicMock()
    host = TextualOverlayHost(parent)

    host.insert(surface)
    host.insert(surface)
    assert host.is_mounted
    parent.mount.assert_called_once_with(surface)

    host.remove(surface)
    host.remove(surface)
    surface.remove.assert_called_once_with()
    assert not host.is_mounted


@pytest.mark.asyncio
async def test_controller_overlay_mounts_widget_in_app():
    app = _ChipsApp()
    controller = ChipsInputController(RecordingFetcher(["apple"]), config=ChipsInputConfig(suggest_on_type=False))
    surface = Static("suggestions", id="chips-suggestions")

    async with app.run_test() as pilot:
        controller.initialize(TextualOverlayHost(app.screen), surface)

        assert controller.open() is True
        await pilot.pause()
        assert list(app.screen.query("#chips-suggestions")) == [surface]

        controller.close()
        await pilot.pause()
        assert list(app.screen.query("#chips-suggestions")) == []
        assert controller.status is OverlayStatus.CLOSED

    await controller.dispose()
