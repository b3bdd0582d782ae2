"""Tests for the slash-command menu state machine."""

import pytest

from docengine.infrastructure.content.base import BlockType
from docengine.infrastructure.editor.state import (
    IDLE,
    SLASH_CANDIDATES,
    SlashMenu,
    SlashMenuOpen,
    filter_candidates,
)


@pytest.fixture
def menu() -> SlashMenu:
    return SlashMenu()


class TestSlashMenu:
    """Test suite for opening, filtering and selecting."""

    def test_starts_idle(self, menu):
        assert menu.state == IDLE
        assert not menu.is_open
        assert menu.candidates == []
        assert menu.selected is None

    def test_lone_slash_opens_with_every_candidate(self, menu):
        assert menu.on_input("/") == SlashMenuOpen(filter_text="", selected_index=0)
        assert len(menu.candidates) == len(SLASH_CANDIDATES) == 15

    def test_slash_inside_text_does_not_open(self, menu):
        assert menu.on_input("a/") == IDLE
        assert menu.on_input("/x") == IDLE

    def test_filter_narrows_candidates(self, menu):
        menu.on_input("/")
        menu.on_input("/head")
        assert menu.state == SlashMenuOpen(filter_text="head", selected_index=0)
        assert [c.type for c in menu.candidates] == [BlockType.HEADING1, BlockType.HEADING2, BlockType.HEADING3]

    def test_filter_is_case_insensitive(self, menu):
        menu.on_input("/")
        menu.on_input("/TODO")
        assert [c.type for c in menu.candidates] == [BlockType.TODO]

    def test_arrow_moves_and_clamps(self, menu):
        menu.on_input("/")
        menu.on_input("/head")
        menu.move(1)
        assert menu.selected.type == BlockType.HEADING2
        menu.move(5)
        assert menu.state.selected_index == 2
        menu.move(-10)
        assert menu.state.selected_index == 0

    def test_new_filter_resets_highlight(self, menu):
        menu.on_input("/")
        menu.move(3)
        menu.on_input("/h")
        assert menu.state.selected_index == 0

    def test_select_highlighted(self, menu):
        menu.on_input("/")
        menu.on_input("/head")
        menu.move(1)
        choice = menu.select()
        assert choice.type == BlockType.HEADING2
        assert menu.state == IDLE

    def test_select_by_index(self, menu):
        menu.on_input("/")
        assert menu.select(1).type == BlockType.HEADING1
        assert not menu.is_open

    def test_no_matches_keeps_menu_open(self, menu):
        menu.on_input("/")
        menu.on_input("/zzz")
        assert menu.candidates == []
        assert menu.select() is None
        assert menu.is_open

    def test_out_of_range_index_selects_nothing(self, menu):
        menu.on_input("/")
        assert menu.select(99) is None
        assert menu.is_open

    def test_removing_slash_closes(self, menu):
        menu.on_input("/")
        menu.on_input("/co")
        assert menu.on_input("co") == IDLE

    def test_close(self, menu):
        menu.on_input("/")
        assert menu.close() == IDLE

    def test_select_while_idle(self, menu):
        assert menu.select() is None


def test_filter_matches_type_id():
    assert [c.type for c in filter_candidates("bullet")] == [BlockType.BULLET_LIST]


def test_filter_empty_text_matches_all():
    assert filter_candidates("") == list(SLASH_CANDIDATES)
