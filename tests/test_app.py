"""
Tests for the application state machine, using a recording launcher.
"""

import pytest

from conftest import InMemoryRosterStore, RecordingLauncher, move_payload, pokemon_payload
from pokedex_tui.app import App, Modal, Screen, filter_summaries, pokemon_generation
from pokedex_tui.dto import MoveDetail, PokemonDetail, TypeInfo
from pokedex_tui.entities import EntitySummary, LoadStatus, Roster, Team, TeamMember
from pokedex_tui.events import (
    ApiError,
    DetailLoaded,
    KeyPressed,
    ListLoaded,
    MovesLoaded,
    SpriteLoaded,
    Tick,
    TypeTableLoaded,
    TypesUpdated,
)


def detail(pokemon_id: int, name: str = "mon", moves: tuple[str, ...] = ()) -> PokemonDetail:
    return PokemonDetail.model_validate(pokemon_payload(pokemon_id, name, types=("fire",), moves=moves))


def move(name: str, power: int | None = 40) -> MoveDetail:
    return MoveDetail.model_validate(move_payload(name, power))


def press(app: App, *keys: str) -> None:
    for key in keys:
        app.handle_event(KeyPressed(key))


@pytest.fixture
def app(launcher, roster_store):
    return App(launcher=launcher, roster_store=roster_store)


@pytest.fixture
def listed_app(app):
    """An app whose catalog has been listed."""
    app.start()
    app.handle_event(
        ListLoaded(
            summaries=[
                EntitySummary(id=1, name="bulbasaur"),
                EntitySummary(id=4, name="charmander"),
                EntitySummary(id=25, name="pikachu"),
                EntitySummary(id=152, name="chikorita"),
            ]
        )
    )
    return app


# ----------------------------------------------------------------------
# Pure helpers
# ----------------------------------------------------------------------


def test_pokemon_generation():
    assert pokemon_generation(1) == 1
    assert pokemon_generation(151) == 1
    assert pokemon_generation(152) == 2
    assert pokemon_generation(1025) == 9
    assert pokemon_generation(10034) == 9


def test_filter_summaries_by_generation_and_query():
    rows = [EntitySummary(1, "bulbasaur"), EntitySummary(25, "pikachu"), EntitySummary(152, "chikorita")]

    assert [r.id for r in filter_summaries(rows, 1, "")] == [1, 25]
    assert [r.id for r in filter_summaries(rows, None, "chu")] == [25]
    assert [r.id for r in filter_summaries(rows, None, "15")] == [152]
    assert [r.id for r in filter_summaries(rows, 2, "pika")] == []


def test_screen_index_wraps():
    assert Screen.by_index(4) is Screen.POKEMON_LIST
    assert Screen.by_index(-1) is Screen.TEAM_BUILDER
    assert Screen.TYPE_CHART.label == "Type Chart"


# ----------------------------------------------------------------------
# Loads and merges
# ----------------------------------------------------------------------


def test_start_requests_catalog_once(app, launcher):
    app.start()
    app.start_loading_list()

    assert launcher.calls == [("catalog",)]
    assert app.list_status is LoadStatus.LOADING


def test_list_loaded(listed_app):
    assert listed_app.list_status is LoadStatus.LOADED
    assert [s.types for s in listed_app.pokemon_list] == [[], [], [], []]


def test_types_update_merges_by_id(listed_app):
    listed_app.handle_event(TypesUpdated(batch=[(25, ["electric"]), (1, ["grass", "poison"])]))

    by_id = {s.id: s.types for s in listed_app.pokemon_list}
    assert by_id == {1: ["grass", "poison"], 4: [], 25: ["electric"], 152: []}
    assert [s.id for s in listed_app.pokemon_list] == [1, 4, 25, 152]


def test_types_update_for_unknown_ids_is_noop(listed_app):
    before = [(s.id, list(s.types)) for s in listed_app.pokemon_list]
    listed_app.handle_event(TypesUpdated(batch=[(9999, ["ghost"])]))
    assert [(s.id, s.types) for s in listed_app.pokemon_list] == before


def test_types_update_is_idempotent(listed_app):
    update = TypesUpdated(batch=[(4, ["fire"])])
    listed_app.handle_event(update)
    once = [(s.id, list(s.types)) for s in listed_app.pokemon_list]
    listed_app.handle_event(update)
    assert [(s.id, s.types) for s in listed_app.pokemon_list] == once


def test_types_update_before_list_is_dropped(app):
    app.handle_event(TypesUpdated(batch=[(1, ["grass"])]))
    assert app.pokemon_list == []


def test_load_detail_is_idempotent_per_id(app, launcher):
    app.load_detail(25)
    app.load_detail(25)
    app.handle_event(DetailLoaded(detail(25)))
    app.load_detail(25)

    assert launcher.calls == [("detail", 25)]
    assert app.detail_status is LoadStatus.LOADED


def test_new_detail_request_resets_previous(app, launcher):
    app.load_detail(1)
    app.handle_event(SpriteLoaded(pokemon_id=1, data=b"one"))
    app.handle_event(DetailLoaded(detail(1)))

    app.load_detail(4)

    assert app.detail is None
    assert app.sprite_bytes is None
    assert app.detail_status is LoadStatus.LOADING
    assert launcher.calls == [("detail", 1), ("detail", 4)]


def test_stale_sprite_is_discarded(app):
    app.load_detail(1)
    app.load_detail(4)

    app.handle_event(SpriteLoaded(pokemon_id=1, data=b"old"))
    assert app.sprite_bytes is None

    app.handle_event(SpriteLoaded(pokemon_id=4, data=b"new"))
    assert app.sprite_bytes == b"new"


def test_stale_detail_is_discarded(app):
    app.load_detail(1)
    app.load_detail(4)

    app.handle_event(DetailLoaded(detail(1, "bulbasaur")))

    assert app.detail is None
    assert app.detail_status is LoadStatus.LOADING


def test_type_table_loaded_once(app, launcher):
    app.load_types()
    app.handle_event(TypeTableLoaded(types=[TypeInfo.model_validate({"id": 10, "name": "fire", "damage_relations": {}})]))
    app.load_types()

    assert launcher.calls == [("types",)]
    assert app.type_chart_status is LoadStatus.LOADED
    assert [t.name for t in app.type_infos] == ["fire"]


def test_stale_moves_are_discarded(app):
    app.load_moves_for(detail(1))
    app.load_moves_for(detail(4))

    app.handle_event(MovesLoaded(pokemon_id=1, moves=[move("tackle")]))
    assert app.available_moves == []

    app.handle_event(MovesLoaded(pokemon_id=4, moves=[move("ember")]))
    assert [m.name for m in app.available_moves] == ["ember"]
    assert app.moves_status is LoadStatus.LOADED


def test_tick_changes_nothing(listed_app):
    before = (listed_app.screen, listed_app.list_selected, listed_app.list_status)
    listed_app.handle_event(Tick())
    assert (listed_app.screen, listed_app.list_selected, listed_app.list_status) == before


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------


def test_api_error_marks_loading_groups(app):
    app.start()
    app.load_types()
    app.handle_event(TypeTableLoaded(types=[]))
    app.load_detail(7)

    app.handle_event(ApiError("Failed to load detail: boom"))

    assert app.error_message == "Failed to load detail: boom"
    assert app.list_status is LoadStatus.ERROR
    assert app.detail_status is LoadStatus.ERROR
    assert app.type_chart_status is LoadStatus.LOADED


def test_error_banner_swallows_one_key(listed_app):
    listed_app.handle_event(ApiError("boom"))

    press(listed_app, "q")

    assert listed_app.error_message is None
    assert listed_app.running
    assert listed_app.screen is Screen.POKEMON_LIST

    press(listed_app, "q")
    assert not listed_app.running


def test_failed_detail_can_be_retried(app, launcher):
    app.load_detail(3)
    app.handle_event(ApiError("Failed to load detail: x"))
    app.load_detail(3)

    assert launcher.calls == [("detail", 3), ("detail", 3)]


# ----------------------------------------------------------------------
# Navigation
# ----------------------------------------------------------------------


def test_quit_keys(app):
    press(app, "q")
    assert not app.running


def test_ctrl_c_quits_even_while_searching(listed_app):
    press(listed_app, "/")
    listed_app.handle_event(KeyPressed("c", ctrl=True))
    assert not listed_app.running


def test_q_while_searching_is_text(listed_app):
    press(listed_app, "/", "q")
    assert listed_app.running
    assert listed_app.search_query == "q"


def test_tab_cycles_and_triggers_screen_loads(listed_app, launcher):
    press(listed_app, "tab")
    assert listed_app.screen is Screen.POKEMON_DETAIL
    # Entering detail with nothing selected targets the first visible row
    assert launcher.calls[-1] == ("detail", 1)

    press(listed_app, "tab")
    assert listed_app.screen is Screen.TYPE_CHART
    assert launcher.calls[-1] == ("types",)

    press(listed_app, "tab", "tab")
    assert listed_app.screen is Screen.POKEMON_LIST

    press(listed_app, "backtab")
    assert listed_app.screen is Screen.TEAM_BUILDER


def test_number_keys_jump_outside_list(listed_app):
    press(listed_app, "tab")
    press(listed_app, "4")
    assert listed_app.screen is Screen.TEAM_BUILDER
    press(listed_app, "3")
    assert listed_app.screen is Screen.TYPE_CHART
    press(listed_app, "1")
    assert listed_app.screen is Screen.POKEMON_LIST


def test_number_keys_filter_generation_on_list(listed_app):
    press(listed_app, "2")

    assert listed_app.screen is Screen.POKEMON_LIST
    assert listed_app.generation_filter == 2
    assert [s.name for s in listed_app.filtered_list()] == ["chikorita"]

    press(listed_app, "0")
    assert listed_app.generation_filter is None


def test_generation_cycle(listed_app):
    for expected in [1, 2, 3, 4, 5, 6, 7, 8, 9, None]:
        press(listed_app, "g")
        assert listed_app.generation_filter == expected


def test_search_then_open_detail(listed_app, launcher):
    press(listed_app, "/", "c", "h", "backspace", "h", "a", "r", "enter")

    assert not listed_app.search_mode
    assert [s.name for s in listed_app.filtered_list()] == ["charmander"]

    press(listed_app, "enter")

    assert listed_app.screen is Screen.POKEMON_DETAIL
    assert launcher.calls[-1] == ("detail", 4)


def test_list_cursor_is_bounded(listed_app):
    press(listed_app, "up")
    assert listed_app.list_selected == 0
    press(listed_app, *["down"] * 10)
    assert listed_app.list_selected == 3


def test_detail_esc_returns_to_list(listed_app):
    press(listed_app, "enter")
    press(listed_app, "esc")
    assert listed_app.screen is Screen.POKEMON_LIST


def test_type_chart_scroll_is_clamped(app):
    app.screen = Screen.TYPE_CHART
    press(app, "up", "left")
    assert (app.type_chart_scroll_x, app.type_chart_scroll_y) == (0, 0)
    press(app, *["down"] * 30, *["right"] * 30)
    assert (app.type_chart_scroll_x, app.type_chart_scroll_y) == (17, 17)


# ----------------------------------------------------------------------
# Team builder
# ----------------------------------------------------------------------


def test_add_from_detail_screen_persists(listed_app, roster_store):
    press(listed_app, "enter")
    listed_app.handle_event(DetailLoaded(detail(1, "bulbasaur")))

    press(listed_app, "a")

    members = listed_app.current_team.members
    assert [(m.pokemon_id, m.pokemon_name, m.types) for m in members] == [(1, "bulbasaur", ["fire"])]
    assert roster_store.saves == 1


def test_team_never_exceeds_six(listed_app, roster_store):
    press(listed_app, "enter")
    listed_app.handle_event(DetailLoaded(detail(1, "bulbasaur")))

    press(listed_app, *["a"] * 8)

    assert len(listed_app.current_team.members) == Team.MAX_MEMBERS
    assert roster_store.saves == Team.MAX_MEMBERS


def test_pokemon_picker_adds_member(listed_app):
    press(listed_app, "tab", "tab", "tab")
    assert listed_app.screen is Screen.TEAM_BUILDER

    press(listed_app, "enter")
    assert listed_app.modal is Modal.POKEMON_PICKER

    press(listed_app, "/", "p", "i", "k", "enter", "enter")

    assert listed_app.modal is None
    assert [m.pokemon_name for m in listed_app.current_team.members] == ["pikachu"]


def test_picker_esc_closes_modal(listed_app):
    listed_app.screen = Screen.TEAM_BUILDER
    press(listed_app, "enter", "esc")
    assert listed_app.modal is None
    assert listed_app.current_team.members == []


def test_delete_member(app, roster_store):
    app.current_team.members.append(TeamMember(pokemon_id=4, pokemon_name="charmander"))
    app.screen = Screen.TEAM_BUILDER

    press(app, "d")

    assert app.current_team.members == []
    assert roster_store.saves == 1


def test_new_team_and_switch(app):
    app.screen = Screen.TEAM_BUILDER

    press(app, "n")
    assert [t.name for t in app.roster.teams] == ["Team 1", "Team 2"]
    assert app.current_team_index == 1

    press(app, "left")
    assert app.current_team_index == 0
    press(app, "left")
    assert app.current_team_index == 0
    press(app, "right", "right")
    assert app.current_team_index == 1


def test_roster_loaded_from_store(launcher):
    roster = Roster(teams=[Team(name="Rain", members=[TeamMember(pokemon_id=7, pokemon_name="squirtle")])])
    app = App(launcher=launcher, roster_store=InMemoryRosterStore(roster))
    assert app.current_team.name == "Rain"


def test_move_picker_waits_for_detail(launcher, roster_store):
    roster_store.roster.teams[0].members.append(TeamMember(pokemon_id=25, pokemon_name="pikachu"))
    app = App(launcher=launcher, roster_store=roster_store)
    app.screen = Screen.TEAM_BUILDER

    press(app, "enter")

    assert app.modal is Modal.MOVE_PICKER
    assert launcher.calls == [("detail", 25)]

    app.handle_event(DetailLoaded(detail(25, "pikachu", moves=("thunderbolt", "quick-attack"))))
    assert launcher.calls == [("detail", 25), ("moves", 25)]

    app.handle_event(MovesLoaded(pokemon_id=25, moves=[move("thunderbolt", 90), move("quick-attack", 40)]))
    press(app, "down", "enter")

    member = app.current_team.members[0]
    assert [(m.name, m.power) for m in member.moves] == [("quick-attack", 40)]
    assert app.modal is Modal.MOVE_PICKER


def test_move_picker_uses_loaded_detail(launcher: RecordingLauncher, roster_store):
    roster_store.roster.teams[0].members.append(TeamMember(pokemon_id=25, pokemon_name="pikachu"))
    app = App(launcher=launcher, roster_store=roster_store)
    app.load_detail(25)
    app.handle_event(DetailLoaded(detail(25, "pikachu")))
    app.screen = Screen.TEAM_BUILDER

    press(app, "enter")

    assert launcher.calls == [("detail", 25), ("moves", 25)]


def test_move_picker_closes_when_member_full(launcher, roster_store):
    roster_store.roster.teams[0].members.append(TeamMember(pokemon_id=25, pokemon_name="pikachu"))
    app = App(launcher=launcher, roster_store=roster_store)
    app.load_detail(25)
    app.handle_event(DetailLoaded(detail(25)))
    app.screen = Screen.TEAM_BUILDER
    press(app, "enter")
    app.handle_event(MovesLoaded(pokemon_id=25, moves=[move(f"m{i}") for i in range(6)]))

    press(app, "enter", "enter", "enter", "enter")

    assert len(app.current_team.members[0].moves) == TeamMember.MAX_MOVES
    assert app.modal is None


def test_closing_move_picker_cancels_pending_moves(launcher, roster_store):
    roster_store.roster.teams[0].members.append(TeamMember(pokemon_id=25, pokemon_name="pikachu"))
    app = App(launcher=launcher, roster_store=roster_store)
    app.screen = Screen.TEAM_BUILDER

    press(app, "enter", "esc")
    app.handle_event(DetailLoaded(detail(25)))

    assert launcher.calls == [("detail", 25)]


def test_ctrl_chord_not_typed_into_search(listed_app):
    press(listed_app, "/", "p")
    listed_app.handle_event(KeyPressed("x", ctrl=True))

    assert listed_app.running
    assert listed_app.search_query == "p"
