"""Application state machine.

The App is the single owner of presentation state. It consumes events
strictly in delivery order, applies order-insensitive merges, and never
touches the network: it only asks a LoaderLauncher to start loads.

State is the product of the active screen, an optional modal, one
LoadStatus per resource group and the cached payloads.
"""

import logging
from enum import Enum

from pokedex_tui.dto import MoveDetail, PokemonDetail, TypeInfo
from pokedex_tui.entities import EntitySummary, LoadStatus, Roster, Team, TeamMember, TeamMove
from pokedex_tui.events import (
    ApiError,
    AppEvent,
    DetailLoaded,
    KeyPressed,
    ListLoaded,
    MovesLoaded,
    SpriteLoaded,
    Tick,
    TypeTableLoaded,
    TypesUpdated,
)
from pokedex_tui.protocols import LoaderLauncher, RosterStore

logger = logging.getLogger(__name__)

# Inclusive national dex id ranges per generation
GENERATION_RANGES: dict[int, tuple[int, int]] = {
    1: (1, 151),
    2: (152, 251),
    3: (252, 386),
    4: (387, 493),
    5: (494, 649),
    6: (650, 721),
    7: (722, 809),
    8: (810, 905),
    9: (906, 1025),
}

TYPE_CHART_MAX_SCROLL = 17


def pokemon_generation(pokemon_id: int) -> int:
    """Return the generation of a dex id; ids past the known range are Gen 9."""
    for generation, (lo, hi) in GENERATION_RANGES.items():
        if lo <= pokemon_id <= hi:
            return generation
    return 9


def filter_summaries(
    summaries: list[EntitySummary],
    generation: int | None,
    query: str,
) -> list[EntitySummary]:
    """Filter by generation and by name/id substring."""
    filtered = summaries
    if generation is not None:
        filtered = [p for p in filtered if pokemon_generation(p.id) == generation]
    if query:
        q = query.lower()
        filtered = [p for p in filtered if q in p.name or q in str(p.id)]
    return filtered


class Screen(Enum):
    POKEMON_LIST = "Pokédex"
    POKEMON_DETAIL = "Detail"
    TYPE_CHART = "Type Chart"
    TEAM_BUILDER = "Team Builder"

    @property
    def label(self) -> str:
        return self.value

    @property
    def index(self) -> int:
        return list(Screen).index(self)

    @classmethod
    def by_index(cls, index: int) -> "Screen":
        screens = list(cls)
        return screens[index % len(screens)]


class Modal(Enum):
    POKEMON_PICKER = "pokemon_picker"
    MOVE_PICKER = "move_picker"


class App:
    """Presentation state plus its transition function.

    Example:
        ```python
        app = App(launcher=loaders, roster_store=JsonRosterRepository.create())
        app.start()
        while app.running:
            app.handle_event(await channel.recv())
        ```
    """

    def __init__(self, launcher: LoaderLauncher, roster_store: RosterStore) -> None:
        """Initialize the state machine.

        Args:
            launcher: Starts background loads (required).
            roster_store: Loads and persists the team roster (required).
        """
        self._launcher = launcher
        self._roster_store = roster_store

        self.running = True
        self.screen = Screen.POKEMON_LIST
        self.modal: Modal | None = None
        self.error_message: str | None = None

        # Catalog
        self.pokemon_list: list[EntitySummary] = []
        self.list_status = LoadStatus.IDLE
        self.list_selected = 0
        self.search_mode = False
        self.search_query = ""
        self.generation_filter: int | None = None

        # Detail
        self.detail: PokemonDetail | None = None
        self.detail_status = LoadStatus.IDLE
        self.detail_pokemon_id: int | None = None
        self.sprite_bytes: bytes | None = None

        # Type chart
        self.type_infos: list[TypeInfo] = []
        self.type_chart_status = LoadStatus.IDLE
        self.type_chart_scroll_x = 0
        self.type_chart_scroll_y = 0

        # Team builder
        self.roster: Roster = roster_store.load()
        self.current_team_index = 0
        self.team_slot_selected = 0
        self.modal_selected = 0
        self.modal_search = ""

        # Move picker
        self.available_moves: list[MoveDetail] = []
        self.moves_status = LoadStatus.IDLE
        self.moves_pokemon_id: int | None = None
        self._moves_waiting_for: int | None = None

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def current_team(self) -> Team:
        return self.roster.teams[self.current_team_index]

    def filtered_list(self) -> list[EntitySummary]:
        return filter_summaries(self.pokemon_list, self.generation_filter, self.search_query)

    def modal_filtered_list(self) -> list[EntitySummary]:
        return filter_summaries(self.pokemon_list, self.generation_filter, self.modal_search)

    # ------------------------------------------------------------------
    # Load requests (idempotent by request key)
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Kick off the initial catalog load."""
        self.start_loading_list()

    def start_loading_list(self) -> None:
        if self.list_status.is_pending_or_done:
            return
        self.list_status = LoadStatus.LOADING
        self._launcher.start_catalog()

    def load_detail(self, pokemon_id: int) -> None:
        if self.detail_pokemon_id == pokemon_id and self.detail_status.is_pending_or_done:
            return
        self.detail = None
        self.sprite_bytes = None
        self.detail_pokemon_id = pokemon_id
        self.detail_status = LoadStatus.LOADING
        self._launcher.start_detail(pokemon_id)

    def load_types(self) -> None:
        if self.type_chart_status.is_pending_or_done:
            return
        self.type_chart_status = LoadStatus.LOADING
        self._launcher.start_type_table()

    def load_moves_for(self, detail: PokemonDetail) -> None:
        if self.moves_pokemon_id == detail.id and self.moves_status.is_pending_or_done:
            return
        self.available_moves = []
        self.moves_pokemon_id = detail.id
        self.moves_status = LoadStatus.LOADING
        self._launcher.start_moves(detail)

    # ------------------------------------------------------------------
    # Event dispatch
    # ------------------------------------------------------------------

    def handle_event(self, event: AppEvent) -> None:
        if isinstance(event, KeyPressed):
            self.handle_key(event)
        elif isinstance(event, Tick):
            pass
        elif isinstance(event, ListLoaded):
            self.pokemon_list = list(event.summaries)
            self.list_status = LoadStatus.LOADED
        elif isinstance(event, TypesUpdated):
            self._merge_types(event.batch)
        elif isinstance(event, DetailLoaded):
            self._on_detail_loaded(event.detail)
        elif isinstance(event, SpriteLoaded):
            if self.detail_pokemon_id == event.pokemon_id:
                self.sprite_bytes = event.data
        elif isinstance(event, TypeTableLoaded):
            self.type_infos = list(event.types)
            self.type_chart_status = LoadStatus.LOADED
        elif isinstance(event, MovesLoaded):
            if event.pokemon_id == self.moves_pokemon_id:
                self.available_moves = list(event.moves)
                self.moves_status = LoadStatus.LOADED
        elif isinstance(event, ApiError):
            self._on_api_error(event.message)
        else:
            logger.warning("Ignoring unknown event %r", event)

    def _merge_types(self, batch: list[tuple[int, list[str]]]) -> None:
        by_id = {summary.id: summary for summary in self.pokemon_list}
        for pokemon_id, types in batch:
            summary = by_id.get(pokemon_id)
            if summary is not None:
                summary.types = list(types)

    def _on_detail_loaded(self, detail: PokemonDetail) -> None:
        if detail.id != self.detail_pokemon_id:
            logger.debug("Discarding stale detail for %d", detail.id)
            return
        self.detail = detail
        self.detail_status = LoadStatus.LOADED
        if self._moves_waiting_for == detail.id:
            self._moves_waiting_for = None
            if self.modal is Modal.MOVE_PICKER:
                self.load_moves_for(detail)

    def _on_api_error(self, message: str) -> None:
        logger.warning("API error: %s", message)
        self.error_message = message
        if self.list_status is LoadStatus.LOADING:
            self.list_status = LoadStatus.ERROR
        if self.detail_status is LoadStatus.LOADING:
            self.detail_status = LoadStatus.ERROR
        if self.type_chart_status is LoadStatus.LOADING:
            self.type_chart_status = LoadStatus.ERROR
        if self.moves_status is LoadStatus.LOADING:
            self.moves_status = LoadStatus.ERROR

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def handle_key(self, key: KeyPressed) -> None:
        # A visible banner swallows exactly one key
        if self.error_message is not None:
            self.error_message = None
            return

        if self.modal is not None:
            self._handle_modal_key(key, self.modal)
            return

        code = key.key
        if key.ctrl and code == "c":
            self.running = False
            return
        if not self.search_mode:
            if code == "q":
                self.running = False
                return
            if code == "tab":
                self._go_to(Screen.by_index(self.screen.index + 1))
                return
            if code == "backtab":
                self._go_to(Screen.by_index(self.screen.index - 1))
                return
            if code in ("1", "2", "3", "4") and self.screen is not Screen.POKEMON_LIST:
                self._go_to(Screen.by_index(int(code) - 1))
                return

        handler = {
            Screen.POKEMON_LIST: self._handle_list_key,
            Screen.POKEMON_DETAIL: self._handle_detail_key,
            Screen.TYPE_CHART: self._handle_type_chart_key,
            Screen.TEAM_BUILDER: self._handle_team_key,
        }[self.screen]
        handler(key)

    def _go_to(self, screen: Screen) -> None:
        self.screen = screen
        self._on_screen_enter()

    def _on_screen_enter(self) -> None:
        if self.screen is Screen.POKEMON_LIST:
            self.start_loading_list()
        elif self.screen is Screen.POKEMON_DETAIL:
            if self.detail_status is LoadStatus.LOADED:
                return
            target = self.detail_pokemon_id
            if target is None:
                filtered = self.filtered_list()
                if not filtered:
                    return
                target = filtered[0].id
            self.load_detail(target)
        elif self.screen is Screen.TYPE_CHART:
            self.load_types()

    def _handle_list_key(self, key: KeyPressed) -> None:
        code = key.key
        if self.search_mode:
            if code in ("esc", "enter"):
                self.search_mode = False
            elif code == "backspace":
                self.search_query = self.search_query[:-1]
                self.list_selected = 0
            elif key.char is not None:
                self.search_query += key.char
                self.list_selected = 0
            return

        if code == "/":
            self.search_mode = True
            self.search_query = ""
        elif code in ("g", "G"):
            self.generation_filter = _next_generation(self.generation_filter)
            self.list_selected = 0
        elif code == "0":
            self.generation_filter = None
            self.list_selected = 0
        elif len(code) == 1 and code in "123456789":
            self.generation_filter = int(code)
            self.list_selected = 0
        elif code in ("up", "k"):
            self.list_selected = max(0, self.list_selected - 1)
        elif code in ("down", "j"):
            last = max(0, len(self.filtered_list()) - 1)
            self.list_selected = min(last, self.list_selected + 1)
        elif code == "enter":
            filtered = self.filtered_list()
            if self.list_selected < len(filtered):
                self.load_detail(filtered[self.list_selected].id)
                self.screen = Screen.POKEMON_DETAIL

    def _handle_detail_key(self, key: KeyPressed) -> None:
        if key.key == "esc":
            self.screen = Screen.POKEMON_LIST
        elif key.key == "a" and self.detail is not None:
            if not self.current_team.is_full:
                self.current_team.members.append(
                    TeamMember(
                        pokemon_id=self.detail.id,
                        pokemon_name=self.detail.name,
                        types=self.detail.type_names,
                    )
                )
                self._save_roster()

    def _handle_type_chart_key(self, key: KeyPressed) -> None:
        code = key.key
        if code in ("up", "k"):
            self.type_chart_scroll_y = max(0, self.type_chart_scroll_y - 1)
        elif code in ("down", "j"):
            self.type_chart_scroll_y = min(TYPE_CHART_MAX_SCROLL, self.type_chart_scroll_y + 1)
        elif code in ("left", "h"):
            self.type_chart_scroll_x = max(0, self.type_chart_scroll_x - 1)
        elif code in ("right", "l"):
            self.type_chart_scroll_x = min(TYPE_CHART_MAX_SCROLL, self.type_chart_scroll_x + 1)

    def _handle_team_key(self, key: KeyPressed) -> None:
        code = key.key
        team = self.current_team
        if code in ("up", "k"):
            self.team_slot_selected = max(0, self.team_slot_selected - 1)
        elif code in ("down", "j"):
            self.team_slot_selected = min(Team.MAX_MEMBERS - 1, self.team_slot_selected + 1)
        elif code == "enter":
            slot = self.team_slot_selected
            if slot < len(team.members):
                self._open_move_picker(team.members[slot].pokemon_id)
            else:
                self.modal = Modal.POKEMON_PICKER
                self.modal_selected = 0
                self.modal_search = ""
                self.start_loading_list()
        elif code in ("d", "delete"):
            if self.team_slot_selected < len(team.members):
                del team.members[self.team_slot_selected]
                self._save_roster()
        elif code == "n":
            self.roster.teams.append(Team(name=f"Team {len(self.roster.teams) + 1}"))
            self.current_team_index = len(self.roster.teams) - 1
            self.team_slot_selected = 0
            self._save_roster()
        elif code in ("left", "h"):
            if self.current_team_index > 0:
                self.current_team_index -= 1
                self.team_slot_selected = 0
        elif code in ("right", "l"):
            if self.current_team_index < len(self.roster.teams) - 1:
                self.current_team_index += 1
                self.team_slot_selected = 0

    def _open_move_picker(self, pokemon_id: int) -> None:
        self.modal = Modal.MOVE_PICKER
        self.modal_selected = 0
        if self.detail is not None and self.detail.id == pokemon_id:
            self.load_moves_for(self.detail)
            return
        # Moves start once this detail arrives
        self.available_moves = []
        self.moves_status = LoadStatus.IDLE
        self.moves_pokemon_id = None
        self._moves_waiting_for = pokemon_id
        self.load_detail(pokemon_id)

    def _handle_modal_key(self, key: KeyPressed, modal: Modal) -> None:
        if key.key == "esc":
            self.modal = None
            self.search_mode = False
            self._moves_waiting_for = None
            return
        if modal is Modal.POKEMON_PICKER:
            self._handle_pokemon_picker_key(key)
        else:
            self._handle_move_picker_key(key)

    def _handle_pokemon_picker_key(self, key: KeyPressed) -> None:
        code = key.key
        if self.search_mode:
            if code == "enter":
                self.search_mode = False
            elif code == "backspace":
                self.modal_search = self.modal_search[:-1]
                self.modal_selected = 0
            elif key.char is not None:
                self.modal_search += key.char
                self.modal_selected = 0
            return

        if code in ("up", "k"):
            self.modal_selected = max(0, self.modal_selected - 1)
        elif code in ("down", "j"):
            last = max(0, len(self.modal_filtered_list()) - 1)
            self.modal_selected = min(last, self.modal_selected + 1)
        elif code == "/":
            self.search_mode = True
            self.modal_search = ""
        elif code == "enter":
            filtered = self.modal_filtered_list()
            if self.modal_selected < len(filtered) and not self.current_team.is_full:
                picked = filtered[self.modal_selected]
                self.current_team.members.append(
                    TeamMember(
                        pokemon_id=picked.id,
                        pokemon_name=picked.name,
                        types=list(picked.types),
                    )
                )
                self._save_roster()
                self.modal = None

    def _handle_move_picker_key(self, key: KeyPressed) -> None:
        code = key.key
        if code in ("up", "k"):
            self.modal_selected = max(0, self.modal_selected - 1)
        elif code in ("down", "j"):
            last = max(0, len(self.available_moves) - 1)
            self.modal_selected = min(last, self.modal_selected + 1)
        elif code == "enter":
            if self.modal_selected >= len(self.available_moves):
                return
            team = self.current_team
            if self.team_slot_selected >= len(team.members):
                return
            member = team.members[self.team_slot_selected]
            if member.is_full:
                return
            move = self.available_moves[self.modal_selected]
            member.moves.append(
                TeamMove(name=move.name, move_type=move.move_type.name, power=move.power)
            )
            self._save_roster()
            if member.is_full:
                self.modal = None

    def _save_roster(self) -> None:
        self._roster_store.save(self.roster)


def _next_generation(current: int | None) -> int | None:
    """None -> 1 -> ... -> 9 -> None."""
    if current is None:
        return 1
    if current >= 9:
        return None
    return current + 1
