"""Game-side collaborators consumed by widgets.

Widgets read authoritative state through a ``GameStateProvider`` and only
request changes through its command methods; the provider answers by
emitting events on the bus. ``LocalGame`` is a self-contained provider
used by the command line tool and the tests.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Iterable, Iterator, Protocol

from . import events
from .events import EventBus

logger = logging.getLogger(__name__)

SERVER = "SERVER"
ROOM = "ROOM"
ALL = "ALL"
CHANNEL = "CHANNEL"
STANDARD_RECIPIENTS = (ALL, CHANNEL, ROOM, SERVER)


class StageLevel(IntEnum):
    UNINITIALIZED = 0
    INITIALIZING = 1
    INITIALIZED = 5
    LOADING = 30
    LOADED = 40
    PLAYING = 50
    DONE = 100


@dataclass(frozen=True, order=True)
class GameStage:
    stage: int = 0
    step: int = 0
    round: int = 0

    def __str__(self) -> str:
        return f"{self.stage}.{self.step}.{self.round}"

    @classmethod
    def parse(cls, value: "str | GameStage") -> "GameStage":
        """Accept ``"2"``, ``"2.1"`` or ``"2.1.1"`` (1-based stage and step)."""
        if isinstance(value, GameStage):
            return value
        parts = str(value).strip().split(".")
        try:
            nums = [int(p) for p in parts]
        except ValueError:
            raise ValueError(f"invalid game stage: {value!r}") from None
        if not 1 <= len(nums) <= 3:
            raise ValueError(f"invalid game stage: {value!r}")
        while len(nums) < 3:
            nums.append(1)
        return cls(*nums)


@dataclass
class Player:
    id: str
    name: str | None = None
    sid: str | None = None
    stage: GameStage = field(default_factory=GameStage)
    stage_level: StageLevel = StageLevel.UNINITIALIZED

    @property
    def label(self) -> str:
        return self.name or self.id


class PlayerList:
    """Ordered roster of the other players in the game."""

    def __init__(self, players: Iterable[Player] = ()) -> None:
        self._players: list[Player] = list(players)

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players)

    def __len__(self) -> int:
        return len(self._players)

    def size(self) -> int:
        return len(self._players)

    def ids(self) -> list[str]:
        return [p.id for p in self._players]

    def get(self, player_id: str) -> Player | None:
        return next((p for p in self._players if p.id == player_id), None)

    def add(self, player: Player) -> None:
        if self.get(player.id) is not None:
            raise ValueError(f"player {player.id!r} already in list")
        self._players.append(player)

    def remove(self, player_id: str) -> Player:
        player = self.get(player_id)
        if player is None:
            raise KeyError(player_id)
        self._players.remove(player)
        return player


@dataclass(frozen=True)
class ChatMessage:
    sender: str
    to: str
    text: str
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class StageSpec:
    id: str
    steps: tuple[str, ...] = ("",)

    @classmethod
    def from_dict(cls, d: dict) -> "StageSpec":
        steps = tuple(str(s) for s in (d.get("steps") or [d["id"]]))
        return cls(id=str(d["id"]), steps=steps)


class GameStateProvider(Protocol):
    """Read accessors and command methods a widget may use."""

    player: Player
    players: PlayerList
    stage: GameStage | None
    stage_level: StageLevel
    connected: bool
    last_error: str | None
    treatment: str | None
    sequence: list[StageSpec]

    def step_name(self, stage: GameStage | None) -> str | None: ...
    def previous_step(self) -> GameStage | None: ...
    def next_step(self) -> GameStage | None: ...
    def step(self) -> None: ...
    def goto_step(self, stage: "GameStage | str") -> None: ...
    def disconnect(self) -> None: ...
    def say(self, label: str, to: str, data: Any) -> None: ...
    def get(self, label: str, callback: Callable[[Any], Any]) -> None: ...
    def done(self, values: dict | None = None) -> None: ...
    def set(self, values: dict) -> None: ...


class LocalGame:
    """In-memory ``GameStateProvider`` driving a linear step sequence."""

    def __init__(
        self,
        bus: EventBus,
        player: Player,
        players: Iterable[Player] = (),
        sequence: Iterable[StageSpec] = (),
        treatment: str | None = None,
    ) -> None:
        self.bus = bus
        self.player = player
        self.players = PlayerList(players)
        self.sequence = list(sequence)
        self.treatment = treatment
        self.stage: GameStage | None = None
        self.stage_level = StageLevel.UNINITIALIZED
        self.connected = True
        self.last_error: str | None = None
        self.outbox: list[tuple[str, ChatMessage]] = []
        self.submitted: list[dict] = []
        self._pending: dict[str, list[Callable[[Any], Any]]] = {}

    @classmethod
    def from_config(cls, bus: EventBus, cfg: dict) -> "LocalGame":
        me = cfg.get("player") or {"id": "player"}
        return cls(
            bus,
            player=Player(id=str(me["id"]), name=me.get("name"), sid=me.get("sid")),
            players=[Player(id=str(p["id"]), name=p.get("name")) for p in cfg.get("players", [])],
            sequence=[StageSpec.from_dict(s) for s in cfg.get("sequence", [])],
            treatment=cfg.get("treatment"),
        )

    # ------------------------------------------------------------------
    # Sequence
    # ------------------------------------------------------------------

    def _flat(self) -> list[GameStage]:
        return [
            GameStage(i + 1, j + 1, 1)
            for i, spec in enumerate(self.sequence)
            for j in range(len(spec.steps))
        ]

    def step_name(self, stage: GameStage | None) -> str | None:
        if stage is None or not 1 <= stage.stage <= len(self.sequence):
            return None
        spec = self.sequence[stage.stage - 1]
        if not 1 <= stage.step <= len(spec.steps):
            return None
        if len(spec.steps) == 1:
            return spec.id
        return f"{spec.id}.{spec.steps[stage.step - 1]}"

    def _neighbour(self, offset: int) -> GameStage | None:
        flat = self._flat()
        if self.stage is None:
            return flat[0] if offset > 0 and flat else None
        try:
            idx = flat.index(GameStage(self.stage.stage, self.stage.step, 1))
        except ValueError:
            return None
        idx += offset
        return flat[idx] if 0 <= idx < len(flat) else None

    def previous_step(self) -> GameStage | None:
        return self._neighbour(-1)

    def next_step(self) -> GameStage | None:
        return self._neighbour(1)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> None:
        self.stage = None
        self.step()

    def step(self) -> None:
        nxt = self.next_step()
        if nxt is None:
            self.stage_level = StageLevel.DONE
            logger.info("game over at %s", self.stage)
            self.bus.emit(events.STATECHANGE)
            return
        self._enter(nxt)

    def goto_step(self, stage: "GameStage | str") -> None:
        target = GameStage.parse(stage)
        if self.step_name(target) is None:
            raise ValueError(f"no such step: {target}")
        self._enter(target)

    def _enter(self, stage: GameStage) -> None:
        self.stage = stage
        self.player.stage = stage
        self.stage_level = StageLevel.PLAYING
        logger.debug("entered step %s (%s)", stage, self.step_name(stage))
        self.bus.emit(events.STATECHANGE)
        self.bus.emit(events.STEP_CALLBACK_EXECUTED)

    def connect(self) -> None:
        self.connected = True
        self.bus.emit(events.SOCKET_CONNECT)

    def disconnect(self) -> None:
        if not self.connected:
            return
        self.connected = False
        self.bus.emit(events.SOCKET_DISCONNECT)

    def say(self, label: str, to: str, data: Any) -> None:
        msg = ChatMessage(sender=self.player.id, to=to, text=data)
        self.outbox.append((label, msg))
        self.bus.emit(events.outbound_topic(label), msg)

    def receive(self, label: str, sender: str, text: str, to: str | None = None) -> ChatMessage:
        """Deliver an incoming message as the transport would."""
        msg = ChatMessage(sender=sender, to=to or self.player.id, text=text)
        self.bus.emit(events.data_topic(label), msg)
        return msg

    def get(self, label: str, callback: Callable[[Any], Any]) -> None:
        self._pending.setdefault(label, []).append(callback)

    def reply(self, label: str, payload: Any) -> int:
        """Answer every pending ``get`` for ``label``; returns how many."""
        callbacks = self._pending.pop(label, [])
        for cb in callbacks:
            cb(payload)
        return len(callbacks)

    def done(self, values: dict | None = None) -> None:
        self.submitted.append({"done": True, **(values or {})})
        self.stage_level = StageLevel.DONE

    def set(self, values: dict) -> None:
        self.submitted.append(dict(values))

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    def add_player(self, player: Player) -> None:
        self.players.add(player)
        self.bus.emit(events.UPDATED_PLIST)

    def create_player(self) -> None:
        """Announce that the local player object has been (re)created."""
        self.bus.emit(events.PLAYER_CREATED, self.player)

    def remove_player(self, player_id: str) -> None:
        self.players.remove(player_id)
        self.bus.emit(events.UPDATED_PLIST)

    def fail(self, error: str) -> None:
        self.last_error = error
        logger.warning("game error: %s", error)
