"""
The Durak game state machine.

A `Game` owns the stock, the players, the table top, the trump suit and the
history log. Hosting services drive it through four transitions:

- `attack`: an attacker places a card on the table
- `defend`: the defender covers an attack
- `pass_turn`: an attacker declares they have nothing more to add
- `concede`: the defender gives up and takes the table

Every transition validates all of its preconditions before mutating
anything, so a failed call leaves the game exactly as it was. Rounds
resolve automatically once the defender has covered everything and the
attackers are done, or as soon as the defender concedes.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
import json
import logging
import random
import uuid

from durachok.common.card import Card
from durachok.common.deck import Deck
from durachok.common.hand import deal
from durachok.durak.rules import DurakRules, FirstPlayerPolicy
from durachok.durak.state import (
    GameStage,
    HistoryKind,
    HistoryRecord,
    Player,
    RoundOutcome,
)
from durachok.durak.table import TableTop
from durachok.errors import (
    CardNotHeld,
    DurakError,
    ErrorKind,
    InvalidCard,
    InvalidPlayerCount,
    NotYourTurn,
    TableFull,
    UnknownPlayer,
)
from durachok.events import EngineEventType, EventEmitter

logger = logging.getLogger(__name__)

CardLike = Union[Card, str]


class Game:
    """
    A single game of Durak.

    Args:
        player_count: Number of players, within the rules' limits
        rng: Random source used to shuffle the deck
        seed: Seed for a private random source, used when `rng` is not given
        rules: Game rules, defaults to `DurakRules()`
        player_ids: IDs for the players in seat order, generated if omitted
        first_player: Policy choosing the opening attacker, overriding the rules
        emitter: Event emitter to publish on, a private one if omitted
        game_id: ID of the game, generated if omitted

    Raises:
        InvalidPlayerCount: If `player_count` is out of range
        InsufficientCards: If the deck cannot fill every hand
    """

    def __init__(
        self,
        player_count: int,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        rules: Optional[DurakRules] = None,
        player_ids: Optional[Sequence[str]] = None,
        first_player: Optional[FirstPlayerPolicy] = None,
        emitter: Optional[EventEmitter] = None,
        game_id: Optional[str] = None,
    ):
        self.rules = rules or DurakRules()

        if (
            not isinstance(player_count, int)
            or isinstance(player_count, bool)
            or not self.rules.min_players <= player_count <= self.rules.max_players
        ):
            raise InvalidPlayerCount(
                f"Number of players must be between {self.rules.min_players} "
                f"and {self.rules.max_players}, got {player_count!r}"
            )
        if player_ids is not None and (
            len(player_ids) != player_count or len(set(player_ids)) != player_count
        ):
            raise ValueError("player_ids must hold one unique ID per player")

        self.id = game_id or str(uuid.uuid4())
        self.stage = GameStage.DEALING
        self.rng = rng if rng is not None else random.Random(seed)
        self.events = emitter if emitter is not None else EventEmitter()
        self.current_round = 0
        self.loser_id: Optional[str] = None
        self.table = TableTop(self.rules.max_table_cards)
        self.discard_pile: List[Card] = []
        self._history: List[HistoryRecord] = []
        self._lead_seat: Optional[int] = None
        self._defender_seat: Optional[int] = None

        self.deck = Deck().shuffle(self.rng)
        hands = deal(self.deck, player_count, self.rules.hand_size)

        ids = list(player_ids) if player_ids is not None else None
        self._players: Dict[str, Player] = {}
        for seat, hand in enumerate(hands):
            player = Player(id=ids[seat], hand=hand) if ids else Player(hand=hand)
            self._players[player.id] = player
        self._seats: List[str] = list(self._players)

        # The next card fixes the trump and then goes to the bottom of the stock
        self.trump_card = self.deck.peek() or hands[-1].cards[-1]
        self.trump_suit = self.trump_card.suit
        self.deck.cycle_head_to_back()

        logger.debug(
            "Game %s dealt to %d players, trump %s", self.id, player_count, self.trump_card
        )
        self.events.emit(
            EngineEventType.GAME_CREATED,
            {
                "game_id": self.id,
                "player_ids": list(self._seats),
                "trump_suit": str(self.trump_suit),
                "trump_card": str(self.trump_card),
                "deck_remaining": self.deck.size,
            },
        )

        if len(self.active_players) <= 1:
            self._finish()
            return

        policy = first_player or self.rules.first_player_policy
        self._start_round(policy(hands, self.trump_suit) % player_count)

    # Read-only views

    @property
    def players(self) -> List[Player]:
        """Players in seat order."""
        return [self._players[pid] for pid in self._seats]

    @property
    def active_players(self) -> List[Player]:
        """Players still in play, in seat order."""
        return [p for p in self.players if not p.is_out]

    @property
    def defender(self) -> Optional[Player]:
        if self._defender_seat is None:
            return None
        return self._players[self._seats[self._defender_seat]]

    @property
    def lead_attacker(self) -> Optional[Player]:
        if self._lead_seat is None:
            return None
        return self._players[self._seats[self._lead_seat]]

    @property
    def attackers(self) -> List[Player]:
        return [p for p in self.players if p.is_attacker]

    @property
    def history(self) -> Tuple[HistoryRecord, ...]:
        return tuple(self._history)

    @property
    def is_over(self) -> bool:
        return self.stage == GameStage.GAME_OVER

    @property
    def is_draw(self) -> bool:
        """True if the game ended with every player out at once."""
        return self.is_over and self.loser_id is None

    def get_player(self, player_id: str) -> Player:
        """
        Raises:
            UnknownPlayer: If no player has `player_id`.
        """
        try:
            return self._players[player_id]
        except (KeyError, TypeError) as exc:
            raise UnknownPlayer(f"Player {player_id!r} doesn't exist") from exc

    def conservation_count(self) -> int:
        """Total number of cards accounted for across stock, hands, table and discard pile."""
        return (
            self.deck.size
            + sum(len(p.hand) for p in self.players)
            + len(self.table.cards())
            + len(self.discard_pile)
        )

    # Transitions

    def attack(self, player_id: str, card: CardLike) -> None:
        """
        Place an attacking card on the table.

        Raises:
            TableFull: The table already holds the maximum number of attacks.
            UnknownPlayer: No player has `player_id`.
            NotYourTurn: The player is not an attacker, or may not open the round.
            InsufficientDefenderCards: The defender could not cover one more attack.
            InvalidCard: `card` is not a known card.
            CardNotHeld: The attacker does not hold `card`.
            RankNotOnTable: The card's rank matches nothing on the table.
        """
        if self.table.is_full():
            raise TableFull(f"Table already holds {self.table.max_cards} attacks")
        player = self.get_player(player_id)
        card = self._validate_attack(player, card)
        defender = self.defender

        player.hand.take_card(card)
        self.table.add_attack(card, len(defender.hand))
        for attacker in self.players:
            attacker.has_passed = False

        logger.debug("%s attacks with %s", player.id, card)
        self._record(player.id, HistoryKind.ATTACK, {"card": str(card)})
        self.events.emit(
            EngineEventType.CARD_PLAYED,
            {
                "game_id": self.id,
                "player_id": player.id,
                "card": str(card),
                "remaining_hand_size": len(player.hand),
            },
        )

    def defend(self, player_id: str, attacked: CardLike, covering: CardLike) -> None:
        """
        Cover an attack on the table.

        Raises:
            UnknownPlayer: No player has `player_id`.
            NotYourTurn: The player is not defending a round in progress.
            InvalidCard: Either card is not a known card.
            CardNotHeld: The defender does not hold `covering`.
            NoSuchAttack: `attacked` is not an uncovered attack.
            IllegalCover: `covering` does not beat `attacked`.
        """
        player = self.get_player(player_id)
        if self.stage != GameStage.ROUND_IN_PROGRESS or not player.is_defender:
            raise NotYourTurn(f"Player {player_id} is not defending")
        attacked = self._coerce(attacked)
        covering = self._coerce(covering)
        if covering not in player.hand:
            raise CardNotHeld(f"Player doesn't hold {covering}")
        self.table.check_cover(attacked, covering, self.trump_suit)

        player.hand.take_card(covering)
        self.table.cover(attacked, covering, self.trump_suit)

        logger.debug("%s covers %s with %s", player.id, attacked, covering)
        self._record(
            player.id,
            HistoryKind.DEFEND,
            {"attacked": str(attacked), "covering": str(covering)},
        )
        self.events.emit(
            EngineEventType.CARD_COVERED,
            {
                "game_id": self.id,
                "player_id": player.id,
                "card": str(covering),
                "against_card": str(attacked),
                "remaining_hand_size": len(player.hand),
            },
        )
        self._resolve_if_settled()

    def pass_turn(self, player_id: str) -> None:
        """
        Declare that an attacker has nothing more to add this round.

        Raises:
            UnknownPlayer: No player has `player_id`.
            NotYourTurn: The player is not an attacker, or the round has not been opened.
        """
        player = self.get_player(player_id)
        self._require_attacker(player)
        if self.table.is_empty():
            raise NotYourTurn("The round must be opened with an attack")

        player.has_passed = True

        logger.debug("%s passes", player.id)
        self._record(player.id, HistoryKind.PASS, {})
        self.events.emit(
            EngineEventType.PLAYER_PASSED,
            {"game_id": self.id, "player_id": player.id},
        )
        self._resolve_if_settled()

    def concede(self, player_id: str) -> None:
        """
        The defender gives up the round and takes every card on the table.

        Raises:
            UnknownPlayer: No player has `player_id`.
            NotYourTurn: The player is not defending, or there is nothing to take.
        """
        player = self.get_player(player_id)
        if self.stage != GameStage.ROUND_IN_PROGRESS or not player.is_defender:
            raise NotYourTurn(f"Player {player_id} is not defending")
        if self.table.is_empty():
            raise NotYourTurn("There is nothing on the table to take")

        cards = [str(c) for c in self.table.cards()]
        logger.debug("%s concedes and takes %d cards", player.id, len(cards))
        self._record(player.id, HistoryKind.CONCEDE, {"cards": cards})
        self.events.emit(
            EngineEventType.PLAYER_CONCEDED,
            {"game_id": self.id, "player_id": player.id, "card_count": len(cards)},
        )
        self.resolve_round(RoundOutcome.TOOK_CARDS)

    def resolve_round(self, outcome: RoundOutcome) -> None:
        """
        End the current round, refill hands and start the next one.

        `DEFENDED` discards the table for good and hands the lead to the
        defender. `TOOK_CARDS` moves the table into the defender's hand and
        the lead passes over them to the next player.

        Raises:
            NotYourTurn: No round with cards on the table is in progress, or
                `DEFENDED` was requested while attacks are still uncovered.
        """
        if self.stage != GameStage.ROUND_IN_PROGRESS or self.table.is_empty():
            raise NotYourTurn("No round is waiting to be resolved")
        if outcome == RoundOutcome.DEFENDED and not self.table.all_covered():
            raise NotYourTurn("Uncovered attacks remain on the table")

        self.stage = GameStage.ROUND_RESOLVING
        defender = self.defender
        defender_seat = self._defender_seat

        cards = self.table.clear()
        if outcome == RoundOutcome.DEFENDED:
            self.discard_pile.extend(cards)
        else:
            for card in cards:
                defender.hand.give_card(card)

        drawn = self._refill(self._lead_seat)
        knocked_out = self._knock_out()

        logger.info(
            "Game %s round %d resolved: %s", self.id, self.current_round, outcome.name
        )
        self._record(
            None,
            HistoryKind.ROUND_RESOLVED,
            {
                "round": self.current_round,
                "outcome": outcome.name,
                "defender": defender.id,
                "cards": [str(c) for c in cards],
                "drawn": drawn,
                "out": knocked_out,
            },
        )
        self.events.emit(
            EngineEventType.ROUND_ENDED,
            {
                "game_id": self.id,
                "round_number": self.current_round,
                "outcome": outcome.name,
                "defender_won": outcome == RoundOutcome.DEFENDED,
                "deck_remaining": self.deck.size,
            },
        )

        if len(self.active_players) <= 1:
            self._finish()
            return

        if outcome == RoundOutcome.DEFENDED and not defender.is_out:
            next_lead = defender_seat
        else:
            next_lead = self._next_active_seat(defender_seat)
        self._start_round(next_lead)

    # Helpers for hosting services and bots

    def legal_attacks(self, player_id: str) -> List[Card]:
        """Cards `player_id` could attack with right now."""
        player = self.get_player(player_id)
        legal = []
        for card in player.hand:
            try:
                self._validate_attack(player, card)
            except DurakError:
                continue
            legal.append(card)
        return legal

    def legal_covers(self, player_id: str, attacked: CardLike) -> List[Card]:
        """Cards `player_id` could cover `attacked` with right now."""
        player = self.get_player(player_id)
        if self.stage != GameStage.ROUND_IN_PROGRESS or not player.is_defender:
            return []
        attacked = self._coerce(attacked)
        legal = []
        for card in player.hand:
            try:
                self.table.check_cover(attacked, card, self.trump_suit)
            except DurakError:
                continue
            legal.append(card)
        return legal

    # Snapshots

    def serialize(self, viewer_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Snapshot of the game for transport or persistence.

        Only the viewer's own hand is listed; every other hand, and every
        hand when no viewer is given, is reduced to its size.

        Raises:
            UnknownPlayer: If `viewer_id` is given but is not a player.
        """
        if viewer_id is not None:
            self.get_player(viewer_id)

        players = []
        for player in self.players:
            entry = {
                "id": player.id,
                "hand_size": len(player.hand),
                "is_attacker": player.is_attacker,
                "is_defender": player.is_defender,
                "starts_round": player.starts_round,
                "is_out": player.is_out,
                "has_passed": player.has_passed,
            }
            if player.id == viewer_id:
                entry["hand"] = [str(c) for c in player.hand.sorted(self.trump_suit)]
            players.append(entry)

        return {
            "game_id": self.id,
            "viewer_id": viewer_id,
            "stage": self.stage.name,
            "current_round": self.current_round,
            "trump_suit": str(self.trump_suit),
            "trump_card": str(self.trump_card),
            "deck_remaining": self.deck.size,
            "discard_pile_size": len(self.discard_pile),
            "table": self.table.to_list(),
            "attackers": [p.id for p in self.attackers],
            "defender": self.defender.id if self.defender else None,
            "lead_attacker": self.lead_attacker.id if self.lead_attacker else None,
            "players": players,
            "loser_id": self.loser_id,
            "is_draw": self.is_draw,
            "rules": self.rules.to_dict(),
            "history": [record.to_dict() for record in self._history],
        }

    def to_json(self, viewer_id: Optional[str] = None) -> str:
        return json.dumps(self.serialize(viewer_id), ensure_ascii=False)

    # Internals

    def _coerce(self, card: CardLike) -> Card:
        if isinstance(card, Card):
            return card
        if isinstance(card, str):
            return Card.from_str(card)
        raise InvalidCard(f"Not a card: {card!r}")

    def _require_attacker(self, player: Player) -> None:
        if self.stage != GameStage.ROUND_IN_PROGRESS or not player.is_attacker:
            raise NotYourTurn(f"Player {player.id} is not attacking")

    def _validate_attack(self, player: Player, card: CardLike) -> Card:
        self._require_attacker(player)
        if self.table.is_empty() and not player.starts_round:
            raise NotYourTurn("Only the lead attacker may open the round")
        self.table.check_capacity(len(self.defender.hand))
        card = self._coerce(card)
        if card not in player.hand:
            raise CardNotHeld(f"Player doesn't hold {card}")
        self.table.check_rank(card)
        return card

    def _record(self, actor: Optional[str], kind: HistoryKind, payload: dict) -> None:
        self._history.append(
            HistoryRecord(
                sequence=len(self._history) + 1,
                actor=actor,
                kind=kind,
                payload=payload,
            )
        )

    def _next_active_seat(self, seat: int) -> int:
        """The first seat after `seat`, going left, whose player is still in play."""
        count = len(self._seats)
        for step in range(1, count + 1):
            candidate = (seat + step) % count
            if not self._players[self._seats[candidate]].is_out:
                return candidate
        return seat

    def _start_round(self, lead_seat: int) -> None:
        defender_seat = self._next_active_seat(lead_seat)
        for player in self.players:
            player.clear_roles()
        for seat, pid in enumerate(self._seats):
            player = self._players[pid]
            if not player.is_out and seat != defender_seat:
                player.is_attacker = True
        self._players[self._seats[lead_seat]].starts_round = True
        self._players[self._seats[defender_seat]].is_defender = True

        self._lead_seat = lead_seat
        self._defender_seat = defender_seat
        self.current_round += 1
        self.stage = GameStage.ROUND_IN_PROGRESS

        logger.debug(
            "Round %d: %s leads against %s",
            self.current_round,
            self.lead_attacker.id,
            self.defender.id,
        )
        self.events.emit(
            EngineEventType.ROUND_STARTED,
            {
                "game_id": self.id,
                "round_number": self.current_round,
                "attacker": self.lead_attacker.id,
                "defender": self.defender.id,
            },
        )

    def _attack_possible(self) -> bool:
        if self.table.is_full() or not len(self.defender.hand):
            return False
        return any(len(p.hand) for p in self.attackers)

    def _resolve_if_settled(self) -> None:
        if not self.table.all_covered():
            return
        done = all(p.has_passed or not len(p.hand) for p in self.attackers)
        if done or not self._attack_possible():
            self.resolve_round(RoundOutcome.DEFENDED)

    def _refill(self, lead_seat: int) -> Dict[str, int]:
        """Top up hands in seat order from the round's lead attacker."""
        drawn = {}
        count = len(self._seats)
        for step in range(count):
            player = self._players[self._seats[(lead_seat + step) % count]]
            if player.is_out or self.deck.is_empty():
                continue
            missing = self.rules.hand_size - len(player.hand)
            if missing <= 0:
                continue
            cards = self.deck.draw(missing)
            for card in cards:
                player.hand.give_card(card)
            drawn[player.id] = len(cards)
        return drawn

    def _knock_out(self) -> List[str]:
        if not self.deck.is_empty():
            return []
        knocked_out = []
        for player in self.players:
            if not player.is_out and not len(player.hand):
                player.is_out = True
                player.clear_roles()
                knocked_out.append(player.id)
                logger.info("Player %s is out", player.id)
                self.events.emit(
                    EngineEventType.PLAYER_OUT,
                    {"game_id": self.id, "player_id": player.id},
                )
        return knocked_out

    def _finish(self) -> None:
        remaining = self.active_players
        self.loser_id = remaining[0].id if remaining else None
        self.stage = GameStage.GAME_OVER
        for player in self.players:
            player.clear_roles()
        self._lead_seat = None
        self._defender_seat = None

        if self.loser_id is None:
            logger.info("Game %s ended in a draw", self.id)
        else:
            logger.info("Game %s ended, durak is %s", self.id, self.loser_id)
        self.events.emit(
            EngineEventType.GAME_ENDED,
            {
                "game_id": self.id,
                "loser_id": self.loser_id,
                "is_draw": self.loser_id is None,
                "round_count": self.current_round,
            },
        )


@dataclass(frozen=True)
class GameCreation:
    """
    Result of `create_game`: either a game or the kind of error that prevented it.
    """

    game: Optional[Game] = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.game is not None


def create_game(player_count: int, **kwargs) -> GameCreation:
    """
    Build a game, reporting invalid configuration as a value instead of raising.

    Accepts the same arguments as `Game`.
    """
    try:
        return GameCreation(game=Game(player_count, **kwargs))
    except DurakError as exc:
        logger.debug("Game creation failed: %s", exc)
        return GameCreation(error=exc.kind, message=str(exc))
