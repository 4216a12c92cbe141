"""Round engine with state machine."""

import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from random import Random
from typing import Callable, Sequence

from transitions import Machine

from parlor import achievements
from parlor.agents import Agent, AgentStatus
from parlor.cards import Shoe
from parlor.game.events import EventEmitter, EventType, GameEvent
from parlor.game.settlement import (
    AgentOutcome,
    AgentSnapshot,
    RoundResult,
    SessionTally,
    apply_to_record,
    result_for,
    settle,
    tally,
)
from parlor.game.state import RoundState
from parlor.policies import choose_bet, highest_visible_card, should_hit
from parlor.records import RecordStore
from parlor.rules import TableRules

logger = logging.getLogger(__name__)


class GameQuit(Exception):
    """Raised after the human asks to quit and pending stats are flushed."""


class HumanAction(Enum):
    """Turn actions the human can hand to the engine."""

    HIT = auto()
    STAND = auto()
    DISCARD = auto()
    QUIT = auto()


class HumanController(ABC):
    """Source of the human agent's decisions (normally a terminal prompt)."""

    @abstractmethod
    def bet_input(self, agent: Agent, default: int) -> str:
        """Return the raw bet text; empty means take the default."""

    @abstractmethod
    def choose_action(self, agent: Agent, engine: "RoundEngine") -> HumanAction:
        """Return the next turn action."""

    def play_again(self, engine: "RoundEngine") -> bool:
        """Ask whether to deal another round."""
        return True


def parse_bet(raw: str, chips: int, default: int) -> int:
    """
    Turn raw bet input into a legal stake.

    Empty or non-numeric input falls back to the default; numbers are
    clamped into [1, chips].
    """
    text = raw.strip()
    fallback = max(1, min(chips, default))
    if not text:
        return fallback
    try:
        parsed = int(text)
    except ValueError:
        return fallback
    return max(1, min(parsed, chips))


class RoundEngine:
    """
    Turn-based table engine driven by a state machine.

    One human seat and any number of computer agents share a shoe. Each
    round collects bets, deals two passes, runs every agent's turn to a stand
    or a bust, then settles and records statistics. The engine is UI-agnostic:
    everything observable is emitted as a GameEvent.
    """

    # State machine states
    STATES = [s.name.lower() for s in RoundState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "bets_collected", "source": "awaiting_bets", "dest": "dealing"},
        {"trigger": "cards_dealt", "source": "dealing", "dest": "agent_turns"},
        {"trigger": "turns_finished", "source": "agent_turns", "dest": "settling"},
        {"trigger": "settled", "source": "settling", "dest": "round_complete"},
        {"trigger": "next_round", "source": "round_complete", "dest": "awaiting_bets"},
        {"trigger": "end_game", "source": "*", "dest": "game_over"},
    ]

    def __init__(
        self,
        agents: Sequence[Agent],
        store: RecordStore,
        rules: TableRules | None = None,
        human: HumanController | None = None,
        rng: Random | None = None,
        shoe: Shoe | None = None,
    ) -> None:
        """
        Initialize a new table.

        Args:
            agents: Seats in turn order
            store: PlayerRecord store, saved after every settlement
            rules: Table settings (uses defaults if not provided)
            human: Decision source for human agents
            rng: Random number generator for bets, erratic play and shuffling
            shoe: Pre-built shoe (built and shuffled from rules if omitted)
        """
        if any(agent.is_human for agent in agents) and human is None:
            raise ValueError("A human agent needs a HumanController")

        self.rules = rules or TableRules()
        self.rng = rng or Random()
        if shoe is None:
            shoe = Shoe(num_decks=self.rules.num_decks, rng=self.rng)
            shoe.shuffle()
        self.shoe = shoe

        self.agents: list[Agent] = list(agents)
        self.store = store
        self.human = human
        self.events = EventEmitter()
        self.round_number = 0
        self.transactions: list[tuple[str, int]] = []
        self.results: list[RoundResult] = []
        self._round_agents: list[Agent] = []

        for agent in self.agents:
            self.store.get(agent.name)

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="awaiting_bets",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    @property
    def is_over(self) -> bool:
        return self.state is RoundState.GAME_OVER

    @property
    def round_agents(self) -> list[Agent]:
        """Agents dealt into the current round."""
        return list(self._round_agents)

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    # Round lifecycle

    def run(self) -> list[RoundResult]:
        """
        Play rounds until fewer than two agents remain or the human stops.

        Raises:
            GameQuit: The human quit mid-round (stats are already saved)
        """
        self.events.emit_new(EventType.GAME_STARTED, agents=[a.name for a in self.agents])
        while not self.is_over:
            self.play_round()
            if self.is_over:
                break
            if self.human is not None and not self.human.play_again(self):
                self.end_game()

        self._persist()
        self.events.emit_new(
            EventType.GAME_ENDED,
            leaderboard=[(a.name, a.chips) for a in self.leaderboard()],
        )
        return list(self.results)

    def play_round(self) -> RoundResult:
        """Run one full round from betting through settlement."""
        if self.state is not RoundState.AWAITING_BETS:
            raise RuntimeError(f"Cannot start a round while {self.state}")

        self._prepare_round()
        self._collect_bets()
        self.bets_collected()

        self._deal_initial_cards()
        self.cards_dealt()

        self._play_turns()
        self.turns_finished()

        result = self._settle_round()
        self.settled()

        self.remove_bankrupt()
        if not self.is_over:
            self.next_round()
        return result

    def _prepare_round(self) -> None:
        """Return last round's cards to the discard pile and top up the shoe."""
        self.round_number += 1
        for agent in self.agents:
            for card in agent.reset_round():
                self.shoe.discard_card(card)

        if self.shoe.needs_reshuffle(self.rules.low_card_threshold):
            self.shoe.build()
            self.shoe.shuffle()
            self.events.emit_new(EventType.SHOE_SHUFFLED, remaining=self.shoe.remaining_count())

        self._round_agents = [agent for agent in self.agents if agent.is_active]
        self.events.emit_new(
            EventType.ROUND_STARTED,
            round=self.round_number,
            agents=[a.name for a in self._round_agents],
        )

    def _collect_bets(self) -> None:
        for agent in self._round_agents:
            if agent.is_human:
                amount = self._human_bet(agent)
            else:
                amount = choose_bet(
                    agent.personality,
                    agent.chips,
                    self.rules.table_min,
                    self.store.get(agent.name).current_streak,
                    self.rng,
                )
            agent.stake(amount)
            self.transactions.append((agent.name, -amount))
            self.events.emit_new(
                EventType.BET_PLACED,
                agent=agent.name,
                amount=amount,
                chips=agent.chips,
            )

    def _human_bet(self, agent: Agent) -> int:
        default = agent.last_bet if agent.last_bet > 0 else self.rules.table_min
        raw = self.human.bet_input(agent, default)
        amount = parse_bet(raw, agent.chips, default)
        if raw.strip() and not raw.strip().lstrip("+-").isdigit():
            self.events.emit_new(
                EventType.INVALID_ACTION,
                agent=agent.name,
                message=f"Invalid bet '{raw.strip()}', using {amount}",
            )
        return amount

    def _deal_initial_cards(self) -> None:
        """Two passes of one card each, then stand every natural."""
        for _ in range(2):
            for agent in self._round_agents:
                card = self.shoe.deal_one()
                agent.receive(card)
                self.events.emit_new(
                    EventType.CARD_DEALT,
                    agent=agent.name,
                    card=str(card),
                    upcard=len(agent.hand) == 1,
                )

        for agent in self._round_agents:
            if agent.hand.is_blackjack:
                agent.stand()
                self.events.emit_new(EventType.AGENT_BLACKJACK, agent=agent.name)

        self.events.emit_new(EventType.DEAL_COMPLETE, round=self.round_number)

    def _play_turns(self) -> None:
        for agent in self._round_agents:
            if agent.is_done:
                continue
            self.events.emit_new(EventType.TURN_STARTED, agent=agent.name, value=agent.value)
            if agent.is_human:
                self._human_turn(agent)
            else:
                self._computer_turn(agent)

    def _computer_turn(self, agent: Agent) -> None:
        while not agent.is_done:
            upcard = highest_visible_card(self._round_agents, agent.name)
            if should_hit(agent.personality, agent.hand, upcard, self.rng):
                self.hit(agent)
            else:
                self.stand(agent)

    def _human_turn(self, agent: Agent) -> None:
        while not agent.is_done:
            action = self.human.choose_action(agent, self)
            if action is HumanAction.HIT:
                self.hit(agent)
            elif action is HumanAction.STAND:
                self.stand(agent)
            elif action is HumanAction.DISCARD:
                self.discard(agent)
            elif action is HumanAction.QUIT:
                self.quit()

    # Agent actions

    def hit(self, agent: Agent) -> None:
        """Deal one card to an agent, busting it above 21."""
        card = self.shoe.deal_one()
        agent.receive(card)
        self.events.emit_new(
            EventType.AGENT_HIT,
            agent=agent.name,
            card=str(card),
            value=agent.value,
        )
        if agent.value > 21:
            agent.bust()
            self.events.emit_new(EventType.AGENT_BUSTS, agent=agent.name, value=agent.value)

    def stand(self, agent: Agent) -> None:
        agent.stand()
        self.events.emit_new(EventType.AGENT_STAND, agent=agent.name, value=agent.value)

    def discard(self, agent: Agent) -> None:
        """Move the agent's most recent card to the discard pile."""
        card = agent.hand.remove_last()
        if card is None:
            self.events.emit_new(
                EventType.INVALID_ACTION,
                agent=agent.name,
                message="Hand empty, cannot discard",
            )
            return
        self.shoe.discard_card(card)
        self.events.emit_new(
            EventType.CARD_DISCARDED,
            agent=agent.name,
            card=str(card),
            value=agent.value,
        )

    def quit(self) -> None:
        """Flush stats and abandon the game."""
        self._persist()
        self.end_game()
        self.events.emit_new(EventType.GAME_ENDED, reason="quit")
        raise GameQuit()

    # Settlement

    def _settle_round(self) -> RoundResult:
        """Pay winners, update records and unlock achievements."""
        snapshots = [
            AgentSnapshot(
                name=agent.name,
                stake=agent.bet,
                value=agent.value,
                busted=agent.value > 21,
                natural=agent.hand.is_blackjack,
                stood=agent.status is AgentStatus.STOOD,
            )
            for agent in self._round_agents
        ]
        settlement = settle(snapshots)

        for agent in self._round_agents:
            payout = settlement.payouts.get(agent.name, 0)
            if payout:
                agent.chips += payout
                self.transactions.append((agent.name, payout))
                self.events.emit_new(
                    EventType.PAYOUT,
                    agent=agent.name,
                    amount=payout,
                    chips=agent.chips,
                )

        by_name = {agent.name: agent for agent in self._round_agents}
        outcomes = tuple(
            AgentOutcome(
                name=s.name,
                stake=s.stake,
                payout=settlement.payouts.get(s.name, 0),
                value=s.value,
                natural=s.natural,
                busted=s.busted,
                stood=s.stood,
                result=result_for(s.name, settlement.winners),
                chips=by_name[s.name].chips,
            )
            for s in snapshots
        )
        result = RoundResult(
            round_number=self.round_number,
            pot=settlement.pot,
            winners=settlement.winners,
            outcomes=outcomes,
        )
        self.results.append(result)

        if settlement.forfeited:
            self.events.emit_new(EventType.POT_FORFEITED, pot=settlement.pot)

        shared = len(settlement.winners) > 1
        for outcome in outcomes:
            apply_to_record(self.store.get(outcome.name), outcome)
            if outcome.won:
                self.events.emit_new(
                    EventType.AGENT_WINS,
                    agent=outcome.name,
                    value=outcome.value,
                    payout=outcome.payout,
                    shared=shared,
                )
            else:
                self.events.emit_new(
                    EventType.AGENT_LOSES,
                    agent=outcome.name,
                    value=outcome.value,
                    payout=outcome.payout,
                )

        for outcome in outcomes:
            record = self.store.get(outcome.name)
            earned = achievements.unlock_new(record, outcome, result)
            for key in earned:
                self.events.emit_new(
                    EventType.ACHIEVEMENT_UNLOCKED,
                    agent=outcome.name,
                    achievement=key,
                    description=achievements.describe(key),
                )
            if earned:
                self._persist()

        self._persist()
        self.events.emit_new(
            EventType.ROUND_ENDED,
            round=self.round_number,
            pot=settlement.pot,
            winners=sorted(settlement.winners),
        )
        return result

    def _persist(self) -> None:
        if not self.store.save():
            self.events.emit_new(EventType.PERSISTENCE_FAILED, path=self.store.path)

    def remove_bankrupt(self) -> list[Agent]:
        """Drop agents with no chips; end the game below two agents."""
        bankrupt = [agent for agent in self.agents if agent.chips <= 0]
        self.agents = [agent for agent in self.agents if agent.chips > 0]
        for agent in bankrupt:
            for card in agent.reset_round():
                self.shoe.discard_card(card)
            logger.info("%s is bankrupt and leaves the table", agent.name)
            self.events.emit_new(EventType.AGENT_ELIMINATED, agent=agent.name)

        if len(self.agents) < 2 and not self.is_over:
            self.end_game()
        return bankrupt

    def leaderboard(self) -> list[Agent]:
        """Remaining agents, richest first."""
        return sorted(self.agents, key=lambda agent: agent.chips, reverse=True)

    def recent_transactions(self, n: int = 10) -> list[tuple[str, int]]:
        return self.transactions[-n:]

    def session_stats(self) -> dict[str, SessionTally]:
        """Per-agent wins, losses, naturals and chips for this session."""
        return tally(self.results)
