"""Terminal front end: renders engine events and prompts the human seat."""

import time
from dataclasses import replace
from typing import Callable, Iterable, Mapping

from config import GameConfig
from parlor import achievements
from parlor.agents import Agent
from parlor.game.engine import HumanAction, HumanController, RoundEngine
from parlor.game.events import EventType, GameEvent
from parlor.game.settlement import SessionTally
from parlor.records import PlayerRecord, RecordStore
from parlor.rules import ALLOWED_DECK_COUNTS

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

ACTION_KEYS = {
    "h": HumanAction.HIT,
    "s": HumanAction.STAND,
    "d": HumanAction.DISCARD,
    "q": HumanAction.QUIT,
}

HELP_TEXT = (
    "\nActions:\n"
    "  h = hit\n"
    "  s = stand\n"
    "  d = discard card (remove last)\n"
    "  v = view profiles\n"
    "  q = quit\n"
    "  ? = help"
)


class Dealer:
    """Rotating flavor lines spoken to the human."""

    def __init__(self) -> None:
        self.good_luck = [
            "Good luck! May the cards favor you.",
            "Let's see if lady luck is smiling at you.",
            "Shuffle up and deal! Time to win big.",
        ]
        self.encouragement = [
            "You're close to 21, careful now!",
            "Nice hand, don't push your luck!",
            "Almost there, tension is high!",
        ]
        self.snarky = [
            "Ouch! That must hurt.",
            "Better luck next time, rookie.",
            "I knew that wasn't going to work out.",
        ]

    @staticmethod
    def _next(lines: list[str]) -> str:
        line = lines.pop(0)
        lines.append(line)
        return f"Dealer: {line}"

    def say_good_luck(self) -> str:
        return self._next(self.good_luck)

    def say_encouragement(self) -> str:
        return self._next(self.encouragement)

    def say_snarky(self) -> str:
        return self._next(self.snarky)


def describe_hand(agent: Agent, upcard_mode: bool, reveal_all: bool = False) -> str:
    """
    Render one agent's hand for the table view.

    Human hands and revealed hands show every card and the value. Computer
    hands show only the first card in upcard mode, otherwise everything but
    the first card.
    """
    if not agent.hand.cards:
        return "(no cards)"
    if agent.is_human or reveal_all:
        return f"{agent.hand} (value: {agent.value})"

    cards = agent.hand.cards
    if upcard_mode:
        shown = str(cards[0])
        if len(cards) > 1:
            shown += ", [hidden]"
    else:
        shown = ", ".join(["[hidden]"] + [str(card) for card in cards[1:]])
    return f"{shown} (value: ???)"


def render_table(agents: Iterable[Agent], upcard_mode: bool, reveal_all: bool = False) -> str:
    lines = ["", "------- TABLE -------"]
    for agent in agents:
        lines.append(
            f"{agent.name} | chips: {agent.chips} | hand: "
            f"{describe_hand(agent, upcard_mode, reveal_all)}"
        )
    lines.append("---------------------")
    return "\n".join(lines)


def render_scoreboard(agents: Iterable[Agent]) -> str:
    rule = "-" * 63
    lines = [rule, f"{'PLAYER':<20}{'CHIPS':<8}{'RESULT':<10}{'HAND':<25}", rule]
    for agent in agents:
        if agent.value == 21:
            result = "21"
        else:
            result = str(agent.status)
        if agent.hand.cards:
            hand = f"{agent.value} ({', '.join(card.short for card in agent.hand)})"
        else:
            hand = "(no cards)"
        lines.append(f"{agent.name:<20}{agent.chips:<8}{result:<10}{hand:<25}")
    lines.append(rule)
    return "\n".join(lines)


def format_record(name: str, record: PlayerRecord, full: bool = False) -> str:
    text = (
        f"{name} : wins={record.wins} losses={record.losses} ties={record.ties} "
        f"total_games={record.total_games} best_streak={record.best_streak}"
    )
    if full:
        text += f" current_streak={record.current_streak}"
    text += (
        f" biggest_win={record.biggest_win} blackjacks={record.blackjacks} "
        f"achievements=[{', '.join(sorted(record.achievements))}]"
    )
    return text


def format_achievements(name: str, record: PlayerRecord) -> str:
    lines = [f"\n=== Achievements for {name} ===", "Unlocked:"]
    if record.achievements:
        for key in sorted(record.achievements):
            lines.append(f"  + {key} - {achievements.describe(key)}")
    else:
        lines.append("  (none)")

    lines.append("\nLocked:")
    locked = [key for key in achievements.CATALOG if key not in record.achievements]
    for key in locked:
        lines.append(f"  x {key} - {achievements.describe(key)}")
    if not locked:
        lines.append("  (none, all unlocked!)")
    lines.append("===============================")
    return "\n".join(lines)


def render_session_stats(stats: Mapping[str, SessionTally]) -> str:
    lines = ["\n===== SESSION STATS ====="]
    for name, entry in stats.items():
        lines.append(
            f"{name} -> wins: {entry.wins}, losses: {entry.losses}, "
            f"blackjacks: {entry.blackjacks}, chips: {entry.chips}"
        )
    lines.append("=========================")
    return "\n".join(lines)


class ConsoleView:
    """Prints engine events as they happen."""

    def __init__(
        self,
        engine: RoundEngine,
        upcard_mode: bool = False,
        delay: float = 0.0,
        output: OutputFn = print,
        dealer: Dealer | None = None,
    ) -> None:
        self.engine = engine
        self.upcard_mode = upcard_mode
        self.delay = delay
        self.output = output
        self.dealer = dealer or Dealer()
        engine.subscribe(self.handle)

    def _say(self, text: str) -> None:
        self.output(text)
        if self.delay:
            time.sleep(self.delay)

    def _is_human(self, name: str) -> bool:
        return any(agent.is_human and agent.name == name for agent in self.engine.agents)

    def _npc_line(self, name: str) -> None:
        for agent in self.engine.agents:
            if agent.name == name and not agent.is_human:
                line = agent.next_line()
                if line:
                    self._say(f"{agent.name}: {line}")

    def handle(self, event: GameEvent) -> None:
        data = event.data
        kind = event.event_type

        if kind is EventType.ROUND_STARTED:
            self._say(f"================== ROUND {data['round']} ==================")
            if any(agent.is_human for agent in self.engine.agents):
                self._say(self.dealer.say_good_luck())
        elif kind is EventType.SHOE_SHUFFLED:
            self._say("The shoe is low: fresh decks shuffled in.")
        elif kind is EventType.BET_PLACED:
            self._say(f"{data['agent']:>16} bets {data['amount']} chips.")
        elif kind is EventType.CARD_DEALT:
            if self._is_human(data["agent"]):
                self._say(f"Dealt to You: {data['card']}")
            elif self.upcard_mode and data["upcard"]:
                self._say(f"{data['agent']} receives upcard: {data['card']}")
            else:
                self._say(f"{data['agent']} receives a card.")
        elif kind is EventType.AGENT_BLACKJACK:
            self._say(f"{data['agent']} has a natural blackjack!")
        elif kind is EventType.DEAL_COMPLETE:
            self._say(render_table(self.engine.round_agents, self.upcard_mode))
        elif kind is EventType.AGENT_HIT:
            if self._is_human(data["agent"]):
                self._say(f"You drew: {data['card']}")
            else:
                self._npc_line(data["agent"])
                self._say(f"{data['agent']} draws: {data['card']} -> value={data['value']}")
        elif kind is EventType.AGENT_STAND:
            if self._is_human(data["agent"]):
                self._say(f"You chose to stand at {data['value']}.")
            else:
                self._say(f"{data['agent']} stands at {data['value']}")
        elif kind is EventType.AGENT_BUSTS:
            self._say(f"{data['agent']} busted with {data['value']}!")
        elif kind is EventType.CARD_DISCARDED:
            self._say(f"Discarded {data['card']} to discard pile.")
        elif kind is EventType.INVALID_ACTION:
            self._say(data.get("message", "Invalid action."))
        elif kind is EventType.PAYOUT:
            self._say(f"{data['agent']} receives payout: {data['amount']} chips.")
        elif kind is EventType.POT_FORFEITED:
            self._say("Everyone busted. House keeps the pot.")
        elif kind is EventType.AGENT_LOSES and self._is_human(data["agent"]):
            self._say(self.dealer.say_snarky())
        elif kind is EventType.ACHIEVEMENT_UNLOCKED and self._is_human(data["agent"]):
            self._say(f"\n>>> Achievement Unlocked: {data['achievement']}!\n    {data['description']}")
        elif kind is EventType.ROUND_ENDED:
            self._round_summary(data)
        elif kind is EventType.AGENT_ELIMINATED:
            self._say(f"{data['agent']} is bankrupt and removed from game.")
        elif kind is EventType.PERSISTENCE_FAILED:
            self._say(f"Warning: cannot save player stats to {data['path']}")
        elif kind is EventType.GAME_ENDED and "leaderboard" in data:
            self._say("\nFinal stats and leaderboard:")
            for rank, (name, chips) in enumerate(data["leaderboard"], start=1):
                self._say(f"{rank}. {name} - chips: {chips}")
            self._say("Thank you for playing!")

    def _round_summary(self, data: dict) -> None:
        self._say(f"\nPot total: {data['pot']} chips.")
        recent = ", ".join(f"{amount:+d}" for _, amount in self.engine.recent_transactions(12))
        self._say(f"Recent transactions (oldest->newest): {recent}")
        self._say("\n--- Round Results ---")
        for agent in self.engine.round_agents:
            line = f"{agent.name}: hand({agent.hand}) value={agent.value}"
            if agent.value > 21:
                line += " [BUSTED]"
            line += f" | chips={agent.chips} | wagers:{','.join(map(str, agent.wager_history))}"
            self._say(line)
        self._say(render_scoreboard(self.engine.round_agents))
        shoe = self.engine.shoe
        self._say(
            f"Shoe: {shoe.remaining_count()} undealt, {shoe.discard_count} discarded, "
            f"{len(shoe.seen)} distinct cards seen since the last fresh build"
        )
        self._say(f"============== END ROUND {data['round']} ==============\n")
        self._say(render_session_stats(self.engine.session_stats()))


class ConsoleController(HumanController):
    """Reads the human's bets and actions from the terminal."""

    def __init__(
        self,
        store: RecordStore,
        starting_chips: int,
        input_fn: InputFn | None = None,
        output: OutputFn = print,
        dealer: Dealer | None = None,
    ) -> None:
        self.store = store
        self.starting_chips = starting_chips
        self.input = input_fn or input
        self.output = output
        self.dealer = dealer or Dealer()

    def bet_input(self, agent: Agent, default: int) -> str:
        return self.input(
            f"You have {agent.chips} chips. Press ENTER to bet {min(default, agent.chips)} "
            f"or type an amount (1-{agent.chips}): "
        )

    def choose_action(self, agent: Agent, engine: RoundEngine) -> HumanAction:
        while True:
            self.output(f"\nYour hand: {agent.hand} (value: {agent.value})")
            if 17 <= agent.value < 21:
                self.output(self.dealer.say_encouragement())
            choice = self.input(
                "Choose action: (h)it, (s)tand, (d)iscard, (v)iew profiles, (q)uit, (?)help: "
            ).strip().lower()
            key = choice[:1]
            if key in ACTION_KEYS:
                return ACTION_KEYS[key]
            if key == "v":
                self.profiles_menu(engine)
            elif key == "?":
                self.output(HELP_TEXT)
            else:
                self.output("Unknown option. Type ? for help.")

    def play_again(self, engine: RoundEngine) -> bool:
        answer = self.input("Play another round? (y/n) or (p) profiles: ").strip().lower()
        if answer.startswith("p"):
            self.profiles_menu(engine)
        return not answer.startswith("n")

    def _ask_name(self, prompt: str, default: str | None = None) -> str:
        name = self.input(prompt).strip()
        return name or (default or "")

    def profiles_menu(self, engine: RoundEngine | None = None) -> None:
        """Inspect or reset stored profiles until the user goes back."""
        agents = engine.agents if engine is not None else []
        while True:
            self.output(
                "\n--- Player Profiles Menu ---\n"
                "1) View all profiles\n2) View specific profile\n3) Reset a profile's stats\n"
                "4) Reset ALL stats\n5) Back to game\n6) View achievements for a player\n"
                "7) View chip map\n8) View wager history for a player"
            )
            try:
                choice = int(self.input("Choose: ").strip())
            except ValueError:
                continue

            if choice == 1:
                self.output("\n-- All Profiles --")
                for name, record in self.store.all().items():
                    self.output(format_record(name, record))
            elif choice == 2:
                name = self._ask_name("Enter player name: ")
                record = self.store.find(name)
                if record is None:
                    self.output(f"No profile named '{name}'.")
                else:
                    self.output(format_record(name, record, full=True))
            elif choice == 3:
                name = self._ask_name("Enter player name to reset: ")
                if self.store.reset(name):
                    for agent in agents:
                        if agent.name == name:
                            agent.chips = self.starting_chips
                    self.output(f"Profile reset for {name}.")
                else:
                    self.output(f"No profile named '{name}'.")
            elif choice == 4:
                self.store.reset_all()
                for agent in agents:
                    agent.chips = self.starting_chips
                    agent.wager_history.clear()
                self.output("All profiles reset.")
            elif choice == 5:
                return
            elif choice == 6:
                name = self._ask_name("Enter player name for achievements (default: You): ", "You")
                record = self.store.find(name)
                if record is None:
                    self.output(f"No profile named '{name}'.")
                else:
                    self.output(format_achievements(name, record))
            elif choice == 7:
                self.output("\n--- Chip Map ---")
                for agent in agents:
                    self.output(f"{agent.name} : {agent.chips}")
            elif choice == 8:
                name = self._ask_name("Enter player name for wager history (default: You): ", "You")
                matches = [agent for agent in agents if agent.name == name]
                if not matches:
                    self.output(f"No player named '{name}'.")
                for agent in matches:
                    self.output(
                        f"Wager history for {name}: {', '.join(map(str, agent.wager_history))}"
                    )
            else:
                self.output("Unknown choice.")


def startup_prompt(game: GameConfig, input_fn: InputFn | None = None) -> GameConfig:
    """Ask for shoe size, text speed and upcard mode; blank keeps the current value."""
    input_fn = input_fn or input
    updates: dict = {}

    raw = input_fn(f"Choose shoe size (1,2,4,6) decks [default {game.num_decks}]: ").strip()
    if raw:
        try:
            decks = int(raw)
        except ValueError:
            decks = 1
        updates["num_decks"] = decks if decks in ALLOWED_DECK_COUNTS else 1

    raw = input_fn(f"Choose text speed: 0=Fast, 1=Normal, 2=Slow [default {game.text_speed}]: ").strip()
    if raw:
        try:
            speed = int(raw)
        except ValueError:
            speed = 1
        updates["text_speed"] = speed if 0 <= speed <= 2 else 1

    raw = input_fn("Enable dealer-upcard mode? (show only first card of NPCs) (y/n) [n]: ").strip()
    if raw:
        updates["upcard_mode"] = raw[0] in "yY"

    return replace(game, **updates)
