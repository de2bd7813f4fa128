"""Application configuration for pokertable."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Self

from .dealer import TimeoutPolicy
from .tournament import TournamentConfig


@dataclass
class TableConfig:
    """Stacks, blinds and blind schedule."""

    starting_stack: int = 2000
    small_blind: int = 10
    big_blind: int = 20
    orbits_per_level: int = 2
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.small_blind <= 0 or self.big_blind <= 0:
            raise ValueError("Blinds must be positive")
        if self.starting_stack <= 0:
            raise ValueError("Starting stack must be positive")

    def tournament(self, max_hands: int | None = None) -> TournamentConfig:
        return TournamentConfig(
            starting_stack=self.starting_stack,
            small_blind=self.small_blind,
            big_blind=self.big_blind,
            orbits_per_level=self.orbits_per_level,
            max_hands=max_hands,
        )


@dataclass
class BotConfig:
    """Configuration for bot pacing and tracing."""

    action_delay: float = 3.0
    speed_mode: bool = False
    debug: bool = False

    @property
    def effective_delay(self) -> float:
        return 0.0 if self.speed_mode else self.action_delay


@dataclass
class HumanConfig:
    """Configuration for human seats."""

    timeout_policy: TimeoutPolicy = TimeoutPolicy.CHECK_OR_FOLD


@dataclass
class Config:
    """Application configuration."""

    table: TableConfig = field(default_factory=TableConfig)
    bot: BotConfig = field(default_factory=BotConfig)
    human: HumanConfig = field(default_factory=HumanConfig)

    @staticmethod
    def search_paths() -> list[Path]:
        return [
            Path.cwd() / "pokertable.toml",
            Path.cwd() / ".pokertable.toml",
            Path.home() / ".config" / "pokertable" / "config.toml",
            Path.home() / ".pokertable.toml",
        ]

    @classmethod
    def load(cls, path: Path | None = None) -> Self:
        """Load config from file, falling back to defaults."""
        if path is not None:
            return cls._from_file(path)

        for candidate in cls.search_paths():
            if candidate.exists():
                return cls._from_file(candidate)

        return cls()

    @classmethod
    def _from_file(cls, path: Path) -> Self:
        """Load config from a TOML file."""
        with open(path, "rb") as f:
            data = tomllib.load(f)

        table_data = data.get("table", {})
        table = TableConfig(
            starting_stack=table_data.get("starting_stack", 2000),
            small_blind=table_data.get("small_blind", 10),
            big_blind=table_data.get("big_blind", 20),
            orbits_per_level=table_data.get("orbits_per_level", 2),
            seed=table_data.get("seed"),
        )

        bot_data = data.get("bot", {})
        bot = BotConfig(
            action_delay=float(bot_data.get("action_delay", 3.0)),
            speed_mode=bot_data.get("speed_mode", False),
            debug=bot_data.get("debug", False),
        )

        human_data = data.get("human", {})
        policy = human_data.get("timeout_policy", TimeoutPolicy.CHECK_OR_FOLD.value)
        try:
            human = HumanConfig(timeout_policy=TimeoutPolicy(policy))
        except ValueError:
            choices = ", ".join(p.value for p in TimeoutPolicy)
            raise ValueError(f"Invalid timeout_policy {policy!r} (expected one of: {choices})") from None

        return cls(table=table, bot=bot, human=human)


# Global config instance (loaded lazily)
_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = Config.load()
    return _config
