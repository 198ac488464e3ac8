"""solkit runtime configuration and settings."""
import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class SolkitSettings:
    """Runtime settings for solkit operations.

    Attributes:
        dotnet_executable: Command used to drive solution files (default: dotnet)
        sync_timeout: Deadline in seconds for a whole sync-membership run (default: none)
        aggregator_call_timeout: Timeout in seconds for a single aggregator call (default: 120)
        mock: Keep solution membership in memory instead of invoking dotnet
    """

    dotnet_executable: str = "dotnet"
    sync_timeout: Optional[float] = None
    aggregator_call_timeout: float = 120.0
    mock: bool = False

    @classmethod
    def from_env(cls) -> "SolkitSettings":
        """Create settings from environment variables.

        Environment variables:
            SOLKIT_DOTNET: Path or name of the dotnet executable
            SOLKIT_SYNC_TIMEOUT: Whole-run sync timeout in seconds
            SOLKIT_CALL_TIMEOUT: Per-call aggregator timeout in seconds
            SOLKIT_MOCK: Set to 1 to use the in-memory solution

        Returns:
            SolkitSettings instance with values from environment or defaults
        """
        sync_timeout = os.getenv("SOLKIT_SYNC_TIMEOUT")
        return cls(
            dotnet_executable=os.getenv("SOLKIT_DOTNET", cls.dotnet_executable),
            sync_timeout=float(sync_timeout) if sync_timeout else None,
            aggregator_call_timeout=float(
                os.getenv("SOLKIT_CALL_TIMEOUT", cls.aggregator_call_timeout)
            ),
            mock=os.getenv("SOLKIT_MOCK") == "1",
        )

