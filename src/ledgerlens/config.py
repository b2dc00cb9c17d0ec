"""Report engine settings."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_CURRENCY = "VND"


@dataclass(frozen=True)
class ReportSettings:
    """Tunable knobs of the reporting engine.

    Attributes:
        top_n: Number of entries kept by the top-N rankings
        lookup_timeout: Seconds to wait for one opening-balance lookup
        max_workers: Upper bound of concurrent opening-balance lookups
        home_currency: Unit of already-converted home-currency amounts
        default_currency: Currency used when neither account leg names one
    """

    top_n: int = 10
    lookup_timeout: float = 5.0
    max_workers: int = 8
    home_currency: str = DEFAULT_CURRENCY
    default_currency: str = DEFAULT_CURRENCY

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ReportSettings":
        """Build settings from LEDGERLENS_* environment variables.

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        try:
            return cls(
                top_n=int(env.get("LEDGERLENS_TOP_N", defaults.top_n)),
                lookup_timeout=float(
                    env.get("LEDGERLENS_LOOKUP_TIMEOUT", defaults.lookup_timeout)
                ),
                max_workers=int(env.get("LEDGERLENS_MAX_WORKERS", defaults.max_workers)),
                home_currency=env.get("LEDGERLENS_HOME_CURRENCY", defaults.home_currency),
                default_currency=env.get(
                    "LEDGERLENS_DEFAULT_CURRENCY", defaults.default_currency
                ),
            )
        except ValueError as e:
            raise ValueError(f"Invalid report setting: {e}")


DEFAULT_SETTINGS = ReportSettings()
