"""Main runner wiring the Etherscan client, aggregation engine and timers."""

from dataclasses import asdict
from datetime import datetime
from typing import Callable, Dict, List, Optional

from .config import Config
from .constants import FETCH_ERROR_MESSAGE
from .engine import AggregationEngine
from .estimates import TierEstimate, tier_estimates
from .etherscan import EtherscanClient, FetchError
from .logging import get_logger
from .models import GasSample
from .scheduler import PeriodicTask, Scheduler
from .view import View, ViewSelector

logger = get_logger(__name__)


class GasTrackerRunner:
    """Polls the gas oracle on a fixed cadence and keeps the trend windows current."""

    def __init__(
        self,
        config: Config,
        client: Optional[EtherscanClient] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Callable[[], datetime] = datetime.now,
        initial_view: View = View.SHORT,
    ):
        """
        Initialize runner with configuration.

        Args:
            config: Configuration instance
            client: Sample source; defaults to an EtherscanClient built from config
            scheduler: Timer host; defaults to a real-time Scheduler
            clock: Wall-clock source for labels and refresh times
            initial_view: View exposed by ``self.view`` at start-up
        """
        self.config = config
        self._clock = clock
        self.client = client or EtherscanClient(
            config.etherscan_api_key,
            url=config.etherscan_url,
            timeout=config.http_timeout_secs,
            clock=clock,
        )
        self.engine = AggregationEngine(
            short_capacity=config.short_capacity,
            long_capacity=config.long_capacity,
            poll_secs=config.poll_secs,
            long_countdown_secs=config.long_countdown_secs,
            clock=clock,
        )
        self.view = ViewSelector(self.engine, initial_view)
        self.scheduler = scheduler or Scheduler()

        self.estimates: Optional[Dict[str, TierEstimate]] = None
        self.eth_usd_price: Optional[float] = None
        self.last_block: Optional[int] = None
        self.last_refreshed: Optional[str] = None
        self.error: Optional[str] = None
        self._tasks: List[PeriodicTask] = []

    def poll_once(self) -> Dict:
        """
        Run one poll tick: fetch oracle, ETH price and block number independently.

        An oracle failure extends the short window with an "N/A" point. Any
        failure puts the runner in its error state and drops derived estimates
        until a later tick fully succeeds.

        Returns:
            Dictionary describing the tick
        """
        failed = []
        sample: Optional[GasSample] = None
        eth_usd_price: Optional[float] = None
        block: Optional[int] = None

        try:
            sample = self.client.fetch_gas_oracle()
        except FetchError as e:
            logger.warning(f"Gas oracle fetch failed: {e}")
            failed.append(e.action)

        if sample is None:
            appended = self.engine.record_failure()
        else:
            appended = self.engine.record_sample(sample)

        try:
            eth_usd_price = self.client.fetch_eth_usd_price()
        except FetchError as e:
            logger.warning(f"ETH price fetch failed: {e}")
            failed.append(e.action)

        try:
            block = self.client.fetch_latest_block_number()
        except FetchError as e:
            logger.warning(f"Block number fetch failed: {e}")
            failed.append(e.action)

        if failed:
            self.error = FETCH_ERROR_MESSAGE
            self.estimates = None
        else:
            self.error = None
            self.eth_usd_price = eth_usd_price
            self.last_block = block
            self.last_refreshed = self._clock().isoformat()
            if sample.is_complete:
                self.estimates = tier_estimates(
                    sample,
                    eth_usd_price,
                    gas_limit=self.config.gas_limit,
                    block_time_secs=self.config.block_time_secs,
                )
            else:
                self.estimates = None

        return {
            "sample": asdict(sample) if sample is not None else None,
            "appended": appended,
            "eth_usd": self.eth_usd_price,
            "block": self.last_block,
            "estimates": (
                {tier: asdict(est) for tier, est in self.estimates.items()}
                if self.estimates else None
            ),
            "error": self.error,
            "failed": failed,
            "short_points": len(self.engine.short_window),
            "long_points": len(self.engine.long_window),
            "timestamp": self._clock().isoformat(),
        }

    def _poll_tick(self) -> None:
        result = self.poll_once()
        sample = result["sample"]
        if sample is None:
            logger.info(f"Poll failed ({', '.join(result['failed'])}); "
                        f"short={result['short_points']}pts long={result['long_points']}pts")
            return

        line = (
            f"low={sample['low']:.3f} avg={sample['avg']:.3f} high={sample['high']:.3f} gwei | "
            f"eth=${self.eth_usd_price or 0:.2f} | block={self.last_block} | "
            f"short={result['short_points']}pts long={result['long_points']}pts"
        )
        if result["error"]:
            line += f" | {result['error']}"
        logger.info(line)

    def start(self) -> None:
        """Schedule the poll, countdown, minute flush and hour flush timers."""
        if self._tasks:
            return
        cfg = self.config
        self._tasks = [
            # Countdown first so a poll due in the same second resets it afterwards
            self.scheduler.every(cfg.countdown_secs, self.engine.tick_countdown, name="countdown"),
            self.scheduler.every(cfg.poll_secs, self._poll_tick, name="poll", run_immediately=True),
            self.scheduler.every(cfg.minute_flush_secs, self.engine.flush_minute, name="minute_flush"),
            self.scheduler.every(cfg.hour_flush_secs, self.engine.flush_hour, name="hour_flush"),
        ]
        logger.info(
            f"Started gas tracker: poll every {cfg.poll_secs}s, "
            f"minute flush every {cfg.minute_flush_secs}s, hour flush every {cfg.hour_flush_secs}s"
        )

    def stop(self) -> None:
        """Cancel all four timers so nothing mutates the engine afterwards."""
        for task in self._tasks:
            task.cancel()
        self._tasks = []
        self.scheduler.stop()
        logger.info("Stopped gas tracker timers")

    def run_continuous(self) -> None:
        """Run until interrupted."""
        self.start()
        try:
            self.scheduler.run()
        except KeyboardInterrupt:
            logger.info("Exiting.")
        finally:
            self.stop()
            self.client.close()
