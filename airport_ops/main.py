"""
Main entry point for the airport operations simulation loop.

Loads the dataset, then polls the data manager's simulator on the configured
interval, saving after every tick that changed something.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .services.data_manager import DataManager
from .utils.config import configure_logging, get_config

logger = logging.getLogger(__name__)


async def run_simulation_loop(
    manager: DataManager,
    iterations: Optional[int] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> int:
    """
    Tick the simulator until cancelled or ``iterations`` ticks have been attempted.

    Returns:
        int: Number of ticks that changed flight or aircraft status
    """
    interval = manager.config.simulation_interval_seconds
    attempted = 0
    changed = 0

    while iterations is None or attempted < iterations:
        result = await manager.update_simulation()
        attempted += 1
        if result.changed:
            changed += 1
            await manager.save_all_data()
        if iterations is None or attempted < iterations:
            await sleep(interval)

    return changed


def main() -> int:
    """Run the simulation loop until interrupted."""
    print("✈️  Airport operations simulation")
    print("=" * 50)

    try:
        config = get_config()
        configure_logging(config)
        manager = asyncio.run(DataManager.create(config))
        print(f"✓ Loaded {len(manager.flights)} flights from {config.data_dir}")
        print(f"   Ticking every {config.simulation_interval_seconds}s, Ctrl+C to stop")
        asyncio.run(run_simulation_loop(manager))
    except KeyboardInterrupt:
        logger.info("Simulation loop stopped")
    except Exception as e:
        print(f"❌ Failed to run simulation: {e}")
        return 1

    return 0


if __name__ == "__main__":
    exit(main())
