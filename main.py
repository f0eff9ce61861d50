import asyncio
from contextlib import asynccontextmanager
import signal

from mmdb_refresh.config import get_settings
from mmdb_refresh.log import system_logger
from mmdb_refresh.tasks import start_geoip_updater, stop_geoip_updater

import sentry_sdk


@asynccontextmanager
async def lifespan():
    # === on startup ===
    await start_geoip_updater()

    yield

    # === on shutdown ===
    # pending timers are abandoned; only the published file is removed
    await stop_geoip_updater()


async def run() -> None:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    async with lifespan():
        await stop_event.wait()
        system_logger("Main").info("Shutdown requested")


settings = get_settings()
if settings.sentry_dsn is not None:
    sentry_sdk.init(
        dsn=str(settings.sentry_dsn),
        send_default_pii=False,
        environment="production" if not settings.debug else "development",
    )

if __name__ == "__main__":
    asyncio.run(run())
