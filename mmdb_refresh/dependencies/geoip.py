from functools import lru_cache
from typing import Annotated

from mmdb_refresh.config import get_settings
from mmdb_refresh.dependencies.scheduler import get_scheduler
from mmdb_refresh.fetcher import LocalLoader, RemoteFetcher
from mmdb_refresh.scheduler import DatabaseUpdateScheduler
from mmdb_refresh.storage import DatabaseStore

from fast_depends import Depends as DIDepends


@lru_cache
def get_store() -> DatabaseStore:
    """
    Get the database store, one per process
    """
    return DatabaseStore(dest_dir=get_settings().dest_dir)


@lru_cache
def get_update_scheduler() -> DatabaseUpdateScheduler:
    store = get_store()
    return DatabaseUpdateScheduler(
        local_loader=LocalLoader(store),
        remote_fetcher=RemoteFetcher(store),
        scheduler=get_scheduler(),
    )


GeoIPStore = Annotated[DatabaseStore, DIDepends(get_store)]
