from pydantic import BaseModel, ConfigDict


class UpdaterEvent(BaseModel):
    """Base class for events emitted on the in-process event hub."""

    model_config = ConfigDict(frozen=True)
