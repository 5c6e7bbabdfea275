"""Poll shapes used by the ownership checks; the full poll schema lives elsewhere."""

from pydantic import BaseModel, ConfigDict, Field


class PollRef(BaseModel):
    """The two fields of a poll that ownership decisions need."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Poll identifier")
    owner_id: str = Field(..., description="ID of the user who created the poll")


class PollPermissionsResponse(BaseModel):
    """Whether the caller may edit or delete a poll."""

    poll_id: str = Field(..., description="Poll identifier")
    can_modify: bool = Field(..., description="True when the caller owns the poll")
