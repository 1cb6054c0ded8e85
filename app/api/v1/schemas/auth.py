from pydantic import BaseModel, ConfigDict, Field


class Caller(BaseModel):
    """
    Verified identity of the party making the current request.

    Two callers are the same party iff their ids are equal.
    """
    id: str = Field(..., min_length=1, description="Subject (sub claim) of the verified access token")

    model_config = ConfigDict(frozen=True)

    def owns(self, owner: str) -> bool:
        return self.id == owner
