from pydantic import BaseModel, ConfigDict


class RequestBody(BaseModel):
    """Base for request bodies: numbers sent for text fields are read as strings."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class MessageResponse(BaseModel):
    message: str
