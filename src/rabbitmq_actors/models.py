import datetime
import json
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from rabbitmq_actors.exceptions import InvalidConfiguration

JSON_CONTENT_TYPE = "application/json"

PERSISTENT_DELIVERY_MODE = 2
TRANSIENT_DELIVERY_MODE = 1

# options that drive the publish call itself rather than the message properties
_PUBLISH_ARGUMENTS = {"persistent", "routing_key", "mandatory", "type"}


class PublishOptions(BaseModel):
    """Options of one published message, validated before reaching the broker."""

    model_config = ConfigDict(extra="forbid")

    message_id: str
    persistent: bool = True
    routing_key: str = ""
    mandatory: bool = False

    headers: Optional[dict[str, Any]] = None
    reply_to: Optional[str] = None
    content_type: Optional[str] = None
    content_encoding: Optional[str] = None
    priority: Optional[int] = Field(default=None, ge=0, le=9)
    correlation_id: Optional[str] = None
    # milliseconds
    expiration: Optional[str] = None
    timestamp: Optional[datetime.datetime] = None
    type: Optional[str] = None
    user_id: Optional[str] = None
    app_id: Optional[str] = None

    @field_validator("message_id", "correlation_id", "expiration", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @classmethod
    def build(cls, **options) -> "PublishOptions":
        """
        Validate raw publish options.

        :raises InvalidConfiguration: If an option is unknown or has a bad value.
        """
        try:
            return cls(**options)
        except ValidationError as e:
            raise InvalidConfiguration(f"Invalid publish options: {e}") from e

    def to_properties(self) -> dict[str, Any]:
        """Build the AMQP message properties understood by amqpstorm."""
        properties = self.model_dump(exclude_none=True, exclude=_PUBLISH_ARGUMENTS)
        properties["delivery_mode"] = (
            PERSISTENT_DELIVERY_MODE if self.persistent else TRANSIENT_DELIVERY_MODE
        )
        if self.type is not None:
            properties["message_type"] = self.type
        return properties


def encode_body(body: Any) -> tuple[Union[str, bytes], Optional[str]]:
    """
    Encode a message body for publishing.

    Strings and bytes are sent untouched. Pydantic models and any other JSON
    serializable value are sent as JSON.

    :return: The encoded body and the content type it implies, if any.
    """
    if isinstance(body, (str, bytes)):
        return body, None
    if isinstance(body, BaseModel):
        return body.model_dump_json(), JSON_CONTENT_TYPE
    return json.dumps(body, default=str), JSON_CONTENT_TYPE
