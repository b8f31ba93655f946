"""Decoded market event records"""
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class EventRecord(BaseModel):
    """Fields every decoded log carries"""
    transaction_hash: str
    log_index: int = Field(ge=0)
    block_number: int = Field(ge=0)
    block_timestamp: int = Field(ge=0)
    transaction_from: str = ZERO_ADDRESS

    model_config = {"frozen": True}

    @field_validator(
        "transaction_hash",
        "transaction_from",
        "from_address",
        "to_address",
        check_fields=False,
    )
    @classmethod
    def normalize_hex(cls, value: str) -> str:
        return value.lower()

    @property
    def event_id(self) -> str:
        return global_id(self.transaction_hash, self.log_index)

    @property
    def position(self) -> tuple[int, int]:
        """Canonical chain order key"""
        return (self.block_number, self.log_index)


class Assign(EventRecord):
    """Initial claim of a punk"""
    kind: Literal["assign"] = "assign"
    to_address: str
    punk_index: int = Field(ge=0)


class RawTransfer(EventRecord):
    """ERC-20 style balance transfer emitted alongside market actions"""
    kind: Literal["transfer"] = "transfer"
    from_address: str
    to_address: str
    value: int = 0


class PunkTransfer(EventRecord):
    """Direct punk transfer between addresses"""
    kind: Literal["punk_transfer"] = "punk_transfer"
    from_address: str
    to_address: str
    punk_index: int = Field(ge=0)


class PunkOffered(EventRecord):
    """Punk put up for sale, optionally only to one buyer"""
    kind: Literal["punk_offered"] = "punk_offered"
    punk_index: int = Field(ge=0)
    min_value: int = Field(ge=0)
    to_address: str = ZERO_ADDRESS


class PunkBidEntered(EventRecord):
    kind: Literal["punk_bid_entered"] = "punk_bid_entered"
    punk_index: int = Field(ge=0)
    value: int = Field(ge=0)
    from_address: str


class PunkBidWithdrawn(EventRecord):
    kind: Literal["punk_bid_withdrawn"] = "punk_bid_withdrawn"
    punk_index: int = Field(ge=0)
    value: int = Field(ge=0)
    from_address: str


class PunkBought(EventRecord):
    """Completed sale; ``to_address`` is zero when a bid was accepted"""
    kind: Literal["punk_bought"] = "punk_bought"
    punk_index: int = Field(ge=0)
    value: int = Field(ge=0)
    from_address: str
    to_address: str


class PunkNoLongerForSale(EventRecord):
    kind: Literal["punk_no_longer_for_sale"] = "punk_no_longer_for_sale"
    punk_index: int = Field(ge=0)


MarketEvent = Annotated[
    Union[
        Assign,
        RawTransfer,
        PunkTransfer,
        PunkOffered,
        PunkBidEntered,
        PunkBidWithdrawn,
        PunkBought,
        PunkNoLongerForSale,
    ],
    Field(discriminator="kind"),
]

_market_event_adapter: TypeAdapter[MarketEvent] = TypeAdapter(MarketEvent)


def parse_event(data: Mapping[str, Any]) -> MarketEvent:
    """Validate one decoded record into its typed event"""
    return _market_event_adapter.validate_python(data)


def parse_event_json(line: str | bytes) -> MarketEvent:
    """Validate one JSON-encoded record"""
    return _market_event_adapter.validate_json(line)


def global_id(transaction_hash: str, log_index: int) -> str:
    """Event log id: transaction hash and log index"""
    return f"{transaction_hash}-{log_index}"
