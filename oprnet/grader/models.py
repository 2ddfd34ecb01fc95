"""Models for oracle price records.

Two shapes live here:
- V1Content: the JSON body a participant submits (wire format, pydantic)
- GradingOPR: a validated record carried through averaging and grading
RawEntry is the hex-encoded ledger entry accepted by the command line tool.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .assets import V1_SCHEMA, AssetSchema


INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


# ---------------------------------------------------------------------------
# Submitted record (decoded content)
# ---------------------------------------------------------------------------


class V1Content(BaseModel):
    """Version 1 price record as published in an entry's content.

    Parsing is strict: numbers are never coerced from strings and
    NaN/Infinity are rejected. Missing keys fall back to zero values so
    the validator reports them through the matching protocol rule.
    """

    model_config = ConfigDict(
        strict=True,
        allow_inf_nan=False,
        populate_by_name=True,
        extra="ignore",
    )

    coinbase_address: str = Field(default="", alias="coinbase")
    height: int = Field(default=0, alias="dbht", ge=INT32_MIN, le=INT32_MAX)
    previous_winners: list[str] = Field(default_factory=list, alias="winners")
    miner_id: str = Field(default="", alias="minerid")
    assets: dict[str, float] = Field(default_factory=dict)

    def to_json_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode()


# ---------------------------------------------------------------------------
# Graded record
# ---------------------------------------------------------------------------


@dataclass
class GradingOPR:
    """A validated OPR plus its grade for the current aggregation round.

    Everything except ``grade`` is fixed at validation time. ``grade`` is
    0.0 until a grading pass writes it; a zero grade on an ungraded record
    is not a "perfect" score.
    """

    entry_hash: bytes
    nonce: bytes
    self_reported_difficulty: int
    opr_hash: bytes  # sha256 of the raw content bytes
    opr: V1Content
    grade: float = 0.0
    schema: AssetSchema = field(default=V1_SCHEMA, repr=False)

    @property
    def short_hash(self) -> str:
        """Identifier used in winner lists: hex of the first 8 entry hash bytes."""
        return self.entry_hash[:8].hex()

    def ordered_assets(self) -> list[float]:
        """Asset values in the schema's canonical order."""
        return self.schema.ordered_values(self.opr.assets)


# ---------------------------------------------------------------------------
# Raw ledger entry (hex-encoded input)
# ---------------------------------------------------------------------------


def _from_hex(value):
    if isinstance(value, str):
        return bytes.fromhex(value)
    return value


class RawEntry(BaseModel):
    """Ledger entry as handed to the validator.

    Byte fields accept hex strings on input and serialize back to hex.
    """

    model_config = ConfigDict(frozen=True)

    entry_hash: bytes
    ext_ids: list[bytes]
    content: bytes
    height: int

    @field_validator("entry_hash", "content", mode="before")
    @classmethod
    def _decode_hex(cls, v):
        return _from_hex(v)

    @field_validator("ext_ids", mode="before")
    @classmethod
    def _decode_hex_list(cls, v):
        if isinstance(v, (list, tuple)):
            return [_from_hex(x) for x in v]
        return v

    @field_serializer("entry_hash", "content")
    def _encode_hex(self, v: bytes) -> str:
        return v.hex()

    @field_serializer("ext_ids")
    def _encode_hex_list(self, v: list[bytes]) -> list[str]:
        return [x.hex() for x in v]


__all__ = ["INT32_MAX", "INT32_MIN", "GradingOPR", "RawEntry", "V1Content"]
