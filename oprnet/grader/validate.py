"""Version 1 entry validation.

Turns a raw ledger entry into a GradingOPR or raises. Checks run in a
fixed order and stop at the first failure, so every node reports the
same reason for the same bad entry.
"""

from __future__ import annotations

from typing import Sequence

import pydantic

from .assets import V1_SCHEMA, AssetSchema
from .determinism import content_hash
from .errors import DecodeError, ValidationError
from .models import GradingOPR, V1Content
from .winners import verify_winner_format, verify_winners

V1_VERSION_TAG = b"\x01"
PREVIOUS_WINNERS_COUNT = 10


def validate_v1(
    entry_hash: bytes,
    ext_ids: Sequence[bytes],
    height: int,
    winners: Sequence[str],
    content: bytes,
    schema: AssetSchema = V1_SCHEMA,
) -> GradingOPR:
    """Validate one version 1 OPR entry.

    Args:
        entry_hash: 32-byte ledger hash of the entry.
        ext_ids: [nonce, self-reported difficulty (8 bytes BE), version tag].
        height: Ledger height the entry was found at.
        winners: Authoritative previous winners for that height.
        content: Raw JSON body of the entry.
        schema: Asset schema in force for version 1.

    Returns:
        A GradingOPR with grade 0.0.

    Raises:
        ValidationError: the entry breaks a protocol rule.
        DecodeError: the content is not a version 1 record.
    """
    if len(entry_hash) != 32:
        raise ValidationError("invalid entry hash length")

    if len(ext_ids) != 3:
        raise ValidationError("invalid extid count")

    if ext_ids[2] != V1_VERSION_TAG:
        raise ValidationError("invalid version")

    if len(ext_ids[1]) != 8:
        raise ValidationError("self reported difficulty must be 8 bytes")

    try:
        dec = V1Content.model_validate_json(content)
    except pydantic.ValidationError as e:
        raise DecodeError(str(e)) from e

    if dec.height != height:
        raise ValidationError("invalid height")

    for code in schema.codes:
        if code not in dec.assets:
            raise ValidationError("asset list is not correct")
        if not schema.is_native(code) and dec.assets[code] == 0:
            raise ValidationError(
                f"all values other than {schema.native} must be nonzero"
            )
    if len(dec.assets) != len(schema):
        raise ValidationError("asset list is not correct")

    if not verify_winner_format(dec.previous_winners, PREVIOUS_WINNERS_COUNT):
        raise ValidationError("invalid list of previous winners")

    if not verify_winners(dec.previous_winners, winners):
        raise ValidationError("incorrect set of previous winners")

    return GradingOPR(
        entry_hash=bytes(entry_hash),
        nonce=bytes(ext_ids[0]),
        self_reported_difficulty=int.from_bytes(ext_ids[1], "big"),
        opr_hash=content_hash(content),
        opr=dec,
        schema=schema,
    )


__all__ = ["PREVIOUS_WINNERS_COUNT", "V1_VERSION_TAG", "validate_v1"]
