"""
BlockGenesis - PacketCrypt Proof
==================================
Auxiliary proof-of-work payload carried by the augmented block envelope.

The codec treats the payload as a list of typed, length-prefixed entities
and keeps each entity's bytes verbatim, so a decoded proof re-encodes to
the exact input. Nothing here takes part in block or transaction hashing.

Wire layout (one entity):
    varint type | varint length | length bytes
The list ends with an entity of type END and length 0.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, Optional, Dict, Any
import struct

from block_genesis.constants import (
    ProofEntityType,
    PCP_ANNOUNCEMENT_COUNT,
    PCP_ANNOUNCEMENT_SIZE,
)
from block_genesis.errors import ValidationError


@dataclass(frozen=True)
class ProofEntity:
    """One typed entity of a PacketCrypt proof"""

    entity_type: int
    payload: bytes

    def __post_init__(self):
        if not isinstance(self.entity_type, int) or self.entity_type < 0:
            raise ValidationError(
                f"Invalid proof entity type: {self.entity_type!r}",
                code="INVALID_PROOF_ENTITY"
            )
        if self.entity_type == ProofEntityType.END:
            raise ValidationError(
                "END marker is implicit and cannot be stored as an entity",
                code="INVALID_PROOF_ENTITY"
            )
        if not isinstance(self.payload, bytes):
            object.__setattr__(self, "payload", bytes(self.payload))

    @property
    def type_name(self) -> str:
        try:
            return ProofEntityType(self.entity_type).name
        except ValueError:
            return f"UNKNOWN_{self.entity_type}"


@dataclass(frozen=True)
class Announcements:
    """Split view of the ANNOUNCEMENTS entity"""

    nonce: int
    announcements: Tuple[bytes, ...]
    proof: bytes


@dataclass(frozen=True)
class PacketCryptProof:
    """
    Ordered PacketCrypt proof entities (END marker excluded).

    Attributes:
        entities (Tuple[ProofEntity, ...]): Entities in wire order
    """

    entities: Tuple[ProofEntity, ...]

    def __post_init__(self):
        object.__setattr__(self, "entities", tuple(self.entities))

    def entity(self, entity_type: int) -> Optional[ProofEntity]:
        for entity in self.entities:
            if entity.entity_type == entity_type:
                return entity
        return None

    def announcements(self) -> Announcements:
        """
        Split the ANNOUNCEMENTS entity into nonce, the four announcements
        and the trailing announcement proof.

        Raises:
            ValidationError: If the entity is missing or too short
        """
        entity = self.entity(ProofEntityType.ANNOUNCEMENTS)
        fixed = 4 + PCP_ANNOUNCEMENT_COUNT * PCP_ANNOUNCEMENT_SIZE
        if entity is None or len(entity.payload) < fixed:
            raise ValidationError(
                "Proof has no complete announcements entity",
                code="MISSING_ANNOUNCEMENTS"
            )

        payload = entity.payload
        nonce = struct.unpack_from("<I", payload, 0)[0]
        anns = tuple(
            payload[4 + i * PCP_ANNOUNCEMENT_SIZE:4 + (i + 1) * PCP_ANNOUNCEMENT_SIZE]
            for i in range(PCP_ANNOUNCEMENT_COUNT)
        )
        return Announcements(nonce=nonce, announcements=anns, proof=payload[fixed:])

    def size(self) -> int:
        return sum(len(e.payload) for e in self.entities)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entities": [
                {"type": e.type_name, "length": len(e.payload)}
                for e in self.entities
            ]
        }


__all__ = [
    "ProofEntity",
    "Announcements",
    "PacketCryptProof",
]
