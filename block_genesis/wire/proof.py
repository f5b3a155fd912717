"""
BlockGenesis - Envelope Proof Codecs
======================================
Pluggable readers/writers for the extra payload of augmented envelopes.

BlockCodec looks up the ProofCodec registered for the requested Envelope
and delegates the proof segment to it, so the block codec never needs
to understand a proof's internals.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from block_genesis.constants import Envelope, ProofEntityType
from block_genesis.domain.packetcrypt import PacketCryptProof, ProofEntity
from block_genesis.errors import MalformedProofError, EncodeError
from block_genesis.utils.serialization import compact_size
from block_genesis.wire.reader import ByteReader


class ProofCodec(ABC):
    """Reads and writes one envelope's proof segment"""

    @abstractmethod
    def decode(self, reader: ByteReader, field: str) -> Any:
        """Consume the proof segment from reader"""

    @abstractmethod
    def encode(self, proof: Any) -> bytes:
        """Serialize a proof produced by decode()"""


class PacketCryptProofCodec(ProofCodec):
    """
    PacketCrypt proof: typed entities terminated by END.

    Rules:
    - ANNOUNCEMENTS must be present
    - an entity type may appear only once
    - unknown types are kept verbatim
    - END carries no payload
    """

    def decode(self, reader: ByteReader, field: str = "proof") -> PacketCryptProof:
        entities = []
        seen = set()

        while True:
            start = reader.offset
            index = len(entities)
            entity_type = reader.read_varint(f"{field}.entities[{index}].type")
            payload = reader.read_var_bytes(f"{field}.entities[{index}].payload")

            if entity_type == ProofEntityType.END:
                if payload:
                    raise MalformedProofError(
                        "END entity must be empty",
                        offset=start,
                        field=f"{field}.end",
                        code="PROOF_END_NOT_EMPTY"
                    )
                break

            if entity_type in seen:
                raise MalformedProofError(
                    f"Duplicate proof entity type {entity_type}",
                    offset=start,
                    field=f"{field}.entities[{index}]",
                    code="PROOF_DUPLICATE_ENTITY"
                )
            seen.add(entity_type)
            entities.append(ProofEntity(entity_type, payload))

        if ProofEntityType.ANNOUNCEMENTS not in seen:
            raise MalformedProofError(
                "Missing announcements entity",
                offset=reader.offset,
                field=field,
                code="PROOF_MISSING_ANNOUNCEMENTS"
            )

        return PacketCryptProof(entities=tuple(entities))

    def encode(self, proof: PacketCryptProof) -> bytes:
        if not isinstance(proof, PacketCryptProof):
            raise EncodeError(
                f"Expected PacketCryptProof, got {type(proof).__name__}",
                code="PROOF_TYPE_MISMATCH"
            )

        parts = []
        for entity in proof.entities:
            parts.append(compact_size(entity.entity_type))
            parts.append(compact_size(len(entity.payload)))
            parts.append(entity.payload)
        parts.append(compact_size(ProofEntityType.END) + compact_size(0))
        return b"".join(parts)


PROOF_CODECS: Dict[Envelope, ProofCodec] = {
    Envelope.PACKETCRYPT: PacketCryptProofCodec(),
}


__all__ = [
    "ProofCodec",
    "PacketCryptProofCodec",
    "PROOF_CODECS",
]
