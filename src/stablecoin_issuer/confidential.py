"""Revealed and confidential amounts at the vault boundary.

A vault operation on the regulated token carries either a plain revealed
amount or a confidential statement: a proof object, produced outside this
package, that an external verifier certifies nets to a claimed revealed
delta. The issuer only ever acts on the certified revealed delta.

Confidential outputs (UTXOs) are commitments whose value is hidden. A holder
of the resource's view key can open them for auditing.
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass, field
from typing import Optional, Protocol, Tuple, Union

from .amount import Amount
from .exceptions import ProofVerificationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UtxoId:
    """Identifier of one confidential output."""

    value: str

    @classmethod
    def random(cls) -> "UtxoId":
        return cls(f"utxo_{secrets.token_hex(12)}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ConfidentialOutput:
    """
    Hidden-value output.

    The value is kept only in sealed form; ``open_with`` releases it to a
    caller presenting the matching view key.
    """

    utxo_id: UtxoId
    commitment: bytes
    _sealed_value: int = field(repr=False)
    _view_key: Optional[bytes] = field(default=None, repr=False)

    @classmethod
    def create(cls, value: Amount, view_key: Optional[bytes] = None) -> "ConfidentialOutput":
        blinding = secrets.token_bytes(32)
        commitment = hashlib.sha256(blinding + str(value).encode()).digest()
        return cls(
            utxo_id=UtxoId.random(),
            commitment=commitment,
            _sealed_value=int(value),
            _view_key=view_key,
        )

    def open_with(self, view_key: bytes) -> Amount:
        if self._view_key is None or not hmac.compare_digest(self._view_key, view_key):
            raise ProofVerificationError("View key does not open this output")
        return Amount(self._sealed_value)


@dataclass(frozen=True)
class StealthValueProof:
    """Claim that an output commits to a specific revealed value."""

    claimed_value: Amount
    proof_bytes: bytes = b""


@dataclass(frozen=True)
class RevealedAmount:
    """Plain, auditable amount."""

    amount: Amount

    def revealed_delta(self) -> Amount:
        return self.amount


@dataclass(frozen=True)
class ConfidentialWithdrawProof:
    """
    Spend of confidential inputs.

    ``revealed_amount`` is the part of the spend that becomes plain; the
    remainder is re-committed into ``change_outputs``.
    """

    inputs: Tuple[UtxoId, ...]
    revealed_amount: Amount
    change_outputs: Tuple[ConfidentialOutput, ...] = ()
    proof_bytes: bytes = b""

    def revealed_delta(self) -> Amount:
        return self.revealed_amount


TransferAmount = Union[RevealedAmount, ConfidentialWithdrawProof]


class ProofVerifier(Protocol):
    """External proof system, consumed through this narrow interface."""

    def verify_withdraw(self, proof: ConfidentialWithdrawProof, inputs: Tuple[ConfidentialOutput, ...]) -> Amount:
        """Return the certified revealed delta or raise ProofVerificationError."""
        ...

    def verify_value(self, output: ConfidentialOutput, proof: StealthValueProof) -> Amount:
        """Return the certified output value or raise ProofVerificationError."""
        ...


class SimulatedProofVerifier:
    """
    Verifier for the in-memory engine.

    It checks that value is conserved across a spend using the sealed values
    it can see, standing in for real range and balance proofs.
    """

    def verify_withdraw(self, proof: ConfidentialWithdrawProof, inputs: Tuple[ConfidentialOutput, ...]) -> Amount:
        if proof.revealed_amount.is_negative():
            raise ProofVerificationError("Revealed amount cannot be negative")
        input_total = sum(o._sealed_value for o in inputs)
        output_total = sum(o._sealed_value for o in proof.change_outputs)
        if input_total != output_total + int(proof.revealed_amount):
            logger.warning(
                "Rejected unbalanced confidential withdraw: inputs=%s outputs=%s revealed=%s",
                input_total, output_total, proof.revealed_amount,
            )
            raise ProofVerificationError("Confidential withdraw does not balance")
        return proof.revealed_amount

    def verify_value(self, output: ConfidentialOutput, proof: StealthValueProof) -> Amount:
        if output._sealed_value != int(proof.claimed_value):
            raise ProofVerificationError(
                f"Value proof does not match output {output.utxo_id}",
                details={"utxo_id": str(output.utxo_id)},
            )
        return proof.claimed_value
