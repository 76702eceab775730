"""
Data model for private transaction logs.

One TransactionLog is kept per private transaction, keyed by the hash of the
originating signed transaction. Hashes and addresses are held as raw bytes
in memory and written as 0x-prefixed hex in JSON, which keeps the persisted
file compatible with logs written by other node implementations.
"""
from enum import Enum
from typing import Annotated, Iterable, List, Optional, Union

from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer, TypeAdapter

HASH_LENGTH = 32
ADDRESS_LENGTH = 20


def to_hex(value: bytes) -> str:
    """Render bytes as lowercase 0x-prefixed hex."""
    return "0x" + value.hex()


def _fixed_bytes(length: int):
    """Build a validator accepting raw bytes or hex text of exactly `length` bytes."""

    def parse(value):
        if isinstance(value, str):
            text = value[2:] if value[:2] in ("0x", "0X") else value
            try:
                value = bytes.fromhex(text)
            except ValueError as e:
                raise ValueError(f"Invalid hex string: {value!r}") from e
        elif isinstance(value, (bytearray, memoryview)):
            value = bytes(value)

        if not isinstance(value, bytes):
            raise ValueError(
                f"Expected bytes or hex string, got {type(value).__name__}"
            )
        if len(value) != length:
            raise ValueError(f"Expected {length} bytes, got {len(value)}")
        return value

    return parse


H256 = Annotated[
    bytes,
    BeforeValidator(_fixed_bytes(HASH_LENGTH)),
    PlainSerializer(to_hex, return_type=str, when_used="json"),
]
Address = Annotated[
    bytes,
    BeforeValidator(_fixed_bytes(ADDRESS_LENGTH)),
    PlainSerializer(to_hex, return_type=str, when_used="json"),
]

HashLike = Union[bytes, str]
AddressLike = Union[bytes, str]


class PrivateTxStatus(str, Enum):
    """
    Current status of a private transaction.

    Statuses advance Created -> Validating -> Deployed.
    """

    # Private tx was created but no validation received yet
    CREATED = "Created"
    # Some validators (not necessarily all) signed the transaction
    VALIDATING = "Validating"
    # Public tx was created and added into the pool
    DEPLOYED = "Deployed"


class ValidatorLog(BaseModel):
    """Validation progress of a single validator account."""

    account: Address
    validated: bool = False
    validation_timestamp: Optional[int] = Field(default=None, ge=0)


class TransactionLog(BaseModel):
    """Lifecycle record of one private transaction."""

    tx_hash: H256
    status: PrivateTxStatus = PrivateTxStatus.CREATED
    creation_timestamp: int = Field(..., ge=0)
    validators: List[ValidatorLog] = Field(default_factory=list)
    deployment_timestamp: Optional[int] = Field(default=None, ge=0)
    public_tx_hash: Optional[H256] = None

    def find_validator(self, account: bytes) -> Optional[ValidatorLog]:
        """Return the validator record for `account`, if it is listed."""
        for validator in self.validators:
            if validator.account == account:
                return validator
        return None


_HASH_ADAPTER = TypeAdapter(H256)
_ADDRESS_ADAPTER = TypeAdapter(Address)
_LOGS_ADAPTER = TypeAdapter(List[TransactionLog])


def parse_hash(value: HashLike) -> bytes:
    """Normalize a transaction hash given as bytes or hex text."""
    return _HASH_ADAPTER.validate_python(value)


def parse_address(value: AddressLike) -> bytes:
    """Normalize a validator address given as bytes or hex text."""
    return _ADDRESS_ADAPTER.validate_python(value)


def logs_from_json(text: Union[str, bytes]) -> List[TransactionLog]:
    """
    Parse a persisted snapshot.

    Values are not coerced: a timestamp stored as a string or a flag stored
    as anything but a JSON boolean is a format error.

    Raises:
        pydantic.ValidationError: If the text is not JSON or not an array of
            entries
    """
    return _LOGS_ADAPTER.validate_json(text, strict=True)


def logs_to_json(logs: Iterable[TransactionLog]) -> bytes:
    """Serialize entries as one compact JSON array."""
    return _LOGS_ADAPTER.dump_json(list(logs))
