"""Request fingerprinting for client identification.

A fingerprint is a fixed-width hex digest derived from a configurable
selection of request signals. It identifies clients coarsely for rate
limiting and analytics; it is not an authentication token.

The fingerprint is computed as follows:
1. Select components in a fixed order: method, path, IP address, user agent,
   then any extra headers sorted by name
2. Mask the configured number of low-order IP address bits
3. Length-prefix every component so the joined string is unambiguous;
   requested signals that are missing contribute an absent marker instead
4. Hash the joined bytes with the configured algorithm
"""

import hashlib
import ipaddress

from request_helpers.config import FingerprintConfig
from request_helpers.models import HashAlgorithm, RequestSignals
from request_helpers.observability.logging import get_logger
from request_helpers.observability.metrics import record_fingerprint

logger = get_logger(__name__)

# Encoded present values always start with a digit, so this can never collide
ABSENT_TOKEN = "~"

# Stands in for an address once nothing identifying is left of it
MASKED_ADDRESS_TOKEN = "*"

_FNV64_OFFSET_BASIS = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3
_FNV64_MASK = 0xFFFFFFFFFFFFFFFF


def compute_fingerprint(
    signals: RequestSignals,
    config: FingerprintConfig | None = None,
) -> str:
    """Compute a deterministic fingerprint for a request.

    Args:
        signals: Request signal snapshot
        config: Which signals to include and how to hash them.
            Defaults to ``FingerprintConfig()`` (IP only, SHA-256).

    Returns:
        Lowercase hex digest: 64 characters for the cryptographic digest,
        16 characters for the simple checksum.

    Examples:
        >>> signals = RequestSignals(method="GET", path="/", remote_address="203.0.113.7")
        >>> len(compute_fingerprint(signals))
        64
        >>> config = FingerprintConfig(hash_algorithm="simple-checksum")
        >>> len(compute_fingerprint(signals, config))
        16
    """
    if config is None:
        config = FingerprintConfig()

    components: list[str] = []

    if config.include_method:
        components.append(_encode_component("method", signals.method.upper()))

    if config.include_path:
        components.append(_encode_component("path", signals.path))

    if config.include_ip:
        address = signals.remote_address
        if address is not None:
            address = mask_ip_address(address, config.ip_anonymization_bits)
        components.append(_encode_component("ip", address))

    if config.include_user_agent:
        components.append(_encode_component("ua", signals.user_agent))

    for header in sorted(config.include_headers):
        components.append(_encode_component(f"h.{header}", signals.extra_headers.get(header)))

    fingerprint_input = "\n".join(components).encode("utf-8")
    fingerprint = _digest(fingerprint_input, config.hash_algorithm)

    record_fingerprint(config.hash_algorithm.value)
    logger.debug(
        "fingerprint.computed",
        algorithm=config.hash_algorithm.value,
        components=len(components),
    )
    return fingerprint


def mask_ip_address(address: str, bits: int) -> str:
    """Zero the ``bits`` low-order bits of an IP address.

    Parseable addresses always come back in canonical compressed form, so
    different spellings of one address agree. When the whole address is
    masked, or when masking is requested for a string that is not an IP
    address, :data:`MASKED_ADDRESS_TOKEN` is returned regardless of the
    address family. Unparsable strings are returned unchanged when ``bits``
    is 0.

    Args:
        address: IPv4 or IPv6 address
        bits: Number of low-order bits to clear

    Returns:
        The masked address in its compressed textual form

    Examples:
        >>> mask_ip_address("203.0.113.7", 8)
        '203.0.113.0'
        >>> mask_ip_address("2001:0DB8:0::1234", 16)
        '2001:db8::'
        >>> mask_ip_address("2001:db8::1", 128)
        '*'
    """
    try:
        ip = ipaddress.ip_address(address.strip())
    except ValueError:
        logger.debug("fingerprint.ip_unparsable", address=address)
        return MASKED_ADDRESS_TOKEN if bits > 0 else address

    width = ip.max_prefixlen
    if bits >= width:
        return MASKED_ADDRESS_TOKEN
    mask = ((1 << width) - 1) ^ ((1 << bits) - 1)
    return str(type(ip)(int(ip) & mask))


def _encode_component(tag: str, value: str | None) -> str:
    """Encode one component as ``tag=<byte length>:<value>``.

    Missing values become ``tag=~`` so that an absent signal and an empty one
    produce different input.
    """
    if value is None:
        return f"{tag}={ABSENT_TOKEN}"
    return f"{tag}={len(value.encode('utf-8'))}:{value}"


def _fnv1a_64(data: bytes) -> int:
    value = _FNV64_OFFSET_BASIS
    for byte in data:
        value ^= byte
        value = (value * _FNV64_PRIME) & _FNV64_MASK
    return value


def _digest(data: bytes, algorithm: HashAlgorithm) -> str:
    if algorithm is HashAlgorithm.SIMPLE_CHECKSUM:
        return f"{_fnv1a_64(data):016x}"
    return hashlib.sha256(data).hexdigest()
