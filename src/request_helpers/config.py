"""Configuration module for the request helpers.

This module provides the FingerprintConfig class, which selects the request
signals that make up a fingerprint, and HelpersConfig, which groups the
settings used by the ASGI adapter.

Example:
    Basic usage with defaults:

        >>> config = FingerprintConfig()
        >>> config.include_ip
        True
        >>> config.hash_algorithm
        <HashAlgorithm.CRYPTOGRAPHIC_DIGEST: 'cryptographic-digest'>

    Subnet-level fingerprints for rate limiting:

        >>> config = FingerprintConfig(
        ...     include_ip=True,
        ...     include_user_agent=True,
        ...     ip_anonymization_bits=8,
        ... )

    Loading from environment:

        >>> import os
        >>> os.environ['REQUEST_FINGERPRINT_INCLUDE_PATH'] = 'true'
        >>> os.environ['REQUEST_FINGERPRINT_HASH_ALGORITHM'] = 'simple-checksum'
        >>> config = FingerprintConfig.from_env()
"""

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator

from request_helpers.models import HashAlgorithm

# Widest address family (IPv6) in bits
MAX_ANONYMIZATION_BITS = 128

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


class FingerprintConfig(BaseModel):
    """Selection of request signals that make up a fingerprint.

    Components are always combined in the same order (method, path, IP
    address, user agent, extra headers) no matter which flags are set.

    Attributes:
        include_ip: Include the client IP address. Default True.
        include_user_agent: Include the User-Agent header. Default False.
        include_method: Include the HTTP method. Default False.
        include_path: Include the URL path. Default False.
        include_headers: Additional header names to include, case-insensitive.
        hash_algorithm: Digest used to reduce the components. Defaults to the
            cryptographic digest; the simple checksum is faster but only
            suitable for load distribution.
        ip_anonymization_bits: Number of low-order address bits zeroed before
            the IP is included, e.g. 8 for IPv4 /24 fingerprints. Values larger
            than the address width mask the whole address.

    Note:
        With every flag disabled all requests share one fingerprint.
    """

    include_ip: bool = Field(default=True, description="Include the client IP address")
    include_user_agent: bool = Field(default=False, description="Include the User-Agent header")
    include_method: bool = Field(default=False, description="Include the HTTP method")
    include_path: bool = Field(default=False, description="Include the URL path")
    include_headers: list[str] | str = Field(
        default_factory=list,
        description="Additional header names to include in the fingerprint",
    )
    hash_algorithm: HashAlgorithm = Field(
        default=HashAlgorithm.CRYPTOGRAPHIC_DIGEST,
        description="Digest used to reduce fingerprint components",
    )
    ip_anonymization_bits: int = Field(
        default=0,
        description="Low-order IP address bits to zero (0-128)",
    )

    model_config = {"frozen": True}

    @field_validator("include_headers", mode="before")
    @classmethod
    def validate_include_headers(cls, v: Any) -> list[str]:
        """Normalize header names to lower case.

        Example:
            >>> FingerprintConfig(include_headers="Accept-Language, X-Client").include_headers
            ['accept-language', 'x-client']
        """
        if isinstance(v, str):
            v = [header.strip() for header in v.split(",") if header.strip()]

        if not isinstance(v, list):
            raise ValueError("include_headers must be a list or comma-separated string")

        return [header.lower() for header in v]

    @field_validator("ip_anonymization_bits")
    @classmethod
    def validate_ip_anonymization_bits(cls, v: int) -> int:
        if not (0 <= v <= MAX_ANONYMIZATION_BITS):
            raise ValueError(
                f"ip_anonymization_bits must be between 0 and {MAX_ANONYMIZATION_BITS}, got {v}"
            )
        return v

    @classmethod
    def from_env(cls, prefix: str = "REQUEST_FINGERPRINT_") -> "FingerprintConfig":
        """Create configuration from environment variables.

        Variable names are the upper-cased field names with the prefix, e.g.
        ``REQUEST_FINGERPRINT_INCLUDE_USER_AGENT=true``.

        Args:
            prefix: Prefix for environment variable names.

        Returns:
            FingerprintConfig populated from the environment; missing
            variables keep their defaults.
        """
        config_dict: dict[str, Any] = {}

        field_types = {
            "include_ip": bool,
            "include_user_agent": bool,
            "include_method": bool,
            "include_path": bool,
            "include_headers": list,
            "hash_algorithm": str,
            "ip_anonymization_bits": int,
        }

        for field_name, field_type in field_types.items():
            env_var = f"{prefix}{field_name.upper()}"
            env_value = os.environ.get(env_var)

            if env_value is not None:
                if field_type is bool:
                    config_dict[field_name] = _parse_bool(env_var, env_value)
                elif field_type is int:
                    config_dict[field_name] = int(env_value)
                else:
                    # Lists stay comma-separated strings for the field validator
                    config_dict[field_name] = env_value

        return cls(**config_dict)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "FingerprintConfig":
        """Create configuration from a dictionary.

        Raises:
            ValidationError: If the dictionary contains invalid values.
        """
        return cls(**config_dict)


class HelpersConfig(BaseModel):
    """Settings for the framework adapters.

    Attributes:
        trust_forwarded: Honour ``x-forwarded-for``, ``x-forwarded-host`` and
            ``x-forwarded-proto``. Only enable this behind a proxy that
            overwrites those headers. Default False.
        fingerprint: Fingerprint composition settings.
        fingerprint_header: Response header that echoes the fingerprint, or
            None to keep it internal.
    """

    trust_forwarded: bool = Field(default=False, description="Trust x-forwarded-* headers")
    fingerprint: FingerprintConfig = Field(
        default_factory=FingerprintConfig,
        description="Fingerprint composition settings",
    )
    fingerprint_header: str | None = Field(
        default=None,
        description="Response header that echoes the request fingerprint",
        examples=["X-Request-Fingerprint"],
    )

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, prefix: str = "REQUEST_HELPERS_") -> "HelpersConfig":
        """Create configuration from environment variables.

        Reads ``<prefix>TRUST_FORWARDED`` and ``<prefix>FINGERPRINT_HEADER``;
        fingerprint settings are read with ``<prefix>FINGERPRINT_`` as their
        prefix.
        """
        config_dict: dict[str, Any] = {
            "fingerprint": FingerprintConfig.from_env(prefix=f"{prefix}FINGERPRINT_"),
        }

        trust_forwarded = os.environ.get(f"{prefix}TRUST_FORWARDED")
        if trust_forwarded is not None:
            config_dict["trust_forwarded"] = _parse_bool(
                f"{prefix}TRUST_FORWARDED", trust_forwarded
            )

        fingerprint_header = os.environ.get(f"{prefix}FINGERPRINT_HEADER")
        if fingerprint_header:
            config_dict["fingerprint_header"] = fingerprint_header

        return cls(**config_dict)
