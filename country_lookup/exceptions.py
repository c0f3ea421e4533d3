"""General custom exceptions.

This module contains custom exception classes for input validation and configuration.
"""


class InvalidIPv4AddressError(ValueError):
    """Exception raised when an invalid IPv4 address is found."""

    def __init__(self, ipv4_address: str) -> None:
        """Initialize the exception with the invalid IPv4 address.

        Args:
            ipv4_address: The invalid IPv4 address that caused the error.
        """
        super().__init__(f'Invalid IPv4 address: {ipv4_address}')
        self.ipv4_address = ipv4_address


class ConfigurationError(Exception):
    """Raised when there's an issue with configuration or settings."""

    def __init__(self, message: str) -> None:
        """Initialize the exception with the configuration message.

        Args:
            message: The configuration error details.
        """
        super().__init__(message)
