def validate_positive_integer(type_: object, value: int) -> None:
    """Validate that value is a positive integer."""
    if value <= 0:
        raise ValueError("Value must be a positive integer")


def validate_positive_float(type_: object, value: float) -> None:
    if value <= 0.0:
        raise ValueError("Value must be greater than 0")


def validate_non_negative_float(type_: object, value: float) -> None:
    if value < 0.0:
        raise ValueError("Value must be 0 or greater")


def validate_amplitude(type_: object, value: float) -> None:
    """Validate that amplitude is within the normalized [0, 1] range."""
    if not 0.0 <= value <= 1.0:
        raise ValueError("Amplitude must be between 0.0 and 1.0")
