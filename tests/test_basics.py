from idealmask import (
    ExplicitWindow,
    FixedSize,
    IdealMaskResult,
    InvalidInput,
    OutputRequest,
    apply_ideal_masks,
    derive_masks,
)


def test_public_imports() -> None:
    assert apply_ideal_masks is not None
    assert derive_masks is not None
    assert IdealMaskResult is not None
    assert OutputRequest is not None
    assert FixedSize is not None
    assert ExplicitWindow is not None


def test_invalid_input_is_value_error() -> None:
    assert issubclass(InvalidInput, ValueError)
