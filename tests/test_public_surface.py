"""Test public API surface - ensure imports work correctly and no side effects."""

import types


def test_root_exports():
    import driftsafe

    for name in driftsafe.__all__:
        assert hasattr(driftsafe, name), name
    assert isinstance(driftsafe.__version__, str)


def test_decode_is_not_exported_from_root():
    """decode exists as both report and model variants, so neither is re-exported."""
    import driftsafe

    assert "decode" not in driftsafe.__all__


def test_api_exports_core_functions():
    from driftsafe.api import decode, decode_records, load_descriptor

    for func in (decode, decode_records, load_descriptor):
        assert isinstance(func, types.FunctionType)


def test_kernel_has_no_logging_side_effects(quote_descriptor, caplog):
    """The decode engine and projector never log; only the batch driver does."""
    from driftsafe.kernel.decoder import decode
    from driftsafe.kernel.projection import Projector, ViewField

    with caplog.at_level("DEBUG"):
        result = decode({"quote": 1, "extra": True}, quote_descriptor)
        Projector([ViewField("quote")], build=lambda quote: quote).project(result.model)
    assert caplog.records == []
