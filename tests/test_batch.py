"""Tests for the batch driver."""

import json
import logging

from driftsafe.codes import DiagnosticKind, RuleCode
from driftsafe.kernel.batch import decode_batch
from driftsafe.kernel.decoder import DecodedModel
from driftsafe.kernel.descriptor import FieldDescriptor, FieldType, ModelDescriptor
from driftsafe.kernel.projection import Check, Projector, ViewField
from driftsafe.kernel.value import Value


RECORDS = [
    {"id": 1, "author": "Rin Tin Tin", "quote": "Woof"},
    {"id": 2, "author": "Rin", "quote": 42},
    {"id": 3, "author": "Lassie", "quote": "Arf"},
]


def test_bad_record_does_not_block_others(quote_descriptor, quote_projector):
    """Record 2 has a type mismatch: two views, record 2 reported distinctly."""
    result = decode_batch(RECORDS, quote_descriptor, quote_projector)
    assert result.total == 3
    assert len(result.views) == 2
    assert [v.author for v in result.views] == ["Rin Tin Tin", "Lassie"]
    assert result.view_indexes == [0, 2]

    assert [o.index for o in result.outcomes] == [1]
    outcome = result.outcome_for(1)
    assert outcome.rejected
    assert outcome.rejection.messages() == ["quote absent"]
    assert [d.kind for d in outcome.diagnostics] == [DiagnosticKind.TYPE_MISMATCH]
    assert outcome.diagnostics[0].path_str == "quote"
    assert result.rejected_indexes == [1]
    assert result.outcome_for(0) is None


def test_diagnostics_without_rejection_are_kept(quote_descriptor, quote_projector):
    """A record that projects despite diagnostics is a view and an outcome."""
    result = decode_batch([{"author": "A", "quote": "Q", "extra": 1}], quote_descriptor, quote_projector)
    assert len(result.views) == 1
    outcome = result.outcomes[0]
    assert not outcome.rejected
    assert [d.path_str for d in outcome.diagnostics] == ["id", "extra"]


def test_without_projector_views_are_decoded_models(quote_descriptor):
    result = decode_batch(RECORDS, quote_descriptor)
    assert len(result.views) == 3
    assert all(isinstance(v, DecodedModel) for v in result.views)
    assert result.views[1].python_value("quote") is None


def test_accepts_array_value(quote_descriptor, quote_projector):
    result = decode_batch(Value.from_python(RECORDS), quote_descriptor, quote_projector)
    assert result.view_indexes == [0, 2]


def test_single_object_is_batch_of_one(quote_descriptor):
    result = decode_batch({"id": 1, "author": "A", "quote": "Q"}, quote_descriptor)
    assert result.total == 1
    assert len(result.views) == 1


def test_non_object_record_is_reported(quote_descriptor, quote_projector):
    result = decode_batch([RECORDS[0], "oops"], quote_descriptor, quote_projector)
    assert result.view_indexes == [0]
    outcome = result.outcome_for(1)
    assert outcome.diagnostics[0].path_str == "$"
    assert outcome.rejection.messages() == ["author absent", "quote absent"]


def test_empty_batch(quote_descriptor):
    result = decode_batch([], quote_descriptor)
    assert result.total == 0
    assert result.views == []
    assert result.outcomes == []


def test_outcome_record(quote_descriptor, quote_projector):
    result = decode_batch(RECORDS, quote_descriptor, quote_projector)
    assert result.outcomes[0].to_record() == {
        "index": 1,
        "diagnostics": [{
            "path": "quote",
            "kind": "TYPE_MISMATCH",
            "severity": "warning",
            "expected": "string",
            "actual": "number",
        }],
        "rejection": {
            "model": "Quote",
            "violations": [{"field": "quote", "code": "absent", "message": "quote absent"}],
        },
        "error": None,
    }


def test_logs_one_warning_per_anomalous_record(quote_descriptor, quote_projector, caplog):
    with caplog.at_level(logging.DEBUG, logger="driftsafe.kernel.batch"):
        decode_batch(RECORDS, quote_descriptor, quote_projector)
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "Record 1 of Quote" in warnings[0].getMessage()
    assert "rejected" in warnings[0].getMessage()
    assert warnings[0].driftsafe_record["index"] == 1
    assert any("3 Quote record(s): 2 view(s)" in r.getMessage() for r in caplog.records)


def test_unconvertible_record_does_not_abort_batch(quote_descriptor, quote_projector, caplog):
    """A NaN from a lenient parser fails its own record only."""
    records = json.loads(
        '[{"id": 1, "author": "Rin Tin Tin", "quote": "Woof"},'
        ' {"id": NaN, "author": "Rin", "quote": "Grr"},'
        ' {"id": 3, "author": "Lassie", "quote": "Arf"}]'
    )
    with caplog.at_level(logging.WARNING, logger="driftsafe.kernel.batch"):
        result = decode_batch(records, quote_descriptor, quote_projector)

    assert result.total == 3
    assert result.view_indexes == [0, 2]
    assert [v.author for v in result.views] == ["Rin Tin Tin", "Lassie"]
    outcome = result.outcome_for(1)
    assert outcome.failed
    assert not outcome.rejected
    assert "Non-finite" in outcome.error
    assert len(outcome.diagnostics) == 0
    assert result.failed_indexes == [1]
    assert result.rejected_indexes == []
    assert any("not decodable" in r.getMessage() for r in caplog.records)


def test_non_json_record_is_reported_as_failed(quote_descriptor):
    result = decode_batch([{"id": 1, "author": "A", "quote": "Q"}, {"id": {1, 2}}], quote_descriptor)
    assert len(result.views) == 1
    assert result.outcome_for(1).to_record()["error"] is not None


def test_raising_check_rejects_only_its_record():
    descriptor = ModelDescriptor(name="Post", fields=[FieldDescriptor(name="tags", kind=FieldType.array_of("string"))])
    projector = Projector(
        [ViewField("tags", checks=(Check("lowercase", lambda tags: all(t == t.lower() for t in tags)),))],
        build=lambda tags: tags,
    )
    result = decode_batch([{"tags": ["a"]}, {"tags": ["b", 3]}, {"tags": ["c"]}], descriptor, projector)
    assert result.views == [["a"], ["c"]]
    assert result.rejected_indexes == [1]
    outcome = result.outcome_for(1)
    assert [d.path_str for d in outcome.diagnostics] == ["tags[1]"]
    assert outcome.rejection.violations[0].code == RuleCode.CHECK_FAILED
