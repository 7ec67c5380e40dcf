from __future__ import annotations

import pytest

from gjallarhorn.types import BoolValue, IntValue, Metadata, NO_RANGE, Range, StringValue


def _metadata(line: int = 3) -> Metadata:
    return Metadata(Range("main.tf", line, line), reference="aws_db_instance.db.engine")


def test_range_rejects_end_before_start() -> None:
    with pytest.raises(ValueError):
        Range("main.tf", 5, 4)


def test_range_includes_and_str() -> None:
    block = Range("main.tf", 1, 10)

    assert block.includes(Range("main.tf", 3, 3))
    assert not block.includes(Range("other.tf", 3, 3))
    assert not block.includes(Range("main.tf", 9, 11))
    assert str(Range("main.tf", 3, 3)) == "main.tf:3"
    assert str(block) == "main.tf:1-10"
    assert block.is_multi_line


def test_metadata_equality_ignores_reference_and_flags() -> None:
    explicit = _metadata()
    default = Metadata(Range("main.tf", 3, 3), reference="somewhere.else").as_default()

    assert explicit == default
    assert explicit.is_explicit
    assert not default.is_explicit
    assert default.is_default
    assert not Metadata.unmanaged().is_managed
    assert Metadata.unmanaged().range == NO_RANGE


def test_string_value_predicates() -> None:
    value = StringValue.of("aws:kms", _metadata())

    assert value.is_not_empty()
    assert not value.is_empty()
    assert value.equal_to("AWS:KMS", ignore_case=True)
    assert not value.equal_to("AWS:KMS")
    assert value.is_one_of("AES256", "aws:kms")
    assert value.starts_with("aws:")
    assert value.ends_with("kms")
    assert value.contains(":")
    assert value.is_set


def test_default_string_value_keeps_enclosing_range() -> None:
    block = Metadata(Range("main.tf", 1, 8))
    value = StringValue.default("", block)

    assert value.is_default
    assert not value.is_set
    assert value.is_resolvable
    assert value.is_empty()
    assert value.range == Range("main.tf", 1, 8)


def test_unresolvable_values_answer_false_to_every_predicate() -> None:
    text = StringValue.unresolvable(_metadata())
    flag = BoolValue.unresolvable(_metadata())
    number = IntValue.unresolvable(_metadata())

    assert not text.is_resolvable
    assert not text.is_empty()
    assert not text.is_not_empty()
    assert not text.equal_to("")
    assert not text.contains("")
    assert not flag.is_true()
    assert not flag.is_false()
    assert not number.less_than(100)
    assert not number.greater_than(-100)
    assert not number.equal_to(0)


def test_bool_and_int_values() -> None:
    assert BoolValue.of(True, _metadata()).is_true()
    assert BoolValue.default(False, _metadata()).is_false()

    retention = IntValue.of(1, _metadata())
    assert retention.less_than(2)
    assert not retention.greater_than(1)
    assert retention.equal_to(1)


def test_value_to_dict() -> None:
    data = StringValue.default("TLS_1_0", _metadata(7)).to_dict()

    assert data["value"] == "TLS_1_0"
    assert data["default"] is True
    assert data["resolvable"] is True
    assert data["range"] == {"filename": "main.tf", "start_line": 7, "end_line": 7}
