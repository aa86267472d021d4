import logging

import pytest

from proto_firestore import (
    EncodingMode,
    IncompleteMessageError,
    InvalidUTF8Error,
    MarshalOptions,
    marshal,
)
from proto_firestore.completeness import check_initialized, find_missing_required

from tests.testprotos import textpb2, textpb3

pytestmark = pytest.mark.unit


def _complete_requireds():
    m = textpb2.Requireds(
        req_bool=True,
        req_sfixed64=1,
        req_double=1.0,
        req_string="s",
        req_enum=textpb2.ONE,
    )
    m.req_nested.SetInParent()
    return m


def test_proto3_message_is_always_complete():
    assert find_missing_required(textpb3.Mixed()) == []


def test_missing_direct_fields_in_declaration_order():
    assert find_missing_required(textpb2.Requireds()) == [
        "req_bool",
        "req_sfixed64",
        "req_double",
        "req_string",
        "req_enum",
        "req_nested",
    ]


def test_complete_message():
    m = _complete_requireds()
    assert find_missing_required(m) == []
    check_initialized(m)


def test_unset_optional_message_is_not_walked():
    assert find_missing_required(textpb2.IndirectRequired()) == []


def test_singular_path():
    m = textpb2.IndirectRequired()
    m.opt_nested.SetInParent()
    assert find_missing_required(m) == ["opt_nested.req_string"]


def test_repeated_path():
    m = textpb2.IndirectRequired()
    m.rpt_nested.add(req_string="ok")
    m.rpt_nested.add()
    assert find_missing_required(m) == ["rpt_nested[1].req_string"]


def test_map_path():
    m = textpb2.IndirectRequired()
    m.str_to_nested.get_or_create("b")
    m.str_to_nested["a"].req_string = "ok"
    assert find_missing_required(m) == ["str_to_nested[b].req_string"]


def test_oneof_path():
    m = textpb2.IndirectRequired()
    m.oneof_nested.SetInParent()
    assert find_missing_required(m) == ["oneof_nested.req_string"]


def test_extension_path():
    m = textpb2.Extensions()
    m.Extensions[textpb2.EXT["opt_ext_required"]].SetInParent()
    assert find_missing_required(m) == ["[pb2.opt_ext_required].req_string"]


def test_chain_path():
    m = textpb2.RequiredChain()
    m.req_middle.SetInParent()
    assert find_missing_required(m) == [
        "req_string",
        "req_middle.req_inner",
    ]


@pytest.mark.parametrize(
    "build",
    [
        textpb2.Requireds,
        _complete_requireds,
        textpb2.IndirectRequired,
        lambda: textpb2.IndirectRequired(rpt_nested=[textpb2.NestedWithRequired()]),
        lambda: textpb2.RequiredChain(req_string="x"),
    ],
)
def test_agrees_with_is_initialized(build):
    m = build()
    assert (find_missing_required(m) == []) == m.IsInitialized()


def test_check_initialized_raises_with_paths(caplog):
    m = textpb2.IndirectRequired()
    m.opt_nested.SetInParent()
    with caplog.at_level(logging.DEBUG, logger="proto_firestore.completeness"):
        with pytest.raises(IncompleteMessageError, match="opt_nested.req_string") as exc_info:
            check_initialized(m)
    assert exc_info.value.missing == ["opt_nested.req_string"]
    assert exc_info.value.document is None
    assert "pb2.IndirectRequired is missing 1 required field(s)" in caplog.text


class TestMarshalAttachesDocument:
    def test_empty_singular(self):
        m = textpb2.IndirectRequired()
        m.opt_nested.SetInParent()
        with pytest.raises(IncompleteMessageError) as exc_info:
            marshal(m)
        assert exc_info.value.document == {}

    def test_map_entry(self):
        m = textpb2.IndirectRequired()
        m.str_to_nested.get_or_create("fail")
        with pytest.raises(IncompleteMessageError) as exc_info:
            marshal(m)
        assert exc_info.value.document == {}

    def test_oneof(self):
        m = textpb2.IndirectRequired()
        m.oneof_nested.SetInParent()
        with pytest.raises(IncompleteMessageError) as exc_info:
            marshal(m)
        assert exc_info.value.document == {}

    def test_extension(self):
        m = textpb2.Extensions(opt_string="here")
        m.Extensions[textpb2.EXT["opt_ext_required"]].SetInParent()
        with pytest.raises(IncompleteMessageError) as exc_info:
            marshal(m)
        assert exc_info.value.document == {"optString": "here"}

    def test_independent_of_mode(self):
        m = textpb2.IndirectRequired()
        m.opt_nested.SetInParent()
        with pytest.raises(IncompleteMessageError) as exc_info:
            marshal(m, MarshalOptions(mode=EncodingMode.EMIT_UNPOPULATED))
        assert exc_info.value.missing == ["opt_nested.req_string"]
        assert exc_info.value.document == {
            "optNested": {"reqString": None},
        }


def test_invalid_utf8_map_key():
    # str_to_nested entry with key b"\xff" and an incomplete value
    m = textpb2.IndirectRequired.FromString(b"\x1a\x05\x0a\x01\xff\x12\x00")
    with pytest.raises(InvalidUTF8Error, match=r"pb2\.IndirectRequired\.str_to_nested"):
        find_missing_required(m)
