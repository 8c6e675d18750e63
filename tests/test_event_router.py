"""Tests for issuer classification."""

import json

import pytest

from hookguard.errors.exceptions import MissingSignatureError
from hookguard.services.event_router import (
    FordefiRequest,
    HypernativeRequest,
    classify,
    parse_hypernative,
)

RISK_BODY = json.dumps({"digitalSignature": "c2ln", "data": '{"risk":"high"}'}).encode()


def test_signature_header_only_is_fordefi():
    routed = classify({"x-signature": "c2ln"}, b'{"event":{}}')
    assert isinstance(routed, FordefiRequest)
    assert routed.signature == "c2ln"
    assert routed.raw_body == b'{"event":{}}'


def test_transaction_header_with_digital_signature_is_hypernative():
    routed = classify({"fordefi-transaction-id": "tx123"}, RISK_BODY)
    assert isinstance(routed, HypernativeRequest)
    assert routed.transaction_id == "tx123"
    assert routed.signature == "c2ln"
    assert routed.signed_data == b'{"risk":"high"}'


def test_both_markers_prefer_hypernative():
    routed = classify({"x-signature": "other", "fordefi-transaction-id": "tx123"}, RISK_BODY)
    assert isinstance(routed, HypernativeRequest)


def test_transaction_header_without_digital_signature_falls_back_to_fordefi():
    routed = classify({"x-signature": "c2ln", "fordefi-transaction-id": "tx123"}, b'{"data":"x"}')
    assert isinstance(routed, FordefiRequest)


def test_transaction_header_with_non_json_body_falls_back_to_fordefi():
    routed = classify({"x-signature": "c2ln", "fordefi-transaction-id": "tx123"}, b"not json")
    assert isinstance(routed, FordefiRequest)


def test_digital_signature_without_transaction_header_is_not_hypernative():
    with pytest.raises(MissingSignatureError):
        classify({}, RISK_BODY)


@pytest.mark.parametrize(
    "headers, body",
    [
        ({}, b'{"event":{}}'),
        ({"fordefi-transaction-id": "tx123"}, b'{"digitalSignature":""}'),
        ({"fordefi-transaction-id": "tx123"}, b"[1, 2]"),
        ({"x-signature": ""}, b"{}"),
    ],
)
def test_no_marker_is_missing_signature(headers, body):
    with pytest.raises(MissingSignatureError):
        classify(headers, body)


def test_signed_data_requires_string():
    routed = classify({"fordefi-transaction-id": "tx"}, b'{"digitalSignature":"c2ln","data":{"risk":"high"}}')
    assert isinstance(routed, HypernativeRequest)
    assert routed.signed_data is None


def test_parse_hypernative_without_transaction_header():
    routed = parse_hypernative({}, RISK_BODY)
    assert routed.transaction_id is None
    assert routed.document["data"] == '{"risk":"high"}'


@pytest.mark.parametrize("body", [b'{"data":"x"}', b"not json", b'{"digitalSignature": null}'])
def test_parse_hypernative_requires_digital_signature(body):
    with pytest.raises(MissingSignatureError, match="digitalSignature"):
        parse_hypernative({"fordefi-transaction-id": "tx"}, body)


def test_non_string_digital_signature_still_routes_to_hypernative():
    body = b'{"digitalSignature": 12, "data": "{}"}'
    routed = classify({"x-signature": "c2ln", "fordefi-transaction-id": "tx123"}, body)
    assert isinstance(routed, HypernativeRequest)
    assert routed.signature == 12


DEEPLY_NESTED = b"[" * 200000 + b"]" * 200000


def test_deeply_nested_body_with_transaction_header_is_missing_signature():
    with pytest.raises(MissingSignatureError):
        classify({"fordefi-transaction-id": "tx1"}, DEEPLY_NESTED)


def test_deeply_nested_body_falls_back_to_fordefi():
    routed = classify({"fordefi-transaction-id": "tx1", "x-signature": "c2ln"}, DEEPLY_NESTED)
    assert isinstance(routed, FordefiRequest)


def test_parse_hypernative_deeply_nested_body():
    with pytest.raises(MissingSignatureError):
        parse_hypernative({}, DEEPLY_NESTED)
