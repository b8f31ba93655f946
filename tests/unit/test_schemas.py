"""Unit tests for decoded event records and the JSON Lines source"""
import json

import pytest
from pydantic import ValidationError

from punks_indexer.schemas.events import (
    PunkBought,
    PunkOffered,
    global_id,
    parse_event,
)
from punks_indexer.services.sources import read_events

from factories import ZERO

META = {
    "transaction_hash": "0xABCDEF",
    "log_index": 4,
    "block_number": 3914600,
    "block_timestamp": 1498000000,
}


class TestParseEvent:
    def test_discriminates_by_kind(self):
        event = parse_event({"kind": "punk_bought", "punk_index": 3, "value": 5,
                             "from_address": "0xA", "to_address": "0xB", **META})
        assert isinstance(event, PunkBought)
        assert event.punk_index == 3

    def test_addresses_lower_cased(self):
        event = parse_event({"kind": "punk_bought", "punk_index": 3, "value": 5,
                             "from_address": "0xAbC", "to_address": "0xDeF", **META})
        assert event.from_address == "0xabc"
        assert event.to_address == "0xdef"
        assert event.transaction_hash == "0xabcdef"

    def test_offer_defaults_to_public(self):
        event = parse_event({"kind": "punk_offered", "punk_index": 7, "min_value": 100, **META})
        assert isinstance(event, PunkOffered)
        assert event.to_address == ZERO

    def test_event_id_and_position(self):
        event = parse_event({"kind": "punk_no_longer_for_sale", "punk_index": 7, **META})
        assert event.event_id == "0xabcdef-4"
        assert event.position == (3914600, 4)
        assert global_id("0xabcdef", 4) == event.event_id

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            parse_event({"kind": "punk_burned", "punk_index": 1, **META})

    def test_negative_value_rejected(self):
        with pytest.raises(ValidationError):
            parse_event({"kind": "punk_bid_entered", "punk_index": 1, "value": -1,
                         "from_address": "0xa", **META})

    def test_records_are_frozen(self):
        event = parse_event({"kind": "punk_no_longer_for_sale", "punk_index": 7, **META})
        with pytest.raises(ValidationError):
            event.punk_index = 8


class TestReadEvents:
    def test_skips_blank_and_malformed_lines(self, tmp_path):
        path = tmp_path / "events.jsonl"
        lines = [
            json.dumps({"kind": "assign", "to_address": "0xA", "punk_index": 1, **META}),
            "",
            json.dumps({"kind": "assign", "punk_index": 2, **META}),
            "{not json",
            json.dumps({"kind": "punk_no_longer_for_sale", "punk_index": 1, **{**META, "log_index": 5}}),
        ]
        path.write_text("\n".join(lines) + "\n")

        events = list(read_events(path))

        assert [e.kind for e in events] == ["assign", "punk_no_longer_for_sale"]
        assert events[0].to_address == "0xa"
