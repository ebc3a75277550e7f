import io
import uuid
from datetime import datetime, timedelta, timezone
from fractions import Fraction

import pytest

from ebikit.activity_key import ActivityKey
from ebikit.event_log import DataType, EventLog, Trace, read_xes, write_xes
from ebikit.formats import ParseError

SAMPLE = """<?xml version="1.0" encoding="UTF-8"?>
<log xes.version="1.0" xmlns="urn:example:xes">
  <extension name="Concept" prefix="concept" uri="urn:example:concept"/>
  <global scope="event"><string key="concept:name" value="unknown"/></global>
  <string key="source" value="sample"/>
  <trace>
    <string key="concept:name" value="t1"/>
    <int key="cost" value="3"/>
    <string key="kind" value="x"/>
    <event><string key="concept:name" value="a"/></event>
    <event><string key="concept:name" value="b"/></event>
  </trace>
  <trace>
    <string key="concept:name" value="t2"/>
    <int key="cost" value="7"/>
    <string key="kind" value="y"/>
    <event><string key="concept:name" value="a"/></event>
    <event><string key="concept:name" value="b"/></event>
  </trace>
  <trace>
    <string key="concept:name" value="t3"/>
    <string key="cost" value="5"/>
    <string key="kind" value="z"/>
    <event>
      <string key="concept:name" value="a"/>
      <date key="time:timestamp" value="2021-05-04T10:00:00+02:00"/>
    </event>
    <event><string key="concept:name" value="c"/></event>
  </trace>
</log>
"""


@pytest.fixture
def log():
    return EventLog.parse(SAMPLE)


def test_parse_counts_traces(log):
    assert len(log) == 3
    assert str(log) == "event log with 3 traces"


def test_finite_language(log):
    assert log.finite_language() == {("a", "b"), ("a", "c")}


def test_trace_counts(log):
    assert log.trace_counts() == {("a", "b"): 2, ("a", "c"): 1}
    assert sum(log.trace_counts().values()) == len(log)


def test_get_trace(log):
    assert log.activity_key.deprocess_trace(log.get_trace(0)) == ["a", "b"]
    assert log.activity_key.deprocess_trace(log.get_trace(2)) == ["a", "c"]
    assert log.get_trace(99) is None


def test_read_trace_with_fresh_activity_key(log):
    key = ActivityKey()
    activities = log.read_trace_with_activity_key(key, 2)
    assert key.activity2name == ["a", "c"]
    assert key.deprocess_trace(activities) == ["a", "c"]


def test_trace_attributes(log):
    attributes = log.trace_attributes()
    assert set(attributes) == {"concept:name", "cost", "kind"}
    assert str(attributes["kind"]) == "categorical"
    assert attributes["cost"].minimum == 3
    assert attributes["cost"].maximum == 7


def test_event_date_attribute_is_read(log):
    stamp = log.traces[2].events[0]["time:timestamp"]
    assert stamp == datetime(2021, 5, 4, 10, tzinfo=timezone(timedelta(hours=2)))


def test_export_round_trip(log):
    out = io.StringIO()
    log.export(out)
    again = EventLog.parse(out.getvalue())
    assert again.traces == log.traces
    assert again.finite_language() == log.finite_language()


def test_write_read_round_trip_with_rich_attributes():
    identifier = uuid.uuid4()
    moment = datetime(2022, 3, 1, 8, 30, tzinfo=timezone.utc)
    traces = [
        Trace(
            {"flag": True, "ratio": 0.25, "id": identifier, "items": [("first", 1), ("second", "two")]},
            [{"concept:name": "a", "time:timestamp": moment, "meta": {"inner": "v", "depth": 2}}],
        )
    ]
    out = io.StringIO()
    write_xes(traces, out)
    assert read_xes(io.StringIO(out.getvalue())) == traces


def test_read_from_binary_stream():
    traces = read_xes(io.BytesIO(SAMPLE.encode("utf-8")))
    assert [trace.attributes["concept:name"] for trace in traces] == ["t1", "t2", "t3"]


def test_empty_log_is_rejected():
    with pytest.raises(ParseError, match="no traces"):
        EventLog.parse('<?xml version="1.0"?><log></log>')


def test_invalid_xml_is_rejected():
    with pytest.raises(ParseError):
        EventLog.parse("<log><trace></log>")


def test_wrong_root_is_rejected():
    with pytest.raises(ParseError):
        read_xes(io.StringIO("<other/>"))


def test_bad_int_value_is_rejected():
    with pytest.raises(ParseError):
        read_xes(io.StringIO('<log><trace><int key="n" value="x"/></trace></log>'))


def test_info(log):
    out = io.StringIO()
    log.info(out)
    text = out.getvalue()
    assert text.startswith("Number of traces\t3\n")
    assert f"Number of unique traces\t{len(log.finite_language())}\n" in text
    assert f"Number of activities\t{len(log.activity_key)}\n" in text
    assert "kind\tcategorical" in text


def test_classifier_selects_key():
    traces = [Trace({}, [{"concept:name": "a", "org:resource": "r1"}, {"concept:name": "b", "org:resource": "r2"}])]
    log = EventLog(traces, ("org:resource",))
    assert log.finite_language() == {("r1", "r2")}


def test_data_type_numerical_range():
    data_type = DataType.init(3)
    data_type.update(7)
    data_type.update("5")
    assert data_type.minimum == 3
    assert data_type.maximum == 7
    assert str(data_type) == "numerical between 3 and 7"


def test_data_type_float():
    data_type = DataType.init(2.5)
    assert data_type.minimum == Fraction("2.5")


def test_data_type_categorical_rules():
    data_type = DataType.init("abc")
    assert str(data_type) == "categorical"
    data_type.update(None)
    assert str(data_type) == "categorical"
    data_type.update(4)
    assert str(data_type) == "undefined"


def test_data_type_numerical_with_text_becomes_undefined():
    data_type = DataType.init("2")
    data_type.update("abc")
    assert str(data_type) == "undefined"


def test_data_type_time_with_text_becomes_categorical():
    data_type = DataType.init(datetime(2020, 1, 2, tzinfo=timezone.utc))
    data_type.update("abc")
    assert str(data_type) == "categorical"


def test_data_type_time_range_and_format():
    early = datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    late = datetime(2021, 1, 1, tzinfo=timezone.utc)
    data_type = DataType.init(late)
    data_type.update(early)
    assert data_type.minimum == early
    assert data_type.maximum == late
    single = DataType.init(early)
    assert str(single) == "time between 2020-01-02 03:04:05 +00:00 and 2020-01-02 03:04:05 +00:00"


def test_data_type_boolean_is_undefined():
    data_type = DataType.init(True)
    data_type.update(True)
    assert str(data_type) == "undefined"