import io
import json
from datetime import datetime, timedelta, timezone

import pytest

from ebikit.executions import Execution, Executions
from ebikit.formats import ParseError

FIELDS = [
    "transition",
    "enabled_transitions_at_enablement",
    "time_of_enablement",
    "time_of_execution",
    "features_at_enablement",
]


@pytest.fixture
def executions():
    offset = timezone(timedelta(hours=1))
    return Executions(
        [
            Execution(
                transition=2,
                enabled_transitions_at_enablement=[0, 2],
                time_of_enablement=datetime(2023, 6, 1, 12, 0, tzinfo=offset),
                time_of_execution=datetime(2023, 6, 1, 12, 5, 30, tzinfo=offset),
                features_at_enablement=[4, 5],
            ),
            Execution(transition=0),
        ]
    )


def test_round_trip(executions):
    again = Executions.parse(str(executions))
    assert again.executions == executions.executions


def test_length_and_indexing(executions):
    assert len(executions) == 2
    assert executions[1].transition == 0
    assert [execution.transition for execution in executions] == [2, 0]


def test_output_is_compact_with_field_order(executions):
    text = str(executions)
    assert " " not in text
    data = json.loads(text)
    assert list(data) == ["executions"]
    assert list(data["executions"][0]) == FIELDS


def test_missing_optional_fields_are_none():
    parsed = Executions.parse('{"executions":[{"transition":3}]}')
    assert parsed[0] == Execution(transition=3)
    assert parsed[0].time_of_execution is None


def test_execution_json_round_trip(executions):
    first = executions[0]
    assert Execution.from_json(json.loads(str(first))) == first


def test_export_matches_str(executions):
    out = io.StringIO()
    executions.export(out)
    assert out.getvalue() == str(executions)


def test_info(executions):
    out = io.StringIO()
    executions.info(out)
    assert out.getvalue() == "Number of executions\t\t2\n"


def test_negative_transition_is_rejected():
    with pytest.raises(ParseError):
        Executions.parse('{"executions":[{"transition":-1}]}')


def test_missing_transition_is_rejected():
    with pytest.raises(ParseError, match="transition"):
        Executions.parse('{"executions":[{"features_at_enablement":[1]}]}')


def test_time_without_offset_is_rejected():
    with pytest.raises(ParseError):
        Executions.parse('{"executions":[{"transition":1,"time_of_execution":"2023-06-01T12:00:00"}]}')


def test_invalid_json_is_rejected():
    with pytest.raises(ParseError):
        Executions.parse("{not json")


def test_missing_executions_field_is_rejected():
    with pytest.raises(ParseError):
        Executions.parse("{}")