import io

import pytest

from ebikit.activity_key import ActivityKey
from ebikit.alignments import Alignments
from ebikit.deterministic_finite_automaton import DeterministicFiniteAutomaton
from ebikit.event_log import EventLog, Trace
from ebikit.executions import Execution, Executions
from ebikit.formats import ParseError
from ebikit.registry import (
    FILE_HANDLERS,
    FileHandler,
    ObjectType,
    file_handlers_for,
    find_file_handler,
    object_type_of,
)

DFA_TEXT = (
    '{"initialState": 0, "transitions": [{"from": 0, "to": 1, "label": "a"}], '
    '"finalStates": [1]}'
)


def test_find_by_extension_and_name():
    assert find_file_handler("xes").name == "event log"
    assert find_file_handler("compressed event log").file_extension == "xes.gz"


def test_find_unknown_raises():
    with pytest.raises(ValueError):
        find_file_handler("nonexistent")


def test_handler_display():
    assert str(find_file_handler("xes")) == "event log (.xes)"
    assert str(find_file_handler("dfa")) == "deterministic finite automaton (.dfa)"


def test_handler_equality_and_order_by_name():
    assert find_file_handler("dfa") == find_file_handler("deterministic finite automaton")
    assert hash(find_file_handler("exs")) == hash(find_file_handler("executions"))
    names = [handler.name for handler in sorted(FILE_HANDLERS)]
    assert names == sorted(names)


def test_object_type_display_and_article():
    assert str(ObjectType.LABELLED_PETRI_NET) == "labelled Petri net"
    assert ObjectType.EVENT_LOG.article() == "an"
    assert ObjectType.ALIGNMENTS.article() == ""
    assert ObjectType.DIRECTLY_FOLLOWS_MODEL.article() == "a"


def test_file_handlers_for_event_log_in_registry_order():
    names = [handler.name for handler in file_handlers_for(ObjectType.EVENT_LOG)]
    assert names == ["compressed event log", "event log"]


def test_file_handlers_for_type_without_handler():
    assert file_handlers_for(ObjectType.FINITE_LANGUAGE) == []


def test_object_type_of_known_objects():
    assert object_type_of(Executions([Execution(transition=0)])) is ObjectType.EXECUTIONS
    assert object_type_of(Alignments(ActivityKey())) is ObjectType.ALIGNMENTS
    assert object_type_of(DeterministicFiniteAutomaton()) is ObjectType.DETERMINISTIC_FINITE_AUTOMATON


def test_object_type_of_unknown_raises():
    with pytest.raises(TypeError):
        object_type_of(42)


def test_validate_accepts_valid_data():
    handler = find_file_handler("dfa")
    assert handler.validate(DFA_TEXT) is None
    assert handler.validate(DFA_TEXT.encode("utf-8")) is None


def test_validate_rejects_invalid_data():
    with pytest.raises(ParseError):
        find_file_handler("dfa").validate("not json")
    with pytest.raises(ParseError):
        find_file_handler("ali").validate("something else\n")
    with pytest.raises(ParseError):
        find_file_handler("xes.gz").validate(b"plain bytes")


def test_validate_rejects_bad_utf8():
    with pytest.raises(ParseError):
        find_file_handler("dfm").validate(b"\xff\xfe\xfa\n")


def _export(handler: FileHandler, obj: object) -> bytes:
    object_type = object_type_of(obj)
    exporter = next(export for kind, export in handler.exporters if kind is object_type)
    buffer = io.BytesIO()
    exporter(obj, buffer)
    return buffer.getvalue()


@pytest.mark.parametrize("extension", ["xes", "xes.gz"])
def test_event_log_export_and_import_round_trip(extension):
    handler = find_file_handler(extension)
    log = EventLog([Trace({}, [{"concept:name": "a"}, {"concept:name": "b"}])])
    data = _export(handler, log)
    handler.validate(data)
    importer = dict(handler.importers)[ObjectType.EVENT_LOG]
    restored = importer(io.BytesIO(data))
    assert restored.finite_language() == {("a", "b")}


def test_dfa_export_and_import_round_trip():
    handler = find_file_handler("dfa")
    dfa = DeterministicFiniteAutomaton.parse(DFA_TEXT)
    data = _export(handler, dfa)
    restored = dict(handler.importers)[ObjectType.DETERMINISTIC_FINITE_AUTOMATON](io.BytesIO(data))
    assert str(restored) == str(dfa)


def test_executions_export_and_import_round_trip():
    handler = find_file_handler("exs")
    executions = Executions([Execution(transition=3, enabled_transitions_at_enablement=[1, 3])])
    data = _export(handler, executions)
    restored = dict(handler.importers)[ObjectType.EXECUTIONS](io.BytesIO(data))
    assert str(restored) == str(executions)