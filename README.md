# ebikit

Objects and file formats for stochastic process mining.

ebikit reads, writes and describes the objects that process-mining tools
exchange. It uses only the Python standard library.

## What is in it

- `ebikit.activity_key`: `ActivityKey` maps activity labels to compact
  `Activity` identifiers. Identifiers are handed out in order of first
  appearance. `deprocess_trace` and `deprocess_set` map identifiers back to
  labels. `ActivityKeyTranslator` carries activities from one key to another
  and adds labels the target key does not have yet.
- `ebikit.deterministic_finite_automaton`: `DeterministicFiniteAutomaton`
  in the `.dfa` JSON format, with the fields `initialState`, `transitions`
  (objects with `from`, `to` and `label`) and `finalStates`. Adding a second
  transition with the same source and label raises `ValueError`.
- `ebikit.directly_follows_model`: `DirectlyFollowsModel` in the `.dfm`
  line-based text format.
- `ebikit.alignments`: `Alignments`, lists of `Move` values (log, model,
  synchronous and silent moves, see `MoveKind`), in the `.ali` line-based
  text format.
- `ebikit.event_log`: `EventLog` over XES documents (`.xes`), using
  `read_xes` and `write_xes`. Events are classified by their `concept:name`
  attribute by default. `trace_attributes()` infers a `DataType` for every
  trace attribute: categorical, numerical with a range, time with a range,
  or undefined. `finite_language()` and `trace_counts()` give the distinct
  traces and how often each one occurs.
- `ebikit.compressed_event_log`: `read_compressed_event_log` and
  `export_compressed_event_log` handle gzip-compressed XES (`.xes.gz`).
- `ebikit.executions`: `Executions` and `Execution` in the `.exs` JSON
  format. Times must carry a UTC offset.
- `ebikit.dottable`: `DotGraph`, a small graph builder whose `to_dot()`
  returns Graphviz DOT text. The `to_dot()` methods of the automaton and the
  directly follows model return a `DotGraph`.
- `ebikit.formats`: `ParseError` (a `ValueError`) and `LineReader`. The line
  readers skip lines that start with `#`.
- `ebikit.registry`: `ObjectType`, the `FileHandler`s for the formats above,
  `find_file_handler` (by name or extension), `object_type_of` and
  `file_handlers_for`.
- `ebikit.inputs`: `open_input` reads a file, or standard input for `-`.
  `read_as_object` and `read_as_any_object` try each file handler in turn
  and return the object together with the handler that read it.
  `validate_object_of` checks data against one handler.
- `ebikit.outputs`: `OutputType`, `Exporter`, `output_type_of`,
  `exporters_for`, `default_exporter`, `select_exporter`, `export_to_file`
  and `export_to_string`. Results may be objects, text, `Svg` strings,
  non-negative integers or `Fraction`s. `select_exporter` picks the exporter
  whose extension matches the file name and tries the shortest extensions
  first. Otherwise it uses the default exporter. For event logs the default
  is compressed XES.

Every object type has `read(stream)`, `parse(text)`, `export(stream)` and
`info(stream)`. Malformed input raises `ParseError`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
import io

from ebikit.activity_key import ActivityKey
from ebikit.deterministic_finite_automaton import DeterministicFiniteAutomaton

key = ActivityKey()
trace = key.process_trace(["register", "check", "pay"])
print(key.deprocess_trace(trace))      # ['register', 'check', 'pay']

dfa = DeterministicFiniteAutomaton.parse(
    '{"initialState": 0,'
    ' "transitions": [{"from": 0, "to": 1, "label": "a"}],'
    ' "finalStates": [1]}'
)
print(dfa.can_terminate_in_state(1))   # True

out = io.StringIO()
dfa.export(out)
print(out.getvalue())
print(dfa.to_dot().to_dot())
```

To identify an unknown file:

```python
from ebikit.inputs import open_input, read_as_any_object

data = open_input("model.dfm")
obj, handler = read_as_any_object(data)
print(handler)                          # directly follows model (.dfm)
```

To write a result in the format that the file name asks for:

```python
from ebikit.outputs import output_type_of, select_exporter, export_to_file

exporter = select_exporter(output_type_of(obj), "copy.dfm")
export_to_file("copy.dfm", obj, exporter)
```

## What it does not do

- It has no command-line program. It offers no analysis, conformance,
  discovery, sampling or probability computations.
- `ObjectType` names stochastic deterministic finite automata, finite
  languages, finite stochastic languages, labelled Petri nets and stochastic
  labelled Petri nets. No file handler reads or writes them, so
  `file_handlers_for` returns an empty list for these types.
- Directly follows models are not converted to Petri nets.
- `DotGraph` produces DOT text only. It does no layout and draws no images.