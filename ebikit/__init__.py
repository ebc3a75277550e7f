"""Activity keys, automata, directly follows models, alignments, event logs and executions, with their file formats."""

__version__ = "0.1.0"