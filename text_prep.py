"""
Text preparation
  • Builds the utterance from a literal string or a text file.
  • Applies `original-->replacement` rule files in command-line order.
"""

from __future__ import annotations

import logging
import os

log = logging.getLogger(__name__)

# ---------- Constants -------------------------------------------------------

SENTENCE_END = (".", "!", "?", ";", ":")
LINE_JOINER = "  "
RULE_SEPARATOR = "-->"


class InputFileNotFound(FileNotFoundError):
    def __init__(self, path: str):
        super().__init__(f"Input file '{path}' not found.")
        self.path = path


# ---------- Helpers ---------------------------------------------------------

def _read_lines(path: str) -> list[str]:
    with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
        return f.read().splitlines()


def terminate_line(line: str) -> str:
    """Strip trailing whitespace and make sure a non-blank line ends a sentence."""
    line = line.rstrip()
    if line and not line.endswith(SENTENCE_END):
        line += "."
    return line


def read_input_file(path: str) -> str:
    """Merge every line of a text file into one utterance."""
    if not os.path.isfile(path):
        raise InputFileNotFound(path)
    return LINE_JOINER.join(terminate_line(line) for line in _read_lines(path))


def parse_rule(line: str) -> tuple[str, str] | None:
    if not line.strip() or RULE_SEPARATOR not in line:
        return None
    parts = [p for p in line.split(RULE_SEPARATOR) if p]
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def load_rules(path: str) -> list[tuple[str, str]]:
    rules = []
    for line in _read_lines(path):
        rule = parse_rule(line)
        if rule is not None:
            rules.append(rule)
    log.debug("Loaded %d rules from %s", len(rules), path)
    return rules


def apply_rules(text: str, rules) -> str:
    for original, replacement in rules:
        text = text.replace(original, replacement)
    return text


def apply_rule_files(text: str, paths) -> str:
    """Run each rule file over text in order; missing files only warn."""
    for path in paths:
        if not os.path.isfile(path):
            print(f"Warning: Parse file '{path}' not found. Skipping.")
            continue
        text = apply_rules(text, load_rules(path))
    return text


def normalize_quotes(text: str) -> str:
    return text.replace('"', "'")
