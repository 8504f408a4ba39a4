# hornacoupy/yaml_utils.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import io
import unicodedata
import yaml

# Unicode spaces that sneak into horn configs copied from documents
ODD_SPACES = (0x00A0, 0x1680, *range(0x2000, 0x200B), 0x202F, 0x205F, 0x3000, 0xFEFF)
ZERO_WIDTH = (0x200B, 0x200C, 0x200D, 0x2060)


def _describe(codepoint: int) -> str:
	return f"{unicodedata.name(chr(codepoint))} (U+{codepoint:04X})"


ALL_BAD = {chr(cp): _describe(cp) for cp in ODD_SPACES + ZERO_WIDTH}
TAB_DESCRIPTION = "TAB in indentation (YAML forbids tabs)"
MAX_REPORTED = 50


@dataclass(frozen=True)
class Offense:
	line: int   # 1-based
	col: int    # 1-based
	description: str


def find_yaml_offenses(text: str) -> list[Offense]:
	"""Odd whitespace anywhere, and tabs inside the leading indentation."""
	offenses: list[Offense] = []
	for i, line in enumerate(text.splitlines(), start=1):
		indent = len(line) - len(line.lstrip(" \t"))
		for j, ch in enumerate(line, start=1):
			if ch in ALL_BAD:
				offenses.append(Offense(i, j, ALL_BAD[ch]))
			elif ch == "\t" and j <= indent:
				offenses.append(Offense(i, j, TAB_DESCRIPTION))
	return offenses


def normalize_yaml_text(text: str) -> str:
	"""Strip a leading BOM, turn odd whitespace into spaces and indentation tabs into two spaces."""
	text = text.lstrip("\uFEFF")
	for ch in ALL_BAD:
		text = text.replace(ch, " ")
	lines = []
	for line in text.splitlines():
		indent = len(line) - len(line.lstrip(" \t"))
		lines.append(line[:indent].replace("\t", "  ") + line[indent:])
	return "\n".join(lines)


def sanitize_yaml_text(text: str, strict: bool = False) -> str:
	"""Normalize offending whitespace, or raise ValueError listing it when strict."""
	offenses = find_yaml_offenses(text)
	if not offenses:
		return text
	if strict:
		buf = io.StringIO()
		buf.write("Disallowed whitespace found in YAML:\n")
		for off in offenses[:MAX_REPORTED]:
			buf.write(f"  line {off.line}, col {off.col}: {off.description}\n")
		if len(offenses) > MAX_REPORTED:
			buf.write(f"...and {len(offenses) - MAX_REPORTED} more.\n")
		raise ValueError(buf.getvalue())
	return normalize_yaml_text(text)


def load_yaml_config(path: str | Path, strict: bool = False) -> dict:
	"""Read, sanitize and safe-load a YAML mapping."""
	text = Path(path).read_text(encoding="utf-8")
	data = yaml.safe_load(sanitize_yaml_text(text, strict=strict))
	if not isinstance(data, dict):
		raise ValueError(f"{path}: top level of the configuration must be a mapping.")
	return data
