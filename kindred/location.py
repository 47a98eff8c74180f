"""
A simple, light-weight way to pass-around and point at places within a collection of files.
A span is a path and a range of character offsets. The parsing collaborator makes them;
the diagnostics read them back to draw a picture of where things went wrong.
"""
from pathlib import Path
from typing import NamedTuple, Optional

class Span(NamedTuple):
	""" Aimed at whatever prints error messages """
	path: Optional[Path]
	start: int
	stop: int
	
	def as_slice(self) -> slice: return slice(self.start, self.stop)
	
	def cover(self, other:"Span") -> "Span":
		"""
		The smallest span containing both. A span in some other file
		(or a built-in one) cannot be covered, so then it's just this span.
		"""
		if self.path != other.path:
			return self
		return Span(self.path, min(self.start, other.start), max(self.stop, other.stop))

# Location zero: the place where pre-defined things are defined.
BUILT_IN = Span(None, 0, 0)

_texts: dict[Path, str] = {}

def remember_text(path:Path, text:str):
	""" For source text that never touched the disk, such as a test case. """
	assert isinstance(path, Path)
	_texts[path] = text

def forget_texts():
	_texts.clear()

def recall_text(path:Optional[Path]) -> str:
	if path is None:
		return ""
	if path in _texts:
		return _texts[path]
	with open(path, "r", encoding="utf-8") as fh:
		return fh.read()
