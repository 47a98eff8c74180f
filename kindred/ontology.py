"""
These most-fundamental classes are separate from the rest to avoid various
circular-import scenarios. Anything a diagnostic can point at is a Phrase,
and every Phrase knows its span.
"""
from .location import Span, BUILT_IN

class InvariantViolation(Exception):
	"""
	Something that cannot happen, did.
	That's a bug in here somewhere, not a problem with the user's program,
	and it must never be reported as if it were an ordinary type error.
	"""

class Phrase:
	span: Span = BUILT_IN

class Nom(Phrase):
	""" Representing the occurrence of a name anywhere. """
	def __init__(self, text:str, span:Span=None):
		assert isinstance(text, str)
		assert isinstance(span, Span) or span is None, type(span)
		self.text, self.span = text, span or BUILT_IN
	def __repr__(self): return "<Name %r>" % self.text
