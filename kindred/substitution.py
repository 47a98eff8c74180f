"""
Substitutions: finite maps from type-variable identity to type terms.

They are never mutated after construction. Composing two
makes a third, and the order of composition matters:
``compose(outer, inner)`` applies ``inner`` first and then ``outer``.
"""
from typing import Iterator, Mapping
from .types import Type, TVar

def _ident(key):
	return key.ident if isinstance(key, TVar) else key

class Substitution(Mapping):
	_bindings: dict
	
	def __init__(self, bindings:Mapping=()):
		self._bindings = {_ident(k): t for k, t in dict(bindings).items()}
		assert all(isinstance(t, Type) for t in self._bindings.values()), self._bindings
	
	@staticmethod
	def empty() -> "Substitution": return _EMPTY
	
	@staticmethod
	def singleton(var, typ:Type) -> "Substitution":
		""" var may be a TVar or just its identifier """
		return Substitution({var: typ})
	
	def __getitem__(self, key) -> Type: return self._bindings[_ident(key)]
	def __iter__(self) -> Iterator: return iter(self._bindings)
	def __len__(self) -> int: return len(self._bindings)
	def __repr__(self) -> str:
		delta = {}
		return "{%s}" % ", ".join("%r: %s" % (k, t.render(delta)) for k, t in self._bindings.items())
	
	def apply(self, typ:Type) -> Type:
		return typ.apply(self)

_EMPTY = Substitution()

def compose(outer:Substitution, inner:Substitution) -> Substitution:
	"""
	Applying the result is the same as applying inner, then outer.
	Inner's bindings get outer pushed through them; outer fills in the rest.
	"""
	if not inner: return outer
	if not outer: return inner
	bindings = {ident: typ.apply(outer) for ident, typ in inner.items()}
	for ident, typ in outer.items():
		bindings.setdefault(ident, typ)
	return Substitution(bindings)
