"""
Kinds: the types of types.

A kind is either "*", the kind of an ordinary fully-applied type,
or an arrow from one kind to another, the kind of a type constructor.
Like types, kinds are value objects: immutable, hashable,
and equal whenever they have the same structure.
"""
from .ontology import InvariantViolation

class Kind:
	def __init__(self, *key):
		self._key = key
		self._hash = hash((type(self), key))
	def __hash__(self): return self._hash
	def __eq__(self, other): return type(self) is type(other) and self._key == other._key
	def __repr__(self) -> str: return self.to_string()
	def __str__(self) -> str: return self.to_string()
	
	def to_string(self) -> str: raise NotImplementedError(type(self))
	def is_arrow(self) -> bool: return False
	def arity(self) -> int:
		""" How many type-arguments it takes to get down to "*" """
		return 0
	def result(self) -> "Kind":
		raise InvariantViolation("Kind %s takes no type-arguments." % self)

class Star(Kind):
	def __init__(self): super().__init__()
	def to_string(self) -> str: return "*"

class KArrow(Kind):
	lhs: Kind
	rhs: Kind
	def __init__(self, lhs:Kind, rhs:Kind):
		assert isinstance(lhs, Kind) and isinstance(rhs, Kind), (lhs, rhs)
		super().__init__(lhs, rhs)
		self.lhs, self.rhs = lhs, rhs
	def to_string(self) -> str:
		# Arrows associate to the right, so only the left side ever needs parentheses.
		left = self.lhs.to_string()
		if self.lhs.is_arrow(): left = "(%s)" % left
		return "%s -> %s" % (left, self.rhs.to_string())
	def is_arrow(self) -> bool: return True
	def arity(self) -> int: return 1 + self.rhs.arity()
	def result(self) -> Kind: return self.rhs

STAR = Star()

def kind_of_arity(nr_params:int) -> Kind:
	""" The kind of a constructor taking so many ordinary types, e.g. 2 gives * -> * -> * """
	kind = STAR
	for _ in range(nr_params):
		kind = KArrow(STAR, kind)
	return kind
