"""
The unification approach to type-inference, in its classical form:
Work out the most general substitution that makes two terms identical,
or else explain precisely why no such thing exists.

Nothing here retries. Callers may catch a failure to report a type error,
but the same two terms will fail the same way every time.
"""
from .types import Type, TVar, TCon, TApp, TGen
from .substitution import Substitution, compose

class UnifyError(Exception):
	"""
	Carries the two terms that actually disagreed, which may be parts of larger terms.
	The inference driver fills in ``at`` (the phrase being checked) and ``context``
	(the larger terms) on the way out.
	"""
	gripe = "These types have different shapes: %s versus %s."
	internal = False
	
	def __init__(self, lhs:Type, rhs:Type, at=None):
		super().__init__(lhs, rhs)
		self.lhs, self.rhs, self.at = lhs, rhs, at
		self.context = None
	
	def describe(self, delta:dict=None) -> str:
		if delta is None: delta = {}
		return self.gripe % (self.lhs.render(delta), self.rhs.render(delta))
	
	def __str__(self) -> str: return self.describe()

class OccursCheckError(UnifyError):
	gripe = "This tries to equate %s with %s which contains it, but a type cannot be part of itself."

class KindMismatchError(UnifyError):
	gripe = "%s and %s are different kinds of type, so they cannot match."
	def describe(self, delta:dict=None) -> str:
		if delta is None: delta = {}
		pattern = "%s has kind %s, but %s has kind %s, so they cannot match."
		return pattern % (self.lhs.render(delta), self.lhs.kind(), self.rhs.render(delta), self.rhs.kind())

class ConstructorMismatchError(UnifyError):
	gripe = "This tries to be both %s and also %s, which cannot happen."

class GenericLeak(UnifyError):
	gripe = "A scheme placeholder reached the unifier (%s versus %s). Something forgot to instantiate."
	internal = True

def unify(t1:Type, t2:Type) -> Substitution:
	""" Raises some flavor of UnifyError if there is no unifier. """
	if isinstance(t1, TGen) or isinstance(t2, TGen):
		raise GenericLeak(t1, t2)
	if isinstance(t1, TVar):
		return _bind(t1, t2)
	if isinstance(t2, TVar):
		return _bind(t2, t1)
	if isinstance(t1, TCon) and isinstance(t2, TCon):
		if t1.name != t2.name:
			raise ConstructorMismatchError(t1, t2)
		if t1.kind() != t2.kind():
			raise KindMismatchError(t1, t2)
		return Substitution.empty()
	if isinstance(t1, TApp) and isinstance(t2, TApp):
		# Whatever the heads teach us must carry over into the arguments.
		s1 = unify(t1.lhs, t2.lhs)
		s2 = unify(s1.apply(t1.rhs), s1.apply(t2.rhs))
		return compose(s2, s1)
	raise UnifyError(t1, t2)

def _bind(v:TVar, t:Type) -> Substitution:
	if t == v:
		return Substitution.empty()
	if t.mentions_generic():
		raise GenericLeak(v, t)
	if t.mentions(v):
		raise OccursCheckError(v, t)
	if v.kind() != t.kind():
		raise KindMismatchError(v, t)
	return Substitution.singleton(v, t)
