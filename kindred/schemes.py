"""
Type schemes: where let-polymorphism comes from.

Generalizing a type quantifies over its free variables, except those
the enclosing environment still has a stake in, by putting a numbered
placeholder in place of each. Instantiating a scheme puts a brand-new
variable in place of each placeholder, so every use-site gets its own
copy which can unify with whatever it likes without bothering the others.
"""
import itertools, threading
from typing import Collection, Sequence
from .kinds import Kind, STAR
from .types import Type, TVar, TGen, Rewrite
from .substitution import Substitution

class VariableSupply:
	"""
	The one piece of mutable state in the whole business: a monotonic
	counter of variable identities. Use one per inference run; never reset
	it mid-run. Runs on separate threads may share one, since all that
	matters is that no identifier comes out twice.
	"""
	def __init__(self, start:int=0):
		self._counter = itertools.count(start)
		self._lock = threading.Lock()
	
	def fresh(self, kind:Kind=STAR) -> TVar:
		with self._lock:
			ident = next(self._counter)
		return TVar(ident, kind)
	
	def several(self, kinds:Sequence[Kind]) -> tuple[TVar, ...]:
		return tuple(self.fresh(k) for k in kinds)

class Scheme:
	"""
	The kinds are in placeholder order: TGen(i) has kinds[i].
	There is no qualified-type (predicate) component.
	"""
	kinds: tuple[Kind, ...]
	body: Type
	
	def __init__(self, kinds:Sequence[Kind], body:Type):
		assert all(isinstance(k, Kind) for k in kinds), kinds
		assert isinstance(body, Type), body
		self.kinds, self.body = tuple(kinds), body
	
	@staticmethod
	def monomorphic(typ:Type) -> "Scheme":
		return Scheme((), typ)
	
	def __eq__(self, other): return type(other) is Scheme and (self.kinds, self.body) == (other.kinds, other.body)
	def __hash__(self): return hash((self.kinds, self.body))
	def __repr__(self) -> str: return self.render({})
	def __str__(self) -> str: return self.render({})
	
	def render(self, delta:dict) -> str:
		body = self.body.render(delta)
		if not self.kinds: return body
		quantified = " ".join(TGen(i).render(delta) for i in range(len(self.kinds)))
		return "forall %s. %s" % (quantified, body)
	
	def free_vars(self) -> tuple[TVar, ...]:
		return self.body.free_vars()
	
	def apply(self, sub:Substitution) -> "Scheme":
		body = self.body.apply(sub)
		return self if body is self.body else Scheme(self.kinds, body)

class Instantiate(Rewrite):
	def __init__(self, actuals:Sequence[Type]):
		super().__init__({})
		self.actuals = actuals
	def on_generic(self, g: TGen):
		return self.actuals[g.index]

def generalize(env_bound_vars:Collection[TVar], typ:Type) -> Scheme:
	"""
	Quantify over those free variables of typ not bound in the environment,
	numbering them by first appearance.
	"""
	bound = frozenset(env_bound_vars)
	quantified = [v for v in typ.free_vars() if v not in bound]
	gamma = Substitution({v: TGen(i) for i, v in enumerate(quantified)})
	return Scheme([v.kind() for v in quantified], typ.apply(gamma))

def instantiate(scheme:Scheme, supply) -> Type:
	""" supply is anything with a fresh(kind) method, normally a VariableSupply. """
	if not scheme.kinds:
		return scheme.body
	actuals = [supply.fresh(k) for k in scheme.kinds]
	return scheme.body.visit(Instantiate(actuals))
