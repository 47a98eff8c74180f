"""
Type terms.

A type is one of four things:

1. A variable, awaiting resolution by substitution. Variables have identity.
2. A named constructor, such as "number" or "list", with a fixed kind.
3. The application of one type to another, as in "list number".
4. A numbered placeholder for the variables a scheme quantifies over.

All four are value objects: immutable, hashable, and compared structurally,
except that a variable is equal to another exactly when the identifiers match.
Nothing here ever modifies a term in place. A rewrite that changes nothing
hands back the very same object, so sub-terms stay shared between parents.

Operations that walk an entire term are visitors, reached by double-dispatch:
``term.visit(visitor)`` calls back ``visitor.on_variable(term)`` or whichever.
"""
from typing import Iterable, Mapping, Optional, Sequence
from .kinds import Kind, kind_of_arity
from .ontology import InvariantViolation

class IllKinded(InvariantViolation):
	""" Somebody built an application whose head is not a constructor. """

class Type:
	def __init__(self, *key):
		self._key = key
		self._hash = hash((type(self), key))
	def __hash__(self): return self._hash
	def __eq__(self, other): return type(self) is type(other) and self._key == other._key
	def __repr__(self) -> str: return self.render({})
	def __str__(self) -> str: return self.render({})
	
	def visit(self, visitor:"TypeVisitor"): raise NotImplementedError(type(self))
	def kind(self, gen_kinds:Sequence[Kind]=()) -> Kind:
		"""
		Placeholders do not describe themselves, so whoever asks
		about a term that might contain them must supply the kinds
		of the enclosing scheme.
		"""
		raise NotImplementedError(type(self))
	
	def to_string(self) -> str: return self.render({})
	def render(self, delta:dict) -> str:
		""" Share a delta between several terms to get consistent names for their variables. """
		return self.visit(Render(delta))
	
	def apply(self, sub:Mapping) -> "Type":
		"""
		Replace each variable in the substitution's domain with its image, in a single pass.
		The images are not themselves substituted again: {a: b, b: c} takes "a" to "b".
		A substitution that ought to chase its own bindings must be composed into
		a form that does not need to; this is how compose(outer, inner).apply(t)
		equals outer.apply(inner.apply(t)) for every pair of substitutions.
		"""
		if not sub: return self
		return self.visit(Rewrite(sub))
	
	def free_vars(self) -> tuple["TVar", ...]:
		""" Each distinct variable, in order of first appearance """
		seen = {}
		self.poll(seen)
		return tuple(seen)
	
	def poll(self, seen:dict): pass
	def mentions(self, v:"TVar") -> bool: return False
	def mentions_generic(self) -> bool: return False

class TVar(Type):
	""" Did I say value-object? Not for type variables! These have identity. """
	def __init__(self, ident, kind:Kind):
		assert isinstance(kind, Kind), kind
		super().__init__(ident)
		self.ident, self._kind = ident, kind
	def visit(self, visitor:"TypeVisitor"): return visitor.on_variable(self)
	def kind(self, gen_kinds=()) -> Kind: return self._kind
	def poll(self, seen:dict): seen.setdefault(self, None)
	def mentions(self, v:"TVar") -> bool: return self == v

class TCon(Type):
	def __init__(self, name:str, kind:Kind):
		assert isinstance(name, str) and isinstance(kind, Kind), (name, kind)
		super().__init__(name, kind)
		self.name, self._kind = name, kind
	def visit(self, visitor:"TypeVisitor"): return visitor.on_constructor(self)
	def kind(self, gen_kinds=()) -> Kind: return self._kind

class TApp(Type):
	def __init__(self, lhs:Type, rhs:Type):
		assert isinstance(lhs, Type) and isinstance(rhs, Type), (lhs, rhs)
		super().__init__(lhs, rhs)
		self.lhs, self.rhs = lhs, rhs
	def visit(self, visitor:"TypeVisitor"): return visitor.on_application(self)
	def kind(self, gen_kinds=()) -> Kind:
		head = self.lhs.kind(gen_kinds)
		if not head.is_arrow():
			raise IllKinded("%s has kind %s, so it cannot be applied to %s." % (self.lhs, head, self.rhs))
		return head.result()
	def poll(self, seen:dict):
		self.lhs.poll(seen)
		self.rhs.poll(seen)
	def mentions(self, v:"TVar") -> bool:
		return self.lhs.mentions(v) or self.rhs.mentions(v)
	def mentions_generic(self) -> bool:
		return self.lhs.mentions_generic() or self.rhs.mentions_generic()

class TGen(Type):
	def __init__(self, index:int):
		assert isinstance(index, int) and index >= 0, index
		super().__init__(index)
		self.index = index
	def visit(self, visitor:"TypeVisitor"): return visitor.on_generic(self)
	def kind(self, gen_kinds=()) -> Kind:
		if self.index < len(gen_kinds):
			return gen_kinds[self.index]
		raise InvariantViolation("Placeholder %s has no kind in this context." % self)
	def mentions_generic(self) -> bool: return True

def free_vars_of(types:Iterable[Type]) -> tuple[TVar, ...]:
	seen = {}
	for t in types: t.poll(seen)
	return tuple(seen)

#########################

# Functions are curried: "a -> b -> c" is "(->) a ((->) b c)".
ARROW = TCon("->", kind_of_arity(2))

def arrow(arg:Type, res:Type) -> Type:
	return TApp(TApp(ARROW, arg), res)

def arrows(params:Sequence[Type], result:Type) -> Type:
	for p in reversed(params):
		result = arrow(p, result)
	return result

def spine(t:Type) -> tuple[Type, list[Type]]:
	""" Unwind a chain of applications into its head and arguments. """
	args = []
	while isinstance(t, TApp):
		args.append(t.rhs)
		t = t.lhs
	args.reverse()
	return t, args

def split_arrow(t:Type) -> Optional[tuple[Type, Type]]:
	head, args = spine(t)
	if head == ARROW and len(args) == 2:
		return args[0], args[1]

def _name_variable(n):
	name = ""
	while n:
		n, remainder = divmod(n-1, 26)
		name = chr(97+remainder) + name
	return name

#########################

class TypeVisitor:
	def on_variable(self, v:TVar): raise NotImplementedError(type(self))
	def on_constructor(self, c:TCon): raise NotImplementedError(type(self))
	def on_application(self, a:TApp): raise NotImplementedError(type(self))
	def on_generic(self, g:TGen): raise NotImplementedError(type(self))

class Render(TypeVisitor):
	""" Return a string representation of the term. """
	def __init__(self, delta:dict):
		self.delta = delta
	def on_variable(self, v: TVar):
		if v not in self.delta:
			self.delta[v] = "?%s" % _name_variable(len(self.delta)+1)
		return self.delta[v]
	def on_constructor(self, c: TCon):
		return c.name if c.name.isidentifier() else "(%s)" % c.name
	def on_application(self, a: TApp):
		pair = split_arrow(a)
		if pair:
			arg, res = pair
			text = arg.visit(self)
			if split_arrow(arg): text = "(%s)" % text
			return "%s -> %s" % (text, res.visit(self))
		head, args = spine(a)
		return " ".join([head.visit(self)] + [self._argument(x) for x in args])
	def _argument(self, t:Type):
		text = t.visit(self)
		return "(%s)" % text if isinstance(t, TApp) else text
	def on_generic(self, g: TGen):
		return "'%s" % _name_variable(g.index+1)

class Rewrite(TypeVisitor):
	""" Replace variables per gamma, which maps identifiers to terms. """
	def __init__(self, gamma:Mapping):
		self.gamma = gamma
	def on_variable(self, v: TVar):
		return self.gamma.get(v.ident, v)
	def on_constructor(self, c: TCon):
		return c
	def on_application(self, a: TApp):
		lhs, rhs = a.lhs.visit(self), a.rhs.visit(self)
		if lhs is a.lhs and rhs is a.rhs: return a
		return TApp(lhs, rhs)
	def on_generic(self, g: TGen):
		return g
