"""
The set of tree-nodes the parsing collaborator hands over.

Identifiers and literals carry no type information.
Working that out is entirely the inference engine's job.
Every node carries a span, so complaints can point at the right place.
Class-level type annotations make peace with the IDE.
"""
from pathlib import Path
from typing import Optional, Sequence
from .location import Span, BUILT_IN
from .ontology import Phrase, Nom

class Expr(Phrase):
	pass

class Number(Expr):
	value: float
	def __init__(self, value:float, span:Span=BUILT_IN):
		self.value, self.span = value, span
	def __repr__(self): return "<num:%r>" % self.value

class Variable(Expr):
	nom: Nom
	def __init__(self, nom:Nom):
		self.nom, self.span = nom, nom.span
	def __repr__(self): return "<ref:%s>" % self.nom.text

class Call(Expr):
	callee: Nom
	args: Sequence[Expr]
	def __init__(self, callee:Nom, args:Sequence[Expr], span:Span=None):
		self.callee, self.args = callee, tuple(args)
		self.span = span or callee.span
	def __repr__(self): return "<call:%s%r>" % (self.callee.text, self.args)

class Binary(Expr):
	op: str
	lhs: Expr
	rhs: Expr
	def __init__(self, op:str, lhs:Expr, rhs:Expr, span:Span=None):
		self.op, self.lhs, self.rhs = op, lhs, rhs
		self.span = span or lhs.span.cover(rhs.span)
	def __repr__(self): return "(%r %s %r)" % (self.lhs, self.op, self.rhs)

class Cond(Expr):
	if_part: Expr
	then_part: Expr
	else_part: Expr
	def __init__(self, if_part:Expr, then_part:Expr, else_part:Expr, span:Span=None):
		self.if_part, self.then_part, self.else_part = if_part, then_part, else_part
		self.span = span or if_part.span.cover(else_part.span)

class Let(Expr):
	""" let nom = value in body. Not recursive: the value cannot see its own name. """
	nom: Nom
	value: Expr
	body: Expr
	def __init__(self, nom:Nom, value:Expr, body:Expr, span:Span=None):
		self.nom, self.value, self.body = nom, value, body
		self.span = span or nom.span.cover(body.span)

class Prototype(Phrase):
	nom: Nom
	params: Sequence[Nom]
	is_extern: bool
	def __init__(self, nom:Nom, params:Sequence[Nom], is_extern:bool=False):
		self.nom, self.params, self.is_extern = nom, tuple(params), is_extern
		self.span = nom.span
	def __repr__(self):
		return "<%s%s(%s)>" % ("extern " if self.is_extern else "", self.nom.text, ", ".join(p.text for p in self.params))

class Function(Phrase):
	proto: Prototype
	body: Expr
	def __init__(self, proto:Prototype, body:Expr):
		assert not proto.is_extern, proto
		self.proto, self.body = proto, body
		self.span = proto.span
	@property
	def name(self) -> str: return self.proto.nom.text
	def __repr__(self): return "<fn %s>" % self.name

class Module:
	path: Optional[Path]
	externs: Sequence[Prototype]
	functions: Sequence[Function]
	main: Sequence[Expr]
	def __init__(self, externs=(), functions=(), main=(), path:Path=None):
		self.externs, self.functions, self.main = tuple(externs), tuple(functions), tuple(main)
		self.path = path
