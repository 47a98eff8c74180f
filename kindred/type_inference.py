"""
The inference driver: classic Damas-Milner over the tree from the parser.

Top-level functions are grouped into the strongly-connected components
of the call graph, and each group is solved only after everything it calls
has been generalized. Within a group, the names are monomorphic.

A failure stops work on the group where it happens, but not on its siblings.
The names in a failed group get the scheme "forall 'a. 'a", which agrees with
anything, so one mistake does not set off a cascade of complaints downstream.
"""
import functools
from typing import Optional, Sequence
from boozetools.support.foundation import Visitor, strongly_connected_components_hashable
from . import syntax
from .diagnostics import Report, TooManyIssues
from .environment import Environment, UndefinedName
from .kinds import STAR
from .ontology import Nom, Phrase, InvariantViolation
from .primitive import Preamble, standard_preamble, literal_number, literal_flag, literal_unit
from .schemes import Scheme, VariableSupply, generalize, instantiate
from .substitution import Substitution, compose
from .types import Type, TGen, arrows, free_vars_of
from .unification import UnifyError, unify

ANYTHING = Scheme([STAR], TGen(0))

def infer_types(module:syntax.Module, report:Report, preamble:Preamble=standard_preamble, supply:VariableSupply=None) -> dict[str, Scheme]:
	"""
	Returns the schemes of the module's externs and top-level functions.
	Problems go on the report.
	
	Reaching the report's limit on issues does not stop the work.
	Every declaration still gets a scheme; the report just stops keeping complaints.
	"""
	deduce = DeductionEngine(preamble, report, supply or VariableSupply())
	call_graph = CallGraph(module)
	steps = [functools.partial(report.redefined, *dup) for dup in call_graph.duplicates]
	steps.extend(functools.partial(deduce.declare_extern, proto) for proto in module.externs)
	steps.extend(functools.partial(deduce.solve, component) for component in strongly_connected_components_hashable(call_graph.graph))
	steps.extend(functools.partial(deduce.solve_expression, expr) for expr in module.main)
	for step in steps:
		try:
			step()
		except TooManyIssues:
			report.info("Issue limit reached. Checking the rest without keeping complaints.")
	return deduce.schemes

class CallGraph(Visitor):
	"""
	Which top-level functions refer to which others?
	Parameters and let-bindings shadow top-level names, so they don't count.
	A function defined twice keeps its first definition; the rest are
	listed in duplicates as (name, first, guilty) for the report.
	"""
	def __init__(self, module:syntax.Module):
		self.graph = {}
		self.duplicates = []
		self._by_name = {}
		for fn in module.functions:
			if fn.name in self._by_name:
				self.duplicates.append((fn.name, self._by_name[fn.name].proto.nom, fn.proto.nom))
			else:
				self._by_name[fn.name] = fn
				self.graph[fn] = set()
		for fn, edges in self.graph.items():
			self._edges = edges
			self.visit(fn.body, frozenset(p.text for p in fn.proto.params))
	
	def _refer(self, nom:Nom, shadow:frozenset):
		if nom.text not in shadow and nom.text in self._by_name:
			self._edges.add(self._by_name[nom.text])
	
	def visit_Number(self, expr:syntax.Number, shadow): pass
	
	def visit_Variable(self, expr:syntax.Variable, shadow):
		self._refer(expr.nom, shadow)
	
	def visit_Call(self, expr:syntax.Call, shadow):
		self._refer(expr.callee, shadow)
		for a in expr.args:
			self.visit(a, shadow)
	
	def visit_Binary(self, expr:syntax.Binary, shadow):
		self.visit(expr.lhs, shadow)
		self.visit(expr.rhs, shadow)
	
	def visit_Cond(self, expr:syntax.Cond, shadow):
		self.visit(expr.if_part, shadow)
		self.visit(expr.then_part, shadow)
		self.visit(expr.else_part, shadow)
	
	def visit_Let(self, expr:syntax.Let, shadow):
		self.visit(expr.value, shadow)
		self.visit(expr.body, shadow | {expr.nom.text})

class DeductionEngine(Visitor):
	"""
	Visiting an expression yields its type, modulo the substitution accumulated so far.
	That substitution is threaded through every step and only ever grows by composition.
	"""
	_sub: Substitution
	
	def __init__(self, preamble:Preamble, report:Report, supply:VariableSupply):
		self._preamble = preamble
		self._report = report
		self._supply = supply
		self._env = preamble.environment()
		self._sub = Substitution.empty()
		self.schemes: dict[str, Scheme] = {}
		self.main_types: list[Optional[Type]] = []
	
	def _define(self, name:str, scheme:Scheme):
		self._env = self._env.extend({name: scheme})
		self.schemes[name] = scheme
		self._report.info(">>", name, ":", scheme)
	
	def declare_extern(self, proto:syntax.Prototype):
		typ = self._preamble.extern_type(len(proto.params))
		self._define(proto.nom.text, Scheme.monomorphic(typ))
	
	def solve(self, component:Sequence[syntax.Function]):
		self._sub = Substitution.empty()
		guesses = {fn: self._supply.fresh() for fn in component}
		env = self._env.extend({fn.name: Scheme.monomorphic(g) for fn, g in guesses.items()})
		site = component[0]
		try:
			for fn in component:
				site = fn
				self._unify(guesses[fn], self._function_type(fn, env), fn)
		except (UnifyError, UndefinedName, InvariantViolation) as ex:
			# Bind the names first: the complaint may raise TooManyIssues.
			for fn in component:
				self._define(fn.name, ANYTHING)
			self._complain(ex, site)
			return
		outer = self._bound_vars(self._env)
		for fn in component:
			self._define(fn.name, generalize(outer, self._sub.apply(guesses[fn])))
	
	def solve_expression(self, expr:syntax.Expr) -> Optional[Type]:
		self._sub = Substitution.empty()
		try:
			typ = self._sub.apply(self.visit(expr, self._env))
		except (UnifyError, UndefinedName, InvariantViolation) as ex:
			self.main_types.append(None)
			self._complain(ex, expr)
			return None
		self._report.info(">>", typ)
		self.main_types.append(typ)
		return typ
	
	def _complain(self, ex:Exception, site:Phrase):
		if isinstance(ex, UndefinedName):
			self._report.undefined_name(ex.nom)
		elif isinstance(ex, UnifyError) and not ex.internal:
			self._report.type_mismatch(ex)
		else:
			self._report.internal_error(getattr(ex, "at", None) or site, ex)
	
	def _unify(self, lhs:Type, rhs:Type, at:Phrase):
		lhs, rhs = self._sub.apply(lhs), self._sub.apply(rhs)
		try:
			step = unify(lhs, rhs)
		except UnifyError as ex:
			ex.at, ex.context = at, (lhs, rhs)
			raise
		self._sub = compose(step, self._sub)
	
	def _bound_vars(self, env:Environment):
		""" What the environment still has a stake in, in light of what we know so far """
		return free_vars_of(self._sub.apply(v) for v in env.free_vars())
	
	def _function_type(self, fn:syntax.Function, env:Environment) -> Type:
		params = [self._supply.fresh() for _ in fn.proto.params]
		inner = env.extend({p.text: Scheme.monomorphic(t) for p, t in zip(fn.proto.params, params)})
		result = self.visit(fn.body, inner)
		return arrows(params or [literal_unit], result)
	
	def _call_site(self, expr:syntax.Expr, fn_type:Type, args:Sequence[syntax.Expr], env:Environment) -> Type:
		arg_types = [self.visit(a, env) for a in args] or [literal_unit]
		result = self._supply.fresh()
		self._unify(fn_type, arrows(arg_types, result), expr)
		return result
	
	def visit_Number(self, expr:syntax.Number, env:Environment):
		return literal_number
	
	def visit_Variable(self, expr:syntax.Variable, env:Environment):
		return instantiate(env.resolve(expr.nom), self._supply)
	
	def visit_Call(self, expr:syntax.Call, env:Environment):
		fn_type = instantiate(env.resolve(expr.callee), self._supply)
		return self._call_site(expr, fn_type, expr.args, env)
	
	def visit_Binary(self, expr:syntax.Binary, env:Environment):
		scheme = self._preamble.operator(expr.op)
		if scheme is None:
			raise UndefinedName(Nom(expr.op, expr.span))
		return self._call_site(expr, instantiate(scheme, self._supply), (expr.lhs, expr.rhs), env)
	
	def visit_Cond(self, expr:syntax.Cond, env:Environment):
		self._unify(literal_flag, self.visit(expr.if_part, env), expr.if_part)
		then_type = self.visit(expr.then_part, env)
		else_type = self.visit(expr.else_part, env)
		self._unify(then_type, else_type, expr)
		return then_type
	
	def visit_Let(self, expr:syntax.Let, env:Environment):
		# This is where let-polymorphism comes from.
		value = self._sub.apply(self.visit(expr.value, env))
		scheme = generalize(self._bound_vars(env), value)
		return self.visit(expr.body, env.extend({expr.nom.text: scheme}))
