"""
Build the primitive namespace: the built-in type constructors,
the signatures of the operators, and a few built-in terms.

The lot is bundled into a Preamble, which the inference driver takes
as explicit configuration rather than reaching for it as global state.
"""
from typing import Callable, Mapping, Optional
from .kinds import STAR, kind_of_arity
from .types import Type, TCon, TApp, TGen, arrows
from .schemes import Scheme
from .environment import Environment, null_env

def _built_in_type(name:str, arity:int=0) -> TCon:
	return TCon(name, kind_of_arity(arity))

literal_number = _built_in_type("number")
literal_flag = _built_in_type("flag")
literal_unit = _built_in_type("unit")
LIST = _built_in_type("list", 1)

def list_of(element:Type) -> Type:
	return TApp(LIST, element)

def _polymorphic(nr_params:int, build:Callable[..., Type]) -> Scheme:
	""" For writing down the scheme of a built-in directly in terms of its placeholders """
	placeholders = [TGen(i) for i in range(nr_params)]
	return Scheme([STAR] * nr_params, build(*placeholders))

def _mono(typ:Type) -> Scheme: return Scheme.monomorphic(typ)

_arithmetic = _mono(arrows([literal_number, literal_number], literal_number))
_comparison = _mono(arrows([literal_number, literal_number], literal_flag))
_logical = _mono(arrows([literal_flag, literal_flag], literal_flag))

binary_ops = {
	"+": _arithmetic,
	"-": _arithmetic,
	"*": _arithmetic,
	"/": _arithmetic,
	"<": _comparison,
	">": _comparison,
	"==": _polymorphic(1, lambda a: arrows([a, a], literal_flag)),
	"&&": _logical,
	"||": _logical,
}

built_in_terms = {
	"true": _mono(literal_flag),
	"false": _mono(literal_flag),
	"nil": _polymorphic(1, lambda a: list_of(a)),
	"cons": _polymorphic(1, lambda a: arrows([a, list_of(a)], list_of(a))),
	"head": _polymorphic(1, lambda a: arrows([list_of(a)], a)),
	"tail": _polymorphic(1, lambda a: arrows([list_of(a)], list_of(a))),
	"is_empty": _polymorphic(1, lambda a: arrows([list_of(a)], literal_flag)),
}

class Preamble:
	""" Everything an inference run knows before it reads the first declaration. """
	def __init__(self, ops:Mapping[str, Scheme], terms:Mapping[str, Scheme]):
		self.ops = dict(ops)
		self.terms = dict(terms)
	
	def operator(self, glyph:str) -> Optional[Scheme]:
		return self.ops.get(glyph)
	
	def environment(self) -> Environment:
		return null_env.extend(self.terms)
	
	def extern_type(self, nr_params:int) -> Type:
		""" Foreign functions take and return numbers. Nullary ones take unit. """
		return arrows([literal_number] * nr_params or [literal_unit], literal_number)

standard_preamble = Preamble(binary_ops, built_in_terms)
