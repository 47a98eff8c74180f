"""
Typing environments: which scheme goes with which name.

This is the canonical list-structured search. Each layer is immutable;
to bind more names, make a new layer atop the old one.
"""
import abc
from typing import Mapping, Optional
from .ontology import Nom
from .schemes import Scheme
from .substitution import Substitution
from .types import TVar

class UndefinedName(LookupError):
	def __init__(self, nom:Nom):
		super().__init__(nom.text)
		self.nom = nom

class Environment(abc.ABC):
	@abc.abstractmethod
	def lookup(self, name:str) -> Optional[Scheme]:
		pass
	
	@abc.abstractmethod
	def free_vars(self) -> tuple[TVar, ...]:
		""" The variables the environment has a stake in, which therefore must not be generalized """
		pass
	
	@abc.abstractmethod
	def apply(self, sub:Substitution) -> "Environment":
		pass
	
	def resolve(self, nom:Nom) -> Scheme:
		scheme = self.lookup(nom.text)
		if scheme is None:
			raise UndefinedName(nom)
		return scheme
	
	def extend(self, bindings:Mapping[str, Scheme]) -> "Environment":
		return InnerEnv(bindings, self)

class NullEnv(Environment):
	""" Effectively the built-in scope, but with nothing built in. """
	def lookup(self, name:str) -> Optional[Scheme]: return None
	def free_vars(self) -> tuple[TVar, ...]: return ()
	def apply(self, sub:Substitution) -> Environment: return self

null_env = NullEnv()

class InnerEnv(Environment):
	def __init__(self, bindings:Mapping[str, Scheme], static_link:Environment):
		assert all(isinstance(s, Scheme) for s in bindings.values()), bindings
		self._bindings = dict(bindings)
		self._static_link = static_link
		self._free = None
	
	def lookup(self, name:str) -> Optional[Scheme]:
		if name in self._bindings:
			return self._bindings[name]
		return self._static_link.lookup(name)
	
	def free_vars(self) -> tuple[TVar, ...]:
		if self._free is None:
			seen = dict.fromkeys(self._static_link.free_vars())
			for scheme in self._bindings.values():
				scheme.body.poll(seen)
			self._free = tuple(seen)
		return self._free
	
	def apply(self, sub:Substitution) -> Environment:
		if not sub: return self
		bindings = {name: scheme.apply(sub) for name, scheme in self._bindings.items()}
		return InnerEnv(bindings, self._static_link.apply(sub))
