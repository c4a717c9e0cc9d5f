"""
Grammar objects: a named collection of PEG definitions which knows how to check itself and parse text.

Definitions go in through `define(...)`, in any order, mentioning rules not yet defined.
The first call to `parse(...)` (or `validate()`, or asking for `rules`) freezes the grammar
after checking it over. Checking means:
	* Every rule mentioned is defined.
	* No rule can call itself without first consuming input (left recursion).
	* No unbounded repetition applies to something which can match the empty string.
Those last two would otherwise manifest as infinite recursion or (thanks to the engine's
no-progress guard) as silent weirdness. Better to know up front.
"""

import enum
from typing import Optional

from . import engine
from .expressions import Expression
from .interface import DefinitionError, SILENT_MARK, ATOMIC_MARK
from ..support.foundation import fixed_point, cycles
from ..support.failureprone import SourceText
from ..arborist.trees import ParseTree

class Grammar:
	def __init__(self, name="PEG Grammar"):
		self.name = name
		self.__definitions = {}
		self.__rules = None
		self.nullable = None

	def define(self, name:str, body:Expression, *, silent=False, atomic=False, provenance=None):
		assert self.__rules is None, "Definitions may not be added to a grammar once it is in use."
		assert isinstance(body, Expression), type(body)
		assert not (silent and atomic), name
		if name in self.__definitions: raise DefinitionError("Rule %r is defined twice."%name)
		self.__definitions[name] = engine.Definition(name, body, silent, atomic, provenance)

	def __contains__(self, name): return name in self.__definitions
	def __getitem__(self, name) -> engine.Definition: return self.__definitions[name]
	def __iter__(self): return iter(self.__definitions)
	def __len__(self): return len(self.__definitions)

	def validate(self):
		if self.__rules is not None: return
		definitions = self.__definitions
		for d in definitions.values():
			for name in d.body.calls():
				if name not in definitions:
					raise DefinitionError("Rule %r refers to undefined rule %r."%(d.name, name))
		nullable = fixed_point((), definitions, lambda name, known: definitions[name].body.is_nullable(known))
		for component in cycles({name: set(d.body.leading(nullable)) for name, d in definitions.items()}):
			raise DefinitionError("Left recursion among rules: %s"%", ".join(sorted(component)))
		for d in definitions.values():
			for bogon in d.body.unbounded_nullable(nullable):
				raise DefinitionError("Rule %r repeats %s, which can match the empty string."%(d.name, bogon.item))
		self.nullable = frozenset(nullable)
		self.__rules = enum.Enum('Rule', [name for name, d in definitions.items() if not d.silent])

	@property
	def rules(self) -> type:
		""" The enumeration of all non-silent rule names. Member names are the rule names. """
		self.validate()
		return self.__rules

	def parse(self, rule, text:str, *, filename:Optional[str]=None) -> ParseTree:
		""" `rule` is a member of `self.rules` or the plain name of any rule. """
		self.validate()
		name = getattr(rule, 'name', rule)
		if name not in self.__definitions: raise KeyError(name)
		source = SourceText(text, filename=filename)
		events = engine.parse(self.__definitions, name, text, source)
		return ParseTree(self, name, source, events)

	def display(self):
		""" Print the rule set, more or less as the grammar notation would spell it. """
		for d in self.__definitions.values():
			mark = SILENT_MARK if d.silent else ATOMIC_MARK if d.atomic else ''
			print("%s = %s{ %s }"%(d.name, mark, d.body))
