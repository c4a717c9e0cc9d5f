"""
This file aggregates the exception types and agreed constants which the grammar machinery deals in.

The taxonomy follows the questions a caller actually asks:
	* Is the grammar itself bogus? That's a DefinitionError, and it's the grammar author's problem.
	* Does the text fail to match the rule I asked for? That's a GrammarFailure: the caller's input.
	* Did a perfectly good parse come back in a shape I can't use (say, no root or several roots)?
	  That's a StructuralViolation, which is distinct from a GrammarFailure on purpose.
	* Did some code ask the pipeline for something before it was ready? That's a ContractViolation,
	  which is a programming error and derives from AssertionError accordingly.

The absence of a named rule among a node's children is NOT an error anywhere in this package.
Optional grammar elements are absent all the time; queries answer with empty results.
"""

from typing import Optional

from ..support.failureprone import SourceText

SILENT_MARK = '_' # Prefix on a definition body: the rule makes no event of its own.
ATOMIC_MARK = '@' # Prefix on a definition body: the rule makes one event and hides everything inside.
TOO_DEEP = 'shallower nesting' # What a GrammarFailure expects when the text nests past the interpreter's recursion limit.

class LanguageError(ValueError):
	""" Base class of all exceptions arising from the language machinery. """

class DefinitionError(LanguageError):
	""" The grammar itself is malformed. args[0] is a message suitable for display. """

class GrammarFailure(LanguageError):
	"""
	Raised if the input does not match the requested rule.
	Parameters are:
		the name of the rule that was attempted,
		the deepest string offset the matcher reached before giving up,
		the (sorted) tuple of things that would have been acceptable there,
		optionally a SourceText for drawing a helpful picture.
	"""
	def __init__(self, rule:str, position:int, expected:tuple, source:Optional[SourceText]=None):
		super().__init__(rule, position, expected)
		self.rule, self.position, self.expected, self.source = rule, position, tuple(expected), source

	def expectation(self) -> str:
		if not self.expected: return "no way to continue"
		if len(self.expected) == 1: return "expected " + self.expected[0]
		return "expected one of " + ", ".join(self.expected)

	def __str__(self):
		message = "Rule %r failed: %s" % (self.rule, self.expectation())
		if self.source is None:
			return "At offset %d: %s" % (self.position, message)
		return self.source.complaint(slice(self.position, self.position + 1), message)

class StructuralViolation(LanguageError):
	""" A successful parse had the wrong number of top-level matches for a single-root view. """

class EmptyResult(StructuralViolation):
	def __init__(self, rule:str):
		super().__init__(rule)
		self.rule = rule
	def __str__(self): return "Rule %r produced no top-level match." % self.rule

class MultipleRoots(StructuralViolation):
	def __init__(self, rule:str, count:int):
		super().__init__(rule, count)
		self.rule, self.count = rule, count
	def __str__(self): return "Rule %r produced %d top-level matches; exactly one was required." % (self.rule, self.count)

class ContractViolation(AssertionError):
	"""
	An operation was invoked in a pipeline stage where it makes no sense.
	Parameters are the name of the operation, the current stage, and the stage(s) it would need.
	"""
	def __init__(self, operation:str, current, required):
		super().__init__(operation, current, required)
		self.operation, self.current, self.required = operation, current, required
	def __str__(self):
		wanted = " or ".join(stage.name for stage in self.required)
		return "%s() requires stage %s, but the pipeline is at %s." % (self.operation, wanted, self.current.name)
