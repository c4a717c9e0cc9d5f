"""
The matching engine: runs a set of PEG definitions over a text and produces an event list.

The event list is the entire output of a successful parse. It's flat, in pre-order:
each named (non-silent) rule that matched contributes one Event, recorded at the
moment the attempt began, and completed when the attempt succeeded. An event's
`stop` field is the index just past its last descendant, so that nesting is
recoverable by hopping from one sibling to the next without any pointers at all:

	children of events[i]:  j = i+1;  while j < events[i].stop:  yield j;  j = events[j].stop

Backtracking is a matter of truncating the list (and restoring the PUSH/POP stack,
which is an immutable tuple precisely so that a snapshot costs nothing).

When the requested rule fails, the engine reports the deepest position it reached
along with everything it would have accepted there. This is the standard
PEG farthest-failure heuristic. Inside an atomic rule the details are hidden:
the rule's own name stands in for whatever it was made of.
"""

import sys
from typing import NamedTuple

from .interface import GrammarFailure, TOO_DEEP
from ..support.foundation import allocate

VERBOSE = False

class Definition(NamedTuple):
	""" One production: a name, a body expression, and how it reports itself. """
	name: str
	body: object
	silent: bool = False
	atomic: bool = False
	provenance: object = None # Usually a line number in the grammar's source text.

class Event:
	"""
	The record for one matched rule. `chain` is where the tree layer caches
	the rule-chain index for this record, once somebody asks for it.
	"""
	__slots__ = ('rule', 'start', 'end', 'stop', 'chain')
	def __init__(self, rule:str, start:int):
		self.rule, self.start, self.end, self.stop, self.chain = rule, start, None, None, None
	def __repr__(self): return "<%s %d:%s>" % (self.rule, self.start, self.end)

class ParseState:
	""" Everything one run of the matcher needs to remember. Expressions operate on this. """
	def __init__(self, definitions:dict, text:str):
		self.definitions = definitions
		self.text = text
		self.size = len(text)
		self.events = []
		self.stack = ()
		self.predicates = 0
		self.atomic = 0
		self.furthest = 0
		self.expected = set()

	def save(self): return len(self.events), self.stack

	def restore(self, mark):
		size, self.stack = mark
		del self.events[size:]

	def miss(self, label:str, pos:int):
		""" A terminal failed here. Remember it if this is as far as anything has got. """
		if self.predicates or self.atomic: return
		self.note(label, pos)

	def note(self, label:str, pos:int):
		if pos > self.furthest:
			self.furthest = pos
			self.expected = {label}
		elif pos == self.furthest:
			self.expected.add(label)

	def call(self, name:str, pos:int):
		definition = self.definitions[name]
		if definition.silent or self.atomic:
			return definition.body.match(self, pos)
		mark = self.save()
		event = Event(name, pos)
		allocate(self.events, event)
		if definition.atomic:
			self.atomic += 1
			try: end = definition.body.match(self, pos)
			finally: self.atomic -= 1
			if end is None and not self.predicates: self.note(name, pos)
		else:
			end = definition.body.match(self, pos)
		if end is None:
			self.restore(mark)
			return None
		event.end, event.stop = end, len(self.events)
		return end

def parse(definitions:dict, rule:str, text:str, source=None) -> list:
	"""
	Match `rule` at the start of `text`. Return the event list, or raise GrammarFailure.
	The rule need not consume the whole text; grammars which care say so with EOI.

	The matcher recurses once (or a few times) per level of nesting in the text.
	Text nested deeper than Python's recursion limit allows is reported as a
	GrammarFailure near the deepest rule it had reached, expecting TOO_DEEP.
	"""
	state = ParseState(definitions, text)
	try: end = state.call(rule, 0)
	except RecursionError:
		position = state.events[-1].start if state.events else 0
		if VERBOSE: print("Rule %r nested too deeply at offset %d." % (rule, position), file=sys.stderr)
		raise GrammarFailure(rule, position, [TOO_DEEP], source) from None
	if end is None:
		if VERBOSE: print("Rule %r failed at offset %d of %d." % (rule, state.furthest, len(text)), file=sys.stderr)
		raise GrammarFailure(rule, state.furthest, sorted(state.expected), source)
	if VERBOSE: print("Rule %r matched %d of %d characters in %d events." % (rule, end, len(text), len(state.events)), file=sys.stderr)
	return state.events
