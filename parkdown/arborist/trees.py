"""
Trees over the flat event list a parse produces.

The engine's output is an arena: one list of event records in pre-order, each knowing its
rule, its span, and where its descendants stop. Nothing in it points anywhere, and no text
is copied out of the input. That's lovely for the engine and unlovely for everyone else,
so this module puts a face on it:

	ParseTree: the facade for one parse. It owns the input text (via a SourceText) and the
		event list, and it hands out the top-level matches. A caller who wanted exactly one
		top-level match and got some other number hears about it as a StructuralViolation.

	Node: a view of one record: just (tree, index). Making one costs next to nothing, and two
		views of the same record are equal. Text comes out of the input only when asked for.
		Queries by rule name go through the record's RuleChainIndex, built on first use.

Every query which takes a rule accepts either a member of the grammar's Rule enumeration
or the plain name. Absence of a rule is never an error: it's an empty string, an empty
tuple, or None, as befits the question.
"""

from typing import NamedTuple, Optional, Iterator

from .chains import RuleChainIndex
from .describe import describe
from ..peg.interface import EmptyResult, MultipleRoots
from ..support.failureprone import SourceText

def rule_name(rule) -> str:
	return getattr(rule, 'name', rule)

class Span(NamedTuple):
	""" Half-open offsets [start, end) into the original text. """
	start: int
	end: int
	def width(self): return self.end - self.start
	def as_slice(self): return slice(self.start, self.end)

class ParseTree:
	def __init__(self, grammar, rule:str, source:SourceText, events:list):
		self.grammar = grammar
		self.rule = rule
		self.source = source
		self.events = events

	@property
	def text(self) -> str: return self.source.content

	def __len__(self): return len(self.events)

	def node(self, index:int) -> "Node":
		return Node(self, index)

	def roots(self) -> tuple:
		""" The top-level matches, in order. Usually exactly one, unless the rule asked for was silent. """
		found, index = [], 0
		while index < len(self.events):
			found.append(Node(self, index))
			index = self.events[index].stop
		return tuple(found)

	def to_root(self) -> "Node":
		roots = self.roots()
		if not roots: raise EmptyResult(self.rule)
		if len(roots) > 1: raise MultipleRoots(self.rule, len(roots))
		return roots[0]

	def nodes(self) -> Iterator["Node"]:
		""" The flat event stream, as nodes, in pre-order. """
		return (Node(self, i) for i in range(len(self.events)))

	def describe(self) -> str:
		return "\n".join(describe(root) for root in self.roots())

class Node:
	__slots__ = ('tree', 'index')

	def __init__(self, tree:ParseTree, index:int):
		self.tree, self.index = tree, index

	def __eq__(self, other):
		return isinstance(other, Node) and self.tree is other.tree and self.index == other.index
	def __hash__(self): return hash((id(self.tree), self.index))
	def __repr__(self): return "<Node %s [%d:%d]>" % (self.name, self.start, self.end)

	@property
	def record(self): return self.tree.events[self.index]
	@property
	def name(self) -> str: return self.record.rule
	@property
	def rule(self):
		""" The member of the grammar's Rule enumeration for this node. """
		return self.tree.grammar.rules[self.record.rule]
	@property
	def start(self) -> int: return self.record.start
	@property
	def end(self) -> int: return self.record.end
	@property
	def span(self) -> Span: return Span(self.record.start, self.record.end)
	@property
	def text(self) -> str:
		record = self.record
		return self.tree.text[record.start:record.end]

	@property
	def children(self) -> tuple:
		events, record = self.tree.events, self.record
		found, index = [], self.index + 1
		while index < record.stop:
			found.append(Node(self.tree, index))
			index = events[index].stop
		return tuple(found)

	def is_leaf(self) -> bool: return self.record.stop == self.index + 1
	def has_children(self) -> bool: return not self.is_leaf()

	### Queries through the rule-chain index.

	def chain(self) -> RuleChainIndex:
		record = self.record
		if record.chain is None:
			record.chain = RuleChainIndex((child.name, child.index) for child in self.children)
		return record.chain

	def get_rules(self, rule) -> tuple:
		""" Every direct child matching the rule, in source order. """
		return tuple(Node(self.tree, i) for i in self.chain().lookup(rule_name(rule)))

	def find_rule(self, rule) -> Optional["Node"]:
		""" The first direct child matching the rule, or None. """
		index = self.chain().first(rule_name(rule))
		return None if index is None else Node(self.tree, index)

	def get_rule_text(self, rule) -> str:
		""" Concatenated text of every direct child matching the rule. Empty if there are none. """
		return ''.join(node.text for node in self.get_rules(rule))

	def has_rule(self, rule) -> bool: return rule_name(rule) in self.chain()
	def how_many(self, rule) -> int: return self.chain().count(rule_name(rule))

	def find_chain(self, *rules) -> Optional["Node"]:
		"""
		Follow a chain of rule names down through successive indexes, taking the first match at
		each step: e.g. fenced_code.find_chain('fence_defn', 'lang'). None at the first miss.
		"""
		node = self
		for rule in rules:
			node = node.find_rule(rule)
			if node is None: return None
		return node

	### Traversals.

	def descendants(self, rule=None) -> Iterator["Node"]:
		""" Proper descendants in pre-order, optionally only those matching a rule. """
		name = None if rule is None else rule_name(rule)
		for index in range(self.index + 1, self.record.stop):
			if name is None or self.tree.events[index].rule == name:
				yield Node(self.tree, index)

	def leaves(self) -> Iterator["Node"]:
		"""
		Descendants with no children, in order. Their texts alone do not cover the span:
		literal punctuation (the "#" of a heading) belongs to no rule. Use fragments() for that.
		"""
		return (node for node in self.descendants() if node.is_leaf())

	def segments(self) -> Iterator[tuple]:
		"""
		One level of the node, covering its whole span: (child, child.text) for each child,
		and (None, text) for any stretch of text that no child claims. Literal punctuation
		in the grammar (such as the "#" of a heading) turns up in those stretches.
		"""
		text, cursor = self.tree.text, self.start
		for child in self.children:
			if child.start > cursor: yield None, text[cursor:child.start]
			yield child, child.text
			cursor = child.end
		if cursor < self.end: yield None, text[cursor:self.end]

	def fragments(self) -> Iterator[tuple]:
		""" Like segments(), but all the way down to leaves. Joining the texts reproduces self.text exactly. """
		for part, text in self.segments():
			if part is None or part.is_leaf(): yield part, text
			else: yield from part.fragments()
