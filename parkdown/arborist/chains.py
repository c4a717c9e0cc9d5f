"""
The rule-chain index: for one node, a mapping from rule name to the matching direct children.

Walking the raw children of a node to find, say, its `lang` is a linear scan, and doing it
repeatedly is both the dominant cost of tree navigation and a fine source of bugs. (Was the
language absent, or did you just look in the wrong place?) So each node gets an index,
built by one grouping pass over its children the first time anyone asks a question,
and cached on the node's own event record from then on. Nodes never change, so neither
does the index.

The index holds arena positions, not text and not copies of anything.
"""

class RuleChainIndex:
	__slots__ = ('__chains',)

	def __init__(self, children):
		"""
		`children` is an iterable of (rule_name, event_index) pairs in source order.
		Insertion order of the dictionary follows first appearance of each rule name.
		"""
		chains = {}
		for name, index in children:
			chains.setdefault(name, []).append(index)
		self.__chains = chains

	def lookup(self, name:str) -> tuple:
		""" Event indices of every direct child matching `name`, in source order; empty if none. """
		return tuple(self.__chains.get(name, ()))

	def first(self, name:str):
		""" Event index of the first direct child matching `name`, or None. """
		chain = self.__chains.get(name)
		return chain[0] if chain else None

	def count(self, name:str) -> int:
		return len(self.__chains.get(name, ()))

	def names(self) -> list:
		return list(self.__chains)

	def __contains__(self, name): return name in self.__chains
	def __len__(self): return sum(map(len, self.__chains.values()))
