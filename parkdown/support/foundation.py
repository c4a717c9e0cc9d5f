""" Small is beautiful. These algorithms need no introduction. """

def allocate(a_list:list, item):
	"""
	Append an item to a list, and return the new item's index in that list.
	The event list of a parse grows this way, one record per rule attempt.
	"""
	idx = len(a_list)
	a_list.append(item)
	return idx

def fixed_point(seed:set, candidates, predicate) -> set:
	"""
	Grow a set until it stops growing: each candidate joins once the
	predicate accepts it in light of the current set. The nullable-rule
	computation is the obvious customer.
	"""
	result = set(seed)
	pending = [c for c in candidates if c not in result]
	while True:
		joined = [c for c in pending if predicate(c, result)]
		if not joined: return result
		result.update(joined)
		pending = [c for c in pending if c not in result]

def strongly_connected_components_by_tarjan(graph):
	"""
	See https://en.wikipedia.org/wiki/Tarjan%27s_strongly_connected_components_algorithm
	Returns a list of strongly-connected components in reverse topological order.
	Each component is a list of member node numbers. Deviating slightly from the wikipedia
	presentation, the low-link is local to the recursive call, eliminating one confusion.

	It's expected that graph[q] is the list of arcs from q.
	"""
	def unvisited(q): return index[q] is None
	def connect(q) -> int:
		low_link = index[q] = allocate(stack, q)
		on_stack[q] = True
		for r in graph[q]:
			if unvisited(r): low_link = min(low_link, connect(r))
			elif on_stack[r]: low_link = min(low_link, index[r])
		if low_link == index[q]:  # i.e. if node q is the root of an SCC:
			component = stack[low_link:]
			del stack[low_link:]
			for r in component: on_stack[r] = False
			output.append(component)
		return low_link
	size = len(graph)
	index = [None] * size
	on_stack = [False] * size
	stack = []
	output = []
	for q in range(size):
		if unvisited(q): connect(q)
	return output

def strongly_connected_components_hashable(graph:dict):
	"""
	Adaptation of Tarjan's SCC algorithm for rule names rather than strictly integers.
	The input graph is represented as a dictionary, with values being iterables of keys.
	Arcs to keys absent from the dictionary are ignored. The result will again be lists of keys.
	"""
	table = list(graph.keys())
	index = {key:i for i,key in enumerate(table)}
	prime = [
		[index[arc] for arc in node if arc in index]
		for node in graph.values()
	]
	return [[table[q] for q in component] for component in strongly_connected_components_by_tarjan(prime)]

def cycles(graph:dict) -> list:
	"""
	The strongly-connected components which actually contain a cycle:
	either more than one member, or a single member with an arc to itself.
	"""
	return [
		component for component in strongly_connected_components_hashable(graph)
		if len(component) > 1 or component[0] in graph[component[0]]
	]
